# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

_TYPE_CHECKS = {
    'string': lambda value: isinstance(value, str),
    'boolean': lambda value: isinstance(value, bool),
    'number': lambda value: isinstance(value, (int, float)) and not isinstance(value, bool),
    'object': lambda value: isinstance(value, dict),
}


class MissingPayloadKeyError(KeyError):
    def __init__(self, key, store_title):
        super().__init__(key)
        self.key = key
        self.store_title = store_title

    def __str__(self):
        return f'"{self.key}" key is not found in the {self.store_title}'


class PayloadTypeError(TypeError):
    pass


class KeyGetter:
    """
    Typed accessors over a key/value lookup. Required getters raise when the key is absent,
    optional getters fall back to a default.
    """

    store_title = 'store'

    def get_value(self, key):
        raise NotImplementedError

    def _typed(self, key, type_name):
        value = self.get_value(key)
        if value is None:
            raise MissingPayloadKeyError(key, self.store_title)
        if not _TYPE_CHECKS[type_name](value):
            raise PayloadTypeError(
                f'"{key}" in the {self.store_title} is expected to be of type "{type_name}" '
                f'but found "{type(value).__name__}"'
            )
        return value

    def _optional(self, key, type_name, default):
        value = self.get_value(key)
        if value is None:
            return default
        return self._typed(key, type_name)

    def string(self, key) -> str:
        return self._typed(key, 'string')

    def number(self, key):
        return self._typed(key, 'number')

    def boolean(self, key) -> bool:
        return self._typed(key, 'boolean')

    def object(self, key) -> dict:
        return self._typed(key, 'object')

    def optional_string(self, key, default=None):
        return self._optional(key, 'string', default)

    def optional_number(self, key, default=None):
        return self._optional(key, 'number', default)

    def optional_boolean(self, key, default=None):
        return self._optional(key, 'boolean', default)

    def optional_object(self, key, default=None):
        return self._optional(key, 'object', default)

    def check_keys(self, key_types: dict):
        """
        Validate a ``{key: type_tag}`` contract. Tags prefixed with "optional" only check the type
        when the key is present.
        """
        for key, type_tag in key_types.items():
            if type_tag.startswith('optional'):
                type_name = type_tag[len('optional'):].lower()
                self._optional(key, type_name, None)
            else:
                self._typed(key, type_tag)


class WorkflowPayload(KeyGetter):
    """
    The payload shared by all steps of a workflow instance.

    The payload is the workflow input plus the keys written by each step. Lookups see the most
    recent write for a key. Values are returned by reference so a step may update a returned
    dict in place (for example adding "namespace" to "resolvedVars") and the change is persisted
    with the workflow instance.
    """

    store_title = 'workflow payload'

    def __init__(self, input_payload: dict = None, step_outputs: dict = None, step_index: int = 0):
        self.input = input_payload if input_payload is not None else {}
        self.step_outputs = step_outputs if step_outputs is not None else {}
        self.step_index = step_index

    def get_value(self, key):
        for index in sorted(self.step_outputs, key=int, reverse=True):
            outputs = self.step_outputs[index]
            if key in outputs and outputs[key] is not None:
                return outputs[key]
        return self.input.get(key)

    def set_key(self, key, value):
        self.step_outputs.setdefault(str(self.step_index), {})[key] = value

    def to_payload_content(self) -> dict:
        content = dict(self.input)
        for index in sorted(self.step_outputs, key=int):
            content.update(self.step_outputs[index])
        return content


class StepState(KeyGetter):
    """
    Durable key/value state private to one step, such as the AWS Service Catalog record id a
    polling step has to re-query on every attempt.
    """

    store_title = 'step state'

    def __init__(self, values: dict = None):
        self.values = values if values is not None else {}

    def get_value(self, key):
        return self.values.get(key)

    def set_key(self, key, value):
        self.values[key] = value
