# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from aws_lambda_powertools import Logger

logger = Logger(service="Environment Provisioning Plugin Registry", level="INFO")


class PluginRegistryService:
    """
    Ordered registry of plugins per extension point.

    A plugin is any object; a hook is one of its methods taking the payload dict and returning the
    (possibly updated) payload dict. Plugins that do not implement a hook are skipped.
    """

    def __init__(self):
        self._plugins = {}

    def register(self, extension_point: str, plugin):
        self._plugins.setdefault(extension_point, []).append(plugin)
        return self

    def get_plugins(self, extension_point: str) -> list:
        return list(self._plugins.get(extension_point, []))

    def visit_plugins(self, extension_point: str, method_name: str, payload: dict = None,
                      continue_on_error: bool = False):
        """
        Call ``method_name`` on every plugin of the extension point in registration order, threading
        the payload returned by one plugin into the next, and return the last payload.

        The first plugin exception propagates and stops the visit, unless ``continue_on_error`` is
        set, in which case the errors are collected into ``payload["pluginErrors"]``.
        """
        result = payload
        errors = []
        for plugin in self.get_plugins(extension_point):
            method = getattr(plugin, method_name, None)
            if not callable(method):
                continue
            try:
                returned = method(result)
                if returned is not None:
                    result = returned
            except Exception as e:
                if not continue_on_error:
                    raise
                logger.error(f'Plugin {plugin.__class__.__name__}.{method_name} failed: {e}')
                errors.append(e)

        if errors:
            result = dict(result or {})
            result['pluginErrors'] = errors
        return result
