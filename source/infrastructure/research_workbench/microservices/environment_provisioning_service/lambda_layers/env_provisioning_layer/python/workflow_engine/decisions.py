# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Decisions a workflow step hands back to the step loop.

A step never blocks while waiting for a long running AWS operation. Instead its ``start`` method
returns a wait decision describing how often to call a check method, how many times to try, and
which methods to call when the check succeeds or the attempts run out. The decision is persisted
as a small memento between invocations so that any worker can pick the loop up again.
"""


class WaitDecision:
    type_label = 'w'

    def __init__(self, seconds=1, max_attempts=None, check=None, then_call=None, otherwise=None):
        self.seconds = seconds
        self.max = max_attempts
        self.check = check
        self.then_call = then_call
        self.otherwise = otherwise

    @classmethod
    def is_memento(cls, memento: dict) -> bool:
        return memento.get('t') == cls.type_label

    def decrement(self):
        if self.max is not None:
            self.max -= 1

    def reached_max(self) -> bool:
        return self.max is not None and self.max <= 0

    def check_not_boolean_message(self) -> str:
        return f'The wait decision check method "{self.check}" must return a boolean.'

    def max_reached_message(self) -> str:
        return f'The wait decision reached the maximum number of attempts while waiting on "{self.check}".'

    def get_memento(self) -> dict:
        return {
            't': self.type_label,
            's': self.seconds,
            'm': self.max,
            'c': self.check,
            'tc': self.then_call,
            'oc': self.otherwise,
        }

    @classmethod
    def from_memento(cls, memento: dict):
        return cls(
            seconds=memento.get('s', 1),
            max_attempts=memento.get('m'),
            check=memento.get('c'),
            then_call=memento.get('tc'),
            otherwise=memento.get('oc'),
        )


class CallDecision:
    type_label = 'c'

    def __init__(self, method_name):
        self.method_name = method_name

    @classmethod
    def is_memento(cls, memento: dict) -> bool:
        return memento.get('t') == cls.type_label

    def get_memento(self) -> dict:
        return {'t': self.type_label, 'n': self.method_name}

    @classmethod
    def from_memento(cls, memento: dict):
        return cls(memento['n'])


class WaitDecisionBuilder:
    """
    Fluent builder returned by ``StepBase.wait``::

        return (
            self.wait(5)
            .max_attempts(1296000)
            .until('should_resume_workflow')
            .then_call('on_successful_completion')
            .otherwise_call('report_timeout')
        )
    """

    def __init__(self, seconds):
        self._seconds = seconds
        self._max = None
        self._check = None
        self._then = None
        self._otherwise = None

    def max_attempts(self, count):
        self._max = count
        return self

    def until(self, method_name):
        self._check = method_name
        return self

    def then_call(self, method_name):
        self._then = method_name
        return self

    def otherwise_call(self, method_name):
        self._otherwise = method_name
        return self

    def to_wait_decision(self) -> WaitDecision:
        return WaitDecision(
            seconds=self._seconds,
            max_attempts=self._max,
            check=self._check,
            then_call=self._then,
            otherwise=self._otherwise,
        )


SUPPORTED_DECISIONS = [WaitDecision, CallDecision]


def decision_from_memento(memento: dict):
    for decision_class in SUPPORTED_DECISIONS:
        if decision_class.is_memento(memento):
            return decision_class.from_memento(memento)
    raise ValueError(f'The decision queue contains an unknown decision {memento}.')
