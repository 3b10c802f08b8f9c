# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

"""
The step loop drives one workflow step through start, wait and call decisions, one tick per
invocation. Between ticks only the memento is kept, so the scheduler (an AWS Step Functions
state machine waiting on the returned "wait" seconds) can resume the loop on any worker.

Memento shape::

    {
        "st": "s|w|l|p|f",   # state label: start, wait, loop, pass, fail
        "dq": [...]          # decision queue mementos
    }
"""

from aws_lambda_powertools import Logger

from workflow_engine.decisions import CallDecision, WaitDecision, WaitDecisionBuilder, decision_from_memento

STATE_LABELS = {'s': 'start', 'w': 'wait', 'l': 'loop', 'p': 'pass', 'f': 'fail'}
_LABEL_CODES = {label: code for code, label in STATE_LABELS.items()}

logger = Logger(service="Workflow Step Loop", level="INFO")


class StepLoopError(Exception):
    pass


class StepLoop:
    def __init__(self, step, memento: dict = None):
        self.step = step
        self.state_label = 'start'
        self.decision_queue = []
        if memento:
            self.set_memento(memento)

    def set_memento(self, memento: dict):
        self.state_label = STATE_LABELS.get(memento.get('st', 's'), 'start')
        self.decision_queue = [decision_from_memento(m) for m in memento.get('dq', [])]
        return self

    def get_memento(self) -> dict:
        return {
            'st': _LABEL_CODES.get(self.state_label, 'f'),
            'dq': [decision.get_memento() for decision in self.decision_queue],
        }

    def tick(self) -> dict:
        """
        Run one tick of the loop and return the decision for the scheduler:
        ``{"type": "pass"}``, ``{"type": "wait", "wait": seconds}`` or ``{"type": "fail", "error": message}``.
        """
        if self.state_label == 'pass':
            raise StepLoopError('Trying to run a step loop that has already passed.')
        if self.state_label == 'fail':
            raise StepLoopError('Trying to run a step loop that has already failed.')

        try:
            if self.state_label == 'start':
                self.step.payload.check_keys(self.step.input_keys())
                return self._process_step_decision(self.step.start())
            return self._process_decision_queue()
        except Exception as error:
            return self._call_on_fail(error)

    def _process_decision_queue(self) -> dict:
        if not self.decision_queue:
            raise StepLoopError('No decisions in the step loop to process.')
        decision = self.decision_queue[0]

        if isinstance(decision, CallDecision):
            self.decision_queue.pop(0)
            logger.info(f'Calling {decision.method_name}()')
            return self._process_step_decision(self._invoke(decision.method_name))

        decision.decrement()
        if decision.max is None or decision.check is None:
            return self._then_call_or_pass(decision)

        result = self._invoke(decision.check)
        if not isinstance(result, bool):
            raise StepLoopError(decision.check_not_boolean_message())
        if result:
            return self._then_call_or_pass(decision)
        if decision.reached_max():
            self.decision_queue.pop(0)
            if decision.otherwise:
                self.decision_queue.insert(0, CallDecision(decision.otherwise))
                return self._loop_decision()
            raise StepLoopError(decision.max_reached_message())
        return self._wait_decision(decision.seconds)

    def _then_call_or_pass(self, decision: WaitDecision) -> dict:
        self.decision_queue.pop(0)
        if decision.then_call:
            self.decision_queue.insert(0, CallDecision(decision.then_call))
            return self._loop_decision()
        return self._call_on_pass()

    def _process_step_decision(self, possible_decision) -> dict:
        if not possible_decision:
            return self._call_on_pass()

        decision = possible_decision
        if isinstance(possible_decision, WaitDecisionBuilder):
            decision = possible_decision.to_wait_decision()

        if isinstance(decision, WaitDecision):
            logger.info(f'Adding a wait decision for {decision.seconds} seconds to the decision queue')
            self.decision_queue.append(decision)
            return self._wait_decision(decision.seconds)

        if isinstance(decision, CallDecision):
            self.decision_queue.append(decision)
            return self._loop_decision()

        raise StepLoopError(f'The step returned an unsupported decision "{possible_decision!r}".')

    def _invoke(self, method_name):
        method = getattr(self.step, method_name, None)
        if not callable(method):
            raise StepLoopError(f'The step does not have a "{method_name}" method.')
        return method()

    def _call_on_pass(self) -> dict:
        self.decision_queue = []
        self.step.payload.check_keys(self.step.output_keys())
        self.step.on_pass()
        self.state_label = 'pass'
        return {'type': 'pass'}

    def _call_on_fail(self, error: Exception) -> dict:
        self.decision_queue = []
        self.state_label = 'fail'
        reported = error
        on_fail = getattr(self.step, 'on_fail', None)
        if callable(on_fail):
            try:
                on_fail(error)
            except Exception as on_fail_error:
                reported = on_fail_error
        logger.error(f'Step failed: {reported}')
        return {'type': 'fail', 'error': str(reported)}

    def _wait_decision(self, seconds) -> dict:
        self.state_label = 'wait'
        return {'type': 'wait', 'wait': seconds}

    def _loop_decision(self) -> dict:
        # call decisions run within the same tick
        self.state_label = 'loop'
        return self._process_decision_queue()
