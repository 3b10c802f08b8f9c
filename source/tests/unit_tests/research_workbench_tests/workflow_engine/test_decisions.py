# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
# ###############################################################################
# PURPOSE:
#   * Unit test for workflow_engine/decisions.py.
# USAGE:
#   pytest source/tests/unit_tests/research_workbench_tests/workflow_engine/test_decisions.py
###############################################################################

import pytest

from workflow_engine.decisions import CallDecision, WaitDecision, WaitDecisionBuilder, decision_from_memento


def test_builder_produces_wait_decision():
    decision = (
        WaitDecisionBuilder(5)
        .max_attempts(1296000)
        .until('should_resume_workflow')
        .then_call('on_successful_completion')
        .otherwise_call('report_timeout')
        .to_wait_decision()
    )

    assert decision.get_memento() == {
        't': 'w',
        's': 5,
        'm': 1296000,
        'c': 'should_resume_workflow',
        'tc': 'on_successful_completion',
        'oc': 'report_timeout',
    }


def test_wait_decision_memento_restores_remaining_attempts():
    decision = WaitDecision(seconds=5, max_attempts=3, check='is_done')
    decision.decrement()

    restored = decision_from_memento(decision.get_memento())

    assert isinstance(restored, WaitDecision)
    assert restored.max == 2
    assert restored.check == 'is_done'
    assert not restored.reached_max()


def test_wait_decision_reached_max():
    decision = WaitDecision(max_attempts=1)
    decision.decrement()
    assert decision.reached_max()


def test_wait_decision_without_max_never_reaches_it():
    decision = WaitDecision()
    decision.decrement()
    assert decision.max is None
    assert not decision.reached_max()


def test_call_decision_memento():
    restored = decision_from_memento(CallDecision('report_timeout').get_memento())
    assert isinstance(restored, CallDecision)
    assert restored.method_name == 'report_timeout'


def test_unknown_memento():
    with pytest.raises(ValueError, match='unknown decision'):
        decision_from_memento({'t': 'x'})
