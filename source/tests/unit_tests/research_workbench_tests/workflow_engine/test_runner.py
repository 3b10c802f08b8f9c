# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
# ###############################################################################
# PURPOSE:
#   * Unit test for workflow_engine/runner.py.
# USAGE:
#   pytest source/tests/unit_tests/research_workbench_tests/workflow_engine/test_runner.py
###############################################################################

import pytest

from workflow_engine.runner import WorkflowRunner
from workflow_engine.services import ServicesContainer
from workflow_engine.state_store import InMemoryWorkflowStateStore
from workflow_engine.step_base import StepBase


class WriteGreeting(StepBase):
    def input_keys(self):
        return {'name': 'string'}

    def output_keys(self):
        return {'greeting': 'string'}

    def start(self):
        self.payload.set_key('greeting', f'hello {self.payload.string("name")}')


class WaitForApproval(StepBase):
    def start(self):
        self.state.set_key('CHECKS', 0)
        return self.wait(5).max_attempts(10).until('is_approved')

    def is_approved(self):
        checks = self.state.number('CHECKS') + 1
        self.state.set_key('CHECKS', checks)
        return self.services.must_find('approvals').approved


class Approvals:
    approved = True


@pytest.fixture
def runner():
    store = InMemoryWorkflowStateStore()
    store.create_instance('wf-1', 'greet', {'name': 'ada'})
    return WorkflowRunner(
        state_store=store,
        workflows={'greet': [WriteGreeting, WaitForApproval]},
        services=ServicesContainer({'approvals': Approvals()}),
    )


def test_run_steps_in_order(runner):
    assert runner.run_step('wf-1', 0) == {'type': 'pass'}
    assert runner.run_step('wf-1', 1) == {'type': 'wait', 'wait': 5}
    assert runner.run_step('wf-1', 1) == {'type': 'pass'}

    instance = runner.state_store.load_instance('wf-1')
    assert instance['stepOutputs']['0'] == {'greeting': 'hello ada'}
    assert instance['steps']['1']['state'] == {'CHECKS': 1}
    assert instance['steps']['1']['status'] == 'pass'
    assert instance['steps']['1']['loop'] == {'st': 'p', 'dq': []}


def test_step_state_persists_between_ticks(runner):
    Approvals.approved = False
    try:
        runner.run_step('wf-1', 1)
        runner.run_step('wf-1', 1)
        runner.run_step('wf-1', 1)
    finally:
        Approvals.approved = True

    assert runner.state_store.load_instance('wf-1')['steps']['1']['state'] == {'CHECKS': 2}


def test_failure_is_recorded(runner):
    runner.state_store.instances['wf-1']['input'] = {}

    decision = runner.run_step('wf-1', 0)

    assert decision['type'] == 'fail'
    assert runner.state_store.load_instance('wf-1')['steps']['0']['status'] == 'fail'


def test_unknown_step_index(runner):
    with pytest.raises(IndexError):
        runner.run_step('wf-1', 2)


def test_unknown_workflow(runner):
    with pytest.raises(ValueError, match='Unknown workflow'):
        runner.step_classes('resize')
