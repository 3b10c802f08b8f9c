# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from aws_lambda_powertools import Logger

from workflow_engine.payload import StepState, WorkflowPayload
from workflow_engine.step_loop import StepLoop

logger = Logger(service="Workflow Runner", level="INFO")


class WorkflowRunner:
    """
    Runs a single tick of one step of a persisted workflow instance: load the instance, rebuild
    the step with its payload view, state and loop memento, tick, and save everything back.
    """

    def __init__(self, state_store, workflows: dict, settings=None, services=None):
        self.state_store = state_store
        self.workflows = workflows
        self.settings = settings
        self.services = services

    def step_classes(self, workflow: str) -> list:
        if workflow not in self.workflows:
            raise ValueError(f'Unknown workflow "{workflow}". Supported workflows: {sorted(self.workflows)}')
        return self.workflows[workflow]

    def run_step(self, workflow_instance_id: str, step_index: int) -> dict:
        instance = self.state_store.load_instance(workflow_instance_id)
        step_classes = self.step_classes(instance['workflow'])
        if step_index < 0 or step_index >= len(step_classes):
            raise IndexError(f'Workflow "{instance["workflow"]}" has no step at index {step_index}')

        step_key = str(step_index)
        step_record = instance['steps'].setdefault(step_key, {})
        payload = WorkflowPayload(instance['input'], instance['stepOutputs'], step_index)
        state = StepState(step_record.setdefault('state', {}))
        step = step_classes[step_index](
            payload=payload,
            state=state,
            settings=self.settings,
            services=self.services,
        )
        loop = StepLoop(step, step_record.get('loop'))

        logger.info(f'Running step {step_index} ({step.__class__.__name__}) of workflow instance {workflow_instance_id}')
        decision = loop.tick()
        logger.info(f'Step {step_index} decision: {decision}')

        step_record['loop'] = loop.get_memento()
        step_record['status'] = decision['type']
        self.state_store.save_instance(instance)
        return decision
