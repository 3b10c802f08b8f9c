# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import os

from aws_lambda_powertools import Logger
from cloudwatch_metrics import metrics
from workflow_engine.runner import WorkflowRunner
from workflow_engine.state_store import WorkflowStateStore

from env_provisioning.settings import Settings
from env_provisioning.workflows import WORKFLOWS, build_services

RESOURCE_PREFIX = os.environ['RESOURCE_PREFIX']
METRICS_NAMESPACE = os.environ['METRICS_NAMESPACE']

logger = Logger(service="Environment Provisioning Service", level="INFO")

SETTINGS = Settings.from_environ()


def build_runner(settings=SETTINGS, services=None, state_store=None):
    return WorkflowRunner(
        state_store=state_store or WorkflowStateStore(settings.workflow_state_table),
        workflows=WORKFLOWS,
        settings=settings,
        services=services or build_services(settings),
    )


def handler(event, _, runner=None):
    """
    Runs one tick of the current step and returns the event with the decision the state machine
    branches on: pass (advance to ``nextStepIndex``, ``done`` after the last step), wait (``wait``
    seconds, then call again) or fail (``error``).
    """
    logger.info(f'event received:{event}')
    workflow_instance_id = event['workflowInstanceId']
    step_index = int(event.get('stepIndex', 0))

    runner = runner or build_runner()
    decision = runner.run_step(workflow_instance_id, step_index)

    result = {**event, 'stepIndex': step_index, 'decision': decision['type']}
    if decision['type'] == 'wait':
        result['wait'] = decision['wait']
    elif decision['type'] == 'fail':
        result['error'] = decision['error']
    else:
        next_step_index = step_index + 1
        result['nextStepIndex'] = next_step_index
        result['stepIndex'] = next_step_index
        result['done'] = next_step_index >= len(runner.step_classes(event['workflow']))

    logger.info(f'workflow instance {workflow_instance_id} step {step_index} decision: {decision["type"]}')

    # Record anonymized metric
    metrics.Metrics(METRICS_NAMESPACE, RESOURCE_PREFIX, logger).put_metrics_count_value_1(
        metric_name=f"RunWorkflowStep-{decision['type']}")

    return result
