# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import json
import os
import uuid

from aws_lambda_powertools import Logger
from cloudwatch_metrics import metrics
from microservice_shared.aws_clients import get_service_client
from microservice_shared.utilities import JsonUtil
from workflow_engine.state_store import WorkflowStateStore

from env_provisioning.workflows import WORKFLOWS, step_names

STATE_MACHINE_ARN = os.environ['STATE_MACHINE_ARN']
WORKFLOW_STATE_TABLE = os.environ['WORKFLOW_STATE_TABLE']
RESOURCE_PREFIX = os.environ['RESOURCE_PREFIX']
METRICS_NAMESPACE = os.environ['METRICS_NAMESPACE']

logger = Logger(service="Environment Provisioning Service", level="INFO")

client = get_service_client('stepfunctions')


def format_execution_input(workflow_instance_id, workflow):
    return {
        "workflowInstanceId": workflow_instance_id,
        "workflow": workflow,
        "steps": step_names(workflow),
        "stepIndex": 0,
    }


def handler(event, _):
    logger.info(f'event received:{event}')
    workflow = event.get('workflow')
    if workflow not in WORKFLOWS:
        raise ValueError(f'Unknown workflow "{workflow}". Supported workflows: {sorted(WORKFLOWS)}')
    payload = event.get('payload') or {}

    workflow_instance_id = str(uuid.uuid4())
    WorkflowStateStore(WORKFLOW_STATE_TABLE).create_instance(workflow_instance_id, workflow, payload)

    execution_input = format_execution_input(workflow_instance_id, workflow)
    response = client.start_execution(
        stateMachineArn=STATE_MACHINE_ARN,
        name=workflow_instance_id,
        input=json.dumps(execution_input)
    )

    message = f"created state machine execution response : {response} for workflow instance {workflow_instance_id}"
    logger.info(message)

    # Record anonymized metric
    metrics.Metrics(METRICS_NAMESPACE, RESOURCE_PREFIX, logger).put_metrics_count_value_1(
        metric_name=f"InvokeEnvProvisioningSM-{workflow}")

    return json.dumps(
        {"workflowInstanceId": workflow_instance_id, **response},
        default=JsonUtil.json_encoder_default
    )
