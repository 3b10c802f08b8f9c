# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import copy

from microservice_shared.dynamodb import DynamodbHelper
from microservice_shared.utilities import DateUtil, JsonUtil


class WorkflowInstanceNotFoundError(LookupError):
    pass


class WorkflowStateStore:
    """
    Persists workflow instances in a DynamoDB table, one item per instance::

        {
            "workflowInstanceId": "...",
            "workflow": "create",
            "input": {...},
            "stepOutputs": {"0": {...}, "1": {...}},
            "steps": {"0": {"state": {...}, "loop": {...}}},
            "createdAt": "...",
            "updatedAt": "..."
        }
    """

    def __init__(self, table_name: str, dynamodb_helper: DynamodbHelper = None):
        self.table_name = table_name
        self.dynamodb_helper = dynamodb_helper or DynamodbHelper()

    def create_instance(self, workflow_instance_id: str, workflow: str, input_payload: dict) -> dict:
        timestamp = DateUtil.get_current_utc_iso_timestamp()
        item = {
            'workflowInstanceId': workflow_instance_id,
            'workflow': workflow,
            'input': input_payload,
            'stepOutputs': {},
            'steps': {},
            'createdAt': timestamp,
            'updatedAt': timestamp,
        }
        self.dynamodb_helper.dynamodb_put_item(
            self.table_name,
            JsonUtil.to_dynamodb(item),
            condition_expression='attribute_not_exists(workflowInstanceId)',
        )
        return item

    def load_instance(self, workflow_instance_id: str) -> dict:
        item = self.dynamodb_helper.dynamodb_get_item(
            self.table_name, {'workflowInstanceId': workflow_instance_id}
        )
        if item is None:
            raise WorkflowInstanceNotFoundError(f'Workflow instance "{workflow_instance_id}" does not exist')
        item.setdefault('stepOutputs', {})
        item.setdefault('steps', {})
        return item

    def save_instance(self, instance: dict):
        instance['updatedAt'] = DateUtil.get_current_utc_iso_timestamp()
        self.dynamodb_helper.dynamodb_put_item(self.table_name, JsonUtil.to_dynamodb(instance))


class InMemoryWorkflowStateStore:
    """Dictionary backed store with the same interface as WorkflowStateStore."""

    def __init__(self):
        self.instances = {}

    def create_instance(self, workflow_instance_id: str, workflow: str, input_payload: dict) -> dict:
        if workflow_instance_id in self.instances:
            raise ValueError(f'Workflow instance "{workflow_instance_id}" already exists')
        timestamp = DateUtil.get_current_utc_iso_timestamp()
        item = {
            'workflowInstanceId': workflow_instance_id,
            'workflow': workflow,
            'input': input_payload,
            'stepOutputs': {},
            'steps': {},
            'createdAt': timestamp,
            'updatedAt': timestamp,
        }
        self.instances[workflow_instance_id] = copy.deepcopy(item)
        return item

    def load_instance(self, workflow_instance_id: str) -> dict:
        if workflow_instance_id not in self.instances:
            raise WorkflowInstanceNotFoundError(f'Workflow instance "{workflow_instance_id}" does not exist')
        return copy.deepcopy(self.instances[workflow_instance_id])

    def save_instance(self, instance: dict):
        instance['updatedAt'] = DateUtil.get_current_utc_iso_timestamp()
        self.instances[instance['workflowInstanceId']] = JsonUtil.to_plain(instance)
