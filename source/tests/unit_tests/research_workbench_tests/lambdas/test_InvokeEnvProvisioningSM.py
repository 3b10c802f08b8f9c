# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
# ###############################################################################
# PURPOSE:
#   * Unit test for Environment Provisioning Service/Lambdas/InvokeEnvProvisioningSM handler.
# USAGE:
#   pytest source/tests/unit_tests/research_workbench_tests/lambdas/test_InvokeEnvProvisioningSM.py
###############################################################################

import json
import unittest
from unittest.mock import patch, Mock

from workflow_engine.state_store import InMemoryWorkflowStateStore

from research_workbench.microservices.environment_provisioning_service.lambdas.InvokeEnvProvisioningSM import \
    handler as invoke_handler

STATE_MACHINE_ARN = 'arn:aws:states:us-east-1:123456789012:stateMachine:env-provisioning'


class TestInvokeEnvProvisioningSM(unittest.TestCase):

    def setUp(self):
        self.state_store = InMemoryWorkflowStateStore()
        self.stepfunctions_client = Mock()
        self.stepfunctions_client.start_execution.return_value = {
            'executionArn': f'{STATE_MACHINE_ARN}:execution-1',
            'startDate': '2024-01-01T00:00:00+00:00',
        }
        self.patches = [
            patch.object(invoke_handler, 'client', self.stepfunctions_client),
            patch.object(invoke_handler, 'WorkflowStateStore', return_value=self.state_store),
            patch.object(invoke_handler, 'metrics'),
        ]
        mocks = [p.start() for p in self.patches]
        self.mock_metrics = mocks[2]

    def tearDown(self):
        for p in self.patches:
            p.stop()

    def test_handler_create(self):
        payload = {'envId': 'env-1', 'envTypeId': 'et-1', 'envTypeConfigId': 'small', 'needsAlb': False}

        response = json.loads(invoke_handler.handler({'workflow': 'create', 'payload': payload}, None))

        workflow_instance_id = response['workflowInstanceId']
        self.assertEqual(self.state_store.load_instance(workflow_instance_id)['input'], payload)

        _, kwargs = self.stepfunctions_client.start_execution.call_args
        self.assertEqual(kwargs['stateMachineArn'], STATE_MACHINE_ARN)
        self.assertEqual(kwargs['name'], workflow_instance_id)
        self.assertEqual(json.loads(kwargs['input']), {
            'workflowInstanceId': workflow_instance_id,
            'workflow': 'create',
            'steps': ['read-environment-info', 'replicate-launch-constraint', 'share-portfolio', 'launch-product'],
            'stepIndex': 0,
        })
        self.assertEqual(response['executionArn'], f'{STATE_MACHINE_ARN}:execution-1')

        metric_kwargs = self.mock_metrics.Metrics.return_value.put_metrics_count_value_1.call_args.kwargs
        self.assertEqual(metric_kwargs['metric_name'], 'InvokeEnvProvisioningSM-create')

    def test_handler_terminate_without_payload(self):
        response = json.loads(invoke_handler.handler({'workflow': 'terminate'}, None))

        instance = self.state_store.load_instance(response['workflowInstanceId'])
        self.assertEqual(instance['workflow'], 'terminate')
        self.assertEqual(instance['input'], {})

    def test_handler_unknown_workflow(self):
        with self.assertRaises(ValueError):
            invoke_handler.handler({'workflow': 'resize'}, None)
        self.stepfunctions_client.start_execution.assert_not_called()


if __name__ == '__main__':
    unittest.main()
