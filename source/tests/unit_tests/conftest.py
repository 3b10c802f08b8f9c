# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import os

import pytest

from microservice_shared.aws_clients import reset_service_clients

os.environ.setdefault('AWS_ACCESS_KEY_ID', 'testing')
os.environ.setdefault('AWS_SECRET_ACCESS_KEY', 'testing')
os.environ.setdefault('AWS_SECURITY_TOKEN', 'testing')
os.environ.setdefault('AWS_SESSION_TOKEN', 'testing')
os.environ.setdefault('AWS_DEFAULT_REGION', 'us-east-1')
os.environ.setdefault('AWS_REGION', 'us-east-1')
os.environ.setdefault('SOLUTION_ID', 'SO9999')
os.environ.setdefault('SOLUTION_VERSION', 'v1.0.0')

# module level configuration of the Lambda handlers
os.environ.setdefault('STATE_MACHINE_ARN', 'arn:aws:states:us-east-1:123456789012:stateMachine:env-provisioning')
os.environ.setdefault('WORKFLOW_STATE_TABLE', 'rw-workflow-state')
os.environ.setdefault('RESOURCE_PREFIX', 'rw')
os.environ.setdefault('METRICS_NAMESPACE', 'rw-metrics')
os.environ.setdefault('ENV_MGMT_ROLE_ARN', 'arn:aws:iam::123456789012:role/rw-env-mgmt')


@pytest.fixture(autouse=True)
def _reset_service_clients():
    # cached clients must not leak between moto contexts
    reset_service_clients()
    yield
    reset_service_clients()
