# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
# ###############################################################################
# USAGE:
#   pytest source/tests/unit_tests/lambda_layer_tests/microservice_shared/test_aws_clients.py
###############################################################################

from unittest.mock import patch

from microservice_shared import aws_clients
from microservice_shared.aws_clients import (
    get_botocore_config,
    get_service_client,
    get_service_resource,
    reset_service_clients,
)


def test_botocore_config_user_agent(monkeypatch):
    monkeypatch.setenv('SOLUTION_ID', 'SO1234')
    monkeypatch.setenv('SOLUTION_VERSION', 'v2.0.0')

    config = get_botocore_config()

    assert config.user_agent_extra == 'AwsSolution/SO1234/v2.0.0'
    assert config.retries == {'max_attempts': 10, 'mode': 'standard'}


def test_botocore_config_overrides():
    config = get_botocore_config(region_name='eu-west-1')
    assert config.region_name == 'eu-west-1'


@patch('microservice_shared.aws_clients.boto3')
def test_service_client_is_cached(mock_boto3):
    first = get_service_client('servicecatalog')
    second = get_service_client('servicecatalog')

    assert first is second
    mock_boto3.client.assert_called_once()
    assert mock_boto3.client.call_args.args == ('servicecatalog',)


@patch('microservice_shared.aws_clients.boto3')
def test_service_client_with_credentials_is_not_cached(mock_boto3):
    get_service_client('servicecatalog', aws_access_key_id='AKID', aws_secret_access_key='secret',
                       aws_session_token='token', region_name='us-west-2')
    get_service_client('servicecatalog', aws_access_key_id='AKID', aws_secret_access_key='secret',
                       aws_session_token='token', region_name='us-west-2')

    assert mock_boto3.client.call_count == 2
    assert mock_boto3.client.call_args.kwargs['region_name'] == 'us-west-2'
    assert 'servicecatalog' not in aws_clients._service_clients


@patch('microservice_shared.aws_clients.boto3')
def test_reset_service_clients(mock_boto3):
    get_service_client('iam')
    get_service_resource('dynamodb')
    reset_service_clients()
    get_service_client('iam')
    get_service_resource('dynamodb')

    assert mock_boto3.client.call_count == 2
    assert mock_boto3.resource.call_count == 2
