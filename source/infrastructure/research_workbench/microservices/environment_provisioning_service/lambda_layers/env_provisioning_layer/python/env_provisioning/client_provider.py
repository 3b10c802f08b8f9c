# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import re

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from env_provisioning.constants import NOT_FOUND_ERROR_CODES
from microservice_shared.aws_clients import get_service_client

logger = Logger(service="Environment Provisioning Client Provider", level="INFO")

DEFAULT_SESSION_NAME = 'RaaS-env-provisioning'
_SESSION_NAME_INVALID_CHARS = re.compile(r'[^\w+=,.@-]')


def find_or_none(fn, **kwargs):
    """
    Call an AWS API and return its response, or None when the entity does not exist.

    Only the not-found error codes are mapped to None, every other ClientError is raised.
    """
    try:
        return fn(**kwargs)
    except ClientError as e:
        if e.response['Error']['Code'] in NOT_FOUND_ERROR_CODES:
            return None
        raise


def account_id_from_arn(arn: str) -> str:
    # arn:aws:iam::<account-id>:role/<role-name>
    return arn.split(':')[4]


def session_name_for(principal_identifier: dict = None) -> str:
    username = (principal_identifier or {}).get('username')
    if not username:
        return DEFAULT_SESSION_NAME
    return _SESSION_NAME_INVALID_CHARS.sub('-', f'RaaS-{username}')[:64]


class ClientProvider:
    """
    Creates boto3 clients that act as a given IAM role by assuming it through STS.
    """

    def __init__(self, session_name: str = DEFAULT_SESSION_NAME, region: str = None):
        self.session_name = session_name
        self.region = region

    def for_principal(self, principal_identifier: dict = None):
        return ClientProvider(session_name=session_name_for(principal_identifier), region=self.region)

    def get_credentials_for_role(self, role_arn: str, external_id: str = None) -> dict:
        params = {'RoleArn': role_arn, 'RoleSessionName': self.session_name}
        if external_id:
            params['ExternalId'] = external_id
        response = get_service_client('sts').assume_role(**params)
        return response['Credentials']

    def get_client_for_role(self, role_arn: str, client_name: str, external_id: str = None, region: str = None):
        logger.info(f'Creating {client_name} client by assuming role {role_arn}')
        credentials = self.get_credentials_for_role(role_arn, external_id)
        kwargs = {
            'aws_access_key_id': credentials['AccessKeyId'],
            'aws_secret_access_key': credentials['SecretAccessKey'],
            'aws_session_token': credentials['SessionToken'],
        }
        region = region or self.region
        if region:
            kwargs['region_name'] = region
        return get_service_client(client_name, **kwargs)
