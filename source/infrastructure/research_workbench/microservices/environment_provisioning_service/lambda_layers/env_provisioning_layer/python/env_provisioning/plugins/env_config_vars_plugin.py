# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from env_provisioning.errors import ConfigurationError


def _join_causes(causes: list) -> str:
    if len(causes) > 1:
        return f'{", ".join(causes[:-1])} and {causes[-1]}'
    return causes[0] if causes else ''


class EnvConfigVarsPlugin:
    """
    Contributes the hosting account variables of an environment (the account its index points to)
    to the resolved variables, and the standard billing tags to the default tags.
    """

    REQUIRED_ACCOUNT_VARS = [
        ('xAccEnvMgmtRoleArn', 'AWS Service Catalog Role Arn'),
        ('externalId', 'External ID'),
        ('accountId', 'AWS account ID'),
        ('vpcId', 'VPC ID'),
        ('subnetId', 'VPC Subnet ID'),
        ('encryptionKeyArn', 'Encryption Key ARN'),
    ]

    def __init__(self, indexes_service, aws_accounts_service):
        self.indexes_service = indexes_service
        self.aws_accounts_service = aws_accounts_service

    def resolve(self, payload: dict) -> dict:
        request_context = payload.get('requestContext')
        resolved_vars = dict(payload.get('resolvedVars') or {})
        index_id = resolved_vars.get('indexId')

        index = self.indexes_service.must_find(request_context, id=index_id)
        account = self.aws_accounts_service.must_find(request_context, id=index['awsAccountId'])

        causes = [title for key, title in self.REQUIRED_ACCOUNT_VARS if not account.get(key)]
        if causes:
            raise ConfigurationError(
                f'Index "{index_id}" has not been correctly configured: missing {_join_causes(causes)}.'
            )

        resolved_vars.update({key: account[key] for key, _ in self.REQUIRED_ACCOUNT_VARS})
        return {**payload, 'resolvedVars': resolved_vars}

    def get_default_tags(self, payload: dict) -> dict:
        resolved_vars = payload.get('resolvedVars') or {}
        tags = [
            {'Key': 'Description', 'Value': f'Created by {resolved_vars.get("username")}'},
            {'Key': 'Env', 'Value': resolved_vars.get('envId')},
            {'Key': 'Proj', 'Value': resolved_vars.get('projectId')},
            {'Key': 'CreatedBy', 'Value': resolved_vars.get('username')},
        ]
        return {**payload, 'tags': [*(payload.get('tags') or []), *tags]}
