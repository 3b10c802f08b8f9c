# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import os
from dataclasses import dataclass

_TRUE_VALUES = ('true', '1', 'yes', 'y')


def _to_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or '').strip().lower() in _TRUE_VALUES


@dataclass(frozen=True)
class Settings:
    """
    Immutable configuration injected into the workflow steps and collaborators.

    Values are read once from the Lambda environment variables by ``from_environ``.
    """
    env_mgmt_role_arn: str
    enable_egress_store: bool = False
    environments_table: str = ''
    env_types_table: str = ''
    env_type_configs_table: str = ''
    indexes_table: str = ''
    aws_accounts_table: str = ''
    workflow_state_table: str = ''
    metrics_namespace: str = ''
    resource_prefix: str = ''

    @classmethod
    def from_environ(cls, environ=None):
        environ = os.environ if environ is None else environ
        return cls(
            env_mgmt_role_arn=environ['ENV_MGMT_ROLE_ARN'],
            enable_egress_store=_to_bool(environ.get('ENABLE_EGRESS_STORE', 'false')),
            environments_table=environ.get('ENVIRONMENTS_TABLE', ''),
            env_types_table=environ.get('ENV_TYPES_TABLE', ''),
            env_type_configs_table=environ.get('ENV_TYPE_CONFIGS_TABLE', ''),
            indexes_table=environ.get('INDEXES_TABLE', ''),
            aws_accounts_table=environ.get('AWS_ACCOUNTS_TABLE', ''),
            workflow_state_table=environ.get('WORKFLOW_STATE_TABLE', ''),
            metrics_namespace=environ.get('METRICS_NAMESPACE', ''),
            resource_prefix=environ.get('RESOURCE_PREFIX', ''),
        )
