# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

EXTENSION_POINT = 'env-provisioning'

# 5 seconds * 1296000 attempts is 15 days. The timeout messages of the polling steps name the
# 15 day period, change them together with these values.
POLL_INTERVAL_SECONDS = 5
POLL_MAX_ATTEMPTS = 1296000
POLL_TIMEOUT_DESCRIPTION = '15 days'

STACK_NAME_PREFIX = 'analysis-'
NAMESPACE_PARAM_KEY = 'Namespace'

NOT_FOUND_ERROR_CODES = ('NoSuchEntity', 'ResourceNotFoundException')
ALREADY_EXISTS_ERROR_CODE = 'EntityAlreadyExists'


class EnvironmentStatus:
    PENDING = 'PENDING'
    COMPLETED = 'COMPLETED'
    FAILED = 'FAILED'
    TERMINATING = 'TERMINATING'
    TERMINATED = 'TERMINATED'
    TERMINATING_FAILED = 'TERMINATING_FAILED'


class PluginHook:
    RESOLVE = 'resolve'
    GET_DEFAULT_TAGS = 'get_default_tags'
    ON_ENV_PROVISIONING_SUCCESS = 'on_env_provisioning_success'
    ON_ENV_PROVISIONING_FAILURE = 'on_env_provisioning_failure'
    ON_ENV_TERMINATION_SUCCESS = 'on_env_termination_success'
    ON_ENV_TERMINATION_FAILURE = 'on_env_termination_failure'
