# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from .env_config_vars_plugin import EnvConfigVarsPlugin
from .environment_record_plugin import EnvironmentRecordPlugin

__all__ = [
    "EnvConfigVarsPlugin",
    "EnvironmentRecordPlugin",
]
