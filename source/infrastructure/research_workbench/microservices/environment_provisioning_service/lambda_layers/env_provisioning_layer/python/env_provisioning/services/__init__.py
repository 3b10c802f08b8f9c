# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from .data_egress_service import DataEgressService
from .entity_services import (
    AwsAccountsService,
    EnvironmentScService,
    EnvTypeConfigService,
    EnvTypeService,
    IndexesService,
)

__all__ = [
    "AwsAccountsService",
    "DataEgressService",
    "EnvironmentScService",
    "EnvTypeConfigService",
    "EnvTypeService",
    "IndexesService",
]
