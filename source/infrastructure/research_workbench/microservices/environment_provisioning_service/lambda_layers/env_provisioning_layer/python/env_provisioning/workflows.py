# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from workflow_engine.services import ServicesContainer

from env_provisioning.client_provider import ClientProvider
from env_provisioning.constants import EXTENSION_POINT
from env_provisioning.plugin_registry import PluginRegistryService
from env_provisioning.plugins import EnvConfigVarsPlugin, EnvironmentRecordPlugin
from env_provisioning.services import (
    AwsAccountsService,
    DataEgressService,
    EnvironmentScService,
    EnvTypeConfigService,
    EnvTypeService,
    IndexesService,
)
from env_provisioning.settings import Settings
from env_provisioning.steps import (
    LaunchProduct,
    ReadEnvironmentInfo,
    ReplicateLaunchConstraint,
    SharePortfolio,
    TerminateProduct,
)

CREATE_ENVIRONMENT = 'create'
TERMINATE_ENVIRONMENT = 'terminate'

WORKFLOWS = {
    CREATE_ENVIRONMENT: [ReadEnvironmentInfo, ReplicateLaunchConstraint, SharePortfolio, LaunchProduct],
    TERMINATE_ENVIRONMENT: [TerminateProduct],
}

STEP_NAMES = {
    ReadEnvironmentInfo: 'read-environment-info',
    ReplicateLaunchConstraint: 'replicate-launch-constraint',
    SharePortfolio: 'share-portfolio',
    LaunchProduct: 'launch-product',
    TerminateProduct: 'terminate-product',
}


def step_names(workflow: str) -> list:
    return [STEP_NAMES[step_class] for step_class in WORKFLOWS[workflow]]


def build_services(settings: Settings) -> ServicesContainer:
    """Wire the default collaborators and plugins used by the workflow steps."""
    environment_sc_service = EnvironmentScService(settings.environments_table)
    indexes_service = IndexesService(settings.indexes_table)
    aws_accounts_service = AwsAccountsService(settings.aws_accounts_table)

    plugin_registry = PluginRegistryService()
    plugin_registry.register(EXTENSION_POINT, EnvConfigVarsPlugin(indexes_service, aws_accounts_service))
    plugin_registry.register(EXTENSION_POINT, EnvironmentRecordPlugin(environment_sc_service))

    return ServicesContainer({
        'aws': ClientProvider(),
        'environmentScService': environment_sc_service,
        'envTypeService': EnvTypeService(settings.env_types_table),
        'envTypeConfigService': EnvTypeConfigService(settings.env_type_configs_table),
        'indexesService': indexes_service,
        'awsAccountsService': aws_accounts_service,
        'dataEgressService': DataEgressService(),
        'pluginRegistryService': plugin_registry,
    })
