# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
# ###############################################################################
# PURPOSE:
#   * Unit test for env_provisioning/workflows.py and env_provisioning/settings.py.
# USAGE:
#   pytest source/tests/unit_tests/research_workbench_tests/env_provisioning/test_workflows.py
###############################################################################

import pytest

from env_provisioning.client_provider import ClientProvider
from env_provisioning.constants import EXTENSION_POINT
from env_provisioning.plugins import EnvConfigVarsPlugin, EnvironmentRecordPlugin
from env_provisioning.settings import Settings
from env_provisioning.workflows import WORKFLOWS, build_services, step_names


def test_step_names():
    assert step_names('create') == [
        'read-environment-info',
        'replicate-launch-constraint',
        'share-portfolio',
        'launch-product',
    ]
    assert step_names('terminate') == ['terminate-product']


def test_every_workflow_step_has_a_name():
    for workflow in WORKFLOWS:
        assert len(step_names(workflow)) == len(WORKFLOWS[workflow])


def test_build_services():
    settings = Settings(
        env_mgmt_role_arn='arn:aws:iam::123456789012:role/rw-env-mgmt',
        environments_table='rw-environments',
        indexes_table='rw-indexes',
    )

    services = build_services(settings)

    assert isinstance(services.must_find('aws'), ClientProvider)
    assert services.must_find('environmentScService').table_name == 'rw-environments'
    plugins = services.must_find('pluginRegistryService').get_plugins(EXTENSION_POINT)
    assert [type(plugin) for plugin in plugins] == [EnvConfigVarsPlugin, EnvironmentRecordPlugin]
    assert plugins[0].indexes_service.table_name == 'rw-indexes'


def test_settings_from_environ():
    settings = Settings.from_environ({
        'ENV_MGMT_ROLE_ARN': 'arn:aws:iam::123456789012:role/rw-env-mgmt',
        'ENABLE_EGRESS_STORE': 'True',
        'ENVIRONMENTS_TABLE': 'rw-environments',
    })

    assert settings.enable_egress_store is True
    assert settings.environments_table == 'rw-environments'
    assert settings.env_types_table == ''
    assert Settings.from_environ({'ENV_MGMT_ROLE_ARN': 'arn'}).enable_egress_store is False


def test_settings_require_env_mgmt_role():
    with pytest.raises(KeyError):
        Settings.from_environ({})
