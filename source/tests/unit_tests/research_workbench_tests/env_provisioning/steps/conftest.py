# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import copy
from unittest.mock import MagicMock, Mock

import pytest

from workflow_engine.payload import StepState, WorkflowPayload
from workflow_engine.services import ServicesContainer

from env_provisioning.settings import Settings

ENV_MGMT_ROLE_ARN = 'arn:aws:iam::123456789012:role/rw-env-mgmt'


class FakeClientProvider:
    """Hands out one MagicMock client per (role, service) pair and records every request."""

    def __init__(self):
        self.clients = {}
        self.requests = []
        self.principals = []

    def for_principal(self, principal_identifier=None):
        self.principals.append(principal_identifier)
        return self

    def client(self, role_arn, client_name):
        return self.clients.setdefault((role_arn, client_name), MagicMock(name=f'{client_name}:{role_arn}'))

    def get_client_for_role(self, role_arn, client_name, external_id=None, region=None):
        self.requests.append((role_arn, client_name, external_id))
        return self.client(role_arn, client_name)


def visit_plugins_passthrough(extension_point, method_name, payload=None, continue_on_error=False):
    return payload


@pytest.fixture
def client_provider():
    return FakeClientProvider()


@pytest.fixture
def plugin_registry():
    registry = Mock()
    registry.visit_plugins.side_effect = visit_plugins_passthrough
    return registry


@pytest.fixture
def services(client_provider, plugin_registry):
    return ServicesContainer({
        'aws': client_provider,
        'pluginRegistryService': plugin_registry,
        'environmentScService': Mock(),
        'envTypeService': Mock(),
        'envTypeConfigService': Mock(),
        'dataEgressService': Mock(),
    })


@pytest.fixture
def settings():
    return Settings(env_mgmt_role_arn=ENV_MGMT_ROLE_ARN)


@pytest.fixture
def make_step(services, settings):
    def _make_step(step_class, input_payload, step_outputs=None, state=None, step_settings=None):
        step_outputs = copy.deepcopy(step_outputs or {})
        return step_class(
            payload=WorkflowPayload(copy.deepcopy(input_payload), step_outputs, step_index=len(step_outputs)),
            state=StepState(state or {}),
            settings=step_settings or settings,
            services=services,
            logger=Mock(),
        )
    return _make_step


@pytest.fixture
def hook_calls(plugin_registry):
    """(hook, payload) pairs of every plugin visit, in order."""
    def _hook_calls():
        return [(c.args[1], c.kwargs.get('payload')) for c in plugin_registry.visit_plugins.call_args_list]
    return _hook_calls
