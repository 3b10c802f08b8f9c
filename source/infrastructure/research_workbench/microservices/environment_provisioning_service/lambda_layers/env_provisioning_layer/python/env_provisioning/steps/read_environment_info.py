# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from env_provisioning.constants import EnvironmentStatus, PluginHook
from env_provisioning.steps.base import EnvProvisioningStep


class ReadEnvironmentInfo(EnvProvisioningStep):
    """
    First step of the create workflow: builds the resolved variables of the environment from its
    record and lets the plugins contribute theirs (hosting account, network, encryption key).
    """

    def input_keys(self) -> dict:
        return {
            'requestContext': 'object',
            'envId': 'string',
            'envTypeId': 'string',
            'envTypeConfigId': 'string',
        }

    def output_keys(self) -> dict:
        return {'resolvedVars': 'object'}

    def start(self):
        request_context = self.payload.object('requestContext')
        env_id = self.payload.string('envId')
        env_type_id = self.payload.string('envTypeId')
        env_type_config_id = self.payload.string('envTypeConfigId')

        environment_sc_service = self.services.must_find('environmentScService')
        environment = environment_sc_service.must_find(request_context, id=env_id)

        principal = request_context.get('principalIdentifier') or {}
        resolved_vars = {
            'envId': env_id,
            'envTypeId': env_type_id,
            'envTypeConfigId': env_type_config_id,
            'name': environment.get('name'),
            'description': environment.get('description'),
            'projectId': environment.get('projectId'),
            'indexId': environment.get('indexId'),
            'cidr': environment.get('cidr'),
            'studyIds': environment.get('studyIds', []),
            'username': principal.get('username'),
            'userNamespace': principal.get('ns'),
        }

        result = self.visit_plugins(
            PluginHook.RESOLVE,
            {'requestContext': request_context, 'resolvedVars': resolved_vars},
        )
        if result and result.get('resolvedVars'):
            resolved_vars = result['resolvedVars']

        self.print(f'Resolved variables for environment {env_id}', envId=env_id)
        self.payload.set_key('resolvedVars', resolved_vars)

    def on_fail(self, error):
        self.print_error(error)
        request_context = self.payload.optional_object('requestContext', {})
        resolved_vars = self.payload.optional_object('resolvedVars') or {'envId': self.payload.optional_string('envId')}
        self.visit_plugins(
            PluginHook.ON_ENV_PROVISIONING_FAILURE,
            {
                'requestContext': request_context,
                'resolvedVars': resolved_vars,
                'status': EnvironmentStatus.FAILED,
                'error': error,
            },
        )
