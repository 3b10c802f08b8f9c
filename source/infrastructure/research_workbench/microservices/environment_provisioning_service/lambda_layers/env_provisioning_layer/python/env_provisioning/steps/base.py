# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from workflow_engine.step_base import StepBase

from env_provisioning.constants import EXTENSION_POINT


class EnvProvisioningStep(StepBase):
    """Helpers shared by the environment provisioning and termination steps."""

    @property
    def env_mgmt_role_arn(self) -> str:
        return self.settings.env_mgmt_role_arn

    def client_provider(self, request_context: dict = None):
        provider = self.services.must_find('aws')
        principal = (request_context or {}).get('principalIdentifier')
        return provider.for_principal(principal)

    def target_account_role_arn(self, resolved_vars: dict) -> str:
        # the hosting account role resolved by earlier steps, or the main account role
        return resolved_vars.get('xAccEnvMgmtRoleArn') or self.env_mgmt_role_arn

    def get_service_catalog_client(self, request_context: dict, role_arn: str, external_id: str = None):
        self.print(f'Creating AWS Service Catalog client by assuming role = {role_arn}', targetAccRoleArn=role_arn)
        return self.client_provider(request_context).get_client_for_role(
            role_arn=role_arn,
            client_name='servicecatalog',
            external_id=external_id,
        )

    def visit_plugins(self, hook: str, payload: dict):
        plugin_registry = self.services.must_find('pluginRegistryService')
        return plugin_registry.visit_plugins(EXTENSION_POINT, hook, payload=payload)
