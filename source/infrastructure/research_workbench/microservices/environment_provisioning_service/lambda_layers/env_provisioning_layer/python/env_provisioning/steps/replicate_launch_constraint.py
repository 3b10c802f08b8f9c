# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from env_provisioning import service_catalog
from env_provisioning.constants import EnvironmentStatus, PluginHook
from env_provisioning.role_cloner import RoleCloner
from env_provisioning.steps.base import EnvProvisioningStep


class ReplicateLaunchConstraint(EnvProvisioningStep):
    """
    Clones the launch constraint IAM role of the environment type's product into the account the
    environment is launched in. AWS Service Catalog assumes this role in the target account when it
    creates the CloudFormation stack of the environment.
    """

    def input_keys(self) -> dict:
        return {
            'requestContext': 'object',
            'resolvedVars': 'object',
            'envTypeId': 'string',
        }

    def output_keys(self) -> dict:
        return {
            'launchConstraintRole': 'string',
            'portfolioId': 'string',
            'productId': 'string',
        }

    def start(self):
        request_context = self.payload.object('requestContext')
        resolved_vars = self.payload.object('resolvedVars')
        env_type_id = self.payload.string('envTypeId')

        env_type_service = self.services.must_find('envTypeService')
        env_type = env_type_service.must_find(request_context, id=env_type_id)
        product_id = (env_type.get('product') or {}).get('productId')

        env_mgmt_role_arn = self.env_mgmt_role_arn
        sc_client = self.get_service_catalog_client(request_context, env_mgmt_role_arn)

        service_catalog.get_launch_path(sc_client, product_id, env_mgmt_role_arn)
        portfolio = service_catalog.find_portfolio(sc_client, product_id, env_mgmt_role_arn)
        portfolio_id = portfolio['Id']
        role_name = service_catalog.find_launch_constraint_role_name(sc_client, portfolio_id, product_id)

        target_role_arn = self.target_account_role_arn(resolved_vars)
        client_provider = self.client_provider(request_context)
        src_iam_client = client_provider.get_client_for_role(role_arn=env_mgmt_role_arn, client_name='iam')
        target_iam_client = client_provider.get_client_for_role(
            role_arn=target_role_arn,
            client_name='iam',
            external_id=resolved_vars.get('externalId'),
        )

        self.print(
            f'Cloning launch constraint role {role_name} to the account of {target_role_arn}',
            portfolioId=portfolio_id,
            productId=product_id,
        )
        RoleCloner(src_iam_client, target_iam_client).clone_role(role_name)

        self.payload.set_key('launchConstraintRole', role_name)
        self.payload.set_key('portfolioId', portfolio_id)
        self.payload.set_key('productId', product_id)

    def on_fail(self, error):
        self.print_error(error)
        self.visit_plugins(
            PluginHook.ON_ENV_PROVISIONING_FAILURE,
            {
                'requestContext': self.payload.optional_object('requestContext', {}),
                'resolvedVars': self.payload.optional_object('resolvedVars', {}),
                'status': EnvironmentStatus.FAILED,
                'error': error,
            },
        )
