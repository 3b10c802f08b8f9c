# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from env_provisioning.client_provider import account_id_from_arn, find_or_none
from env_provisioning.constants import EnvironmentStatus, PluginHook
from env_provisioning.errors import ConfigurationError
from env_provisioning.steps.base import EnvProvisioningStep


class SharePortfolio(EnvProvisioningStep):
    """
    Shares the AWS Service Catalog portfolio with the account the environment is launched in, accepts
    the share there and associates the account's environment management role with the portfolio.
    Every call is safe to repeat.
    """

    def input_keys(self) -> dict:
        return {
            'requestContext': 'object',
            'resolvedVars': 'object',
            'portfolioId': 'string',
        }

    def start(self):
        request_context = self.payload.object('requestContext')
        resolved_vars = self.payload.object('resolvedVars')
        portfolio_id = self.payload.string('portfolioId')

        env_mgmt_role_arn = self.env_mgmt_role_arn
        target_role_arn = self.target_account_role_arn(resolved_vars)
        src_account_id = account_id_from_arn(env_mgmt_role_arn)
        target_account_id = account_id_from_arn(target_role_arn)

        target_sc_client = self.get_service_catalog_client(
            request_context, target_role_arn, resolved_vars.get('externalId')
        )

        if src_account_id == target_account_id:
            self.print(
                'The source and the target account are same. There is no need to share the portfolio',
                portfolioId=portfolio_id,
                srcAwsAccountId=src_account_id,
                targetAwsAccountId=target_account_id,
            )
            if env_mgmt_role_arn != target_role_arn:
                self._associate_principal(target_sc_client, portfolio_id, target_role_arn)
            return None

        self.print(
            f'Sharing portfolio {portfolio_id} with account {target_account_id}',
            portfolioId=portfolio_id,
            targetAwsAccountId=target_account_id,
        )
        src_sc_client = self.get_service_catalog_client(request_context, env_mgmt_role_arn)

        if find_or_none(src_sc_client.describe_portfolio, Id=portfolio_id) is None:
            raise ConfigurationError(f'The portfolio {portfolio_id} does not exist.')

        if find_or_none(target_sc_client.describe_portfolio, Id=portfolio_id) is None:
            src_sc_client.create_portfolio_share(PortfolioId=portfolio_id, AccountId=target_account_id)

        target_sc_client.accept_portfolio_share(PortfolioId=portfolio_id, PortfolioShareType='IMPORTED')
        self._associate_principal(target_sc_client, portfolio_id, target_role_arn)
        return None

    @staticmethod
    def _associate_principal(sc_client, portfolio_id: str, principal_arn: str):
        sc_client.associate_principal_with_portfolio(
            PortfolioId=portfolio_id,
            PrincipalARN=principal_arn,
            PrincipalType='IAM',
        )

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
