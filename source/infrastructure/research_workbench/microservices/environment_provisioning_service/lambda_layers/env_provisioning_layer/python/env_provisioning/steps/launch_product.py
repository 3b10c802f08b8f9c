# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from microservice_shared.utilities import DateUtil

from env_provisioning import service_catalog
from env_provisioning.constants import (
    POLL_INTERVAL_SECONDS,
    POLL_MAX_ATTEMPTS,
    POLL_TIMEOUT_DESCRIPTION,
    STACK_NAME_PREFIX,
    EnvironmentStatus,
    PluginHook,
)
from env_provisioning.errors import ProvisioningFailedError, WorkflowTimeoutError
from env_provisioning.namespace import get_namespace_and_index
from env_provisioning.steps.base import EnvProvisioningStep
from env_provisioning.variable_resolver import resolve_var_expressions, union_by_key

FAILURE_STATUSES = ('TAINTED', 'ERROR')
SUCCESS_STATUSES = ('AVAILABLE',)


class LaunchProduct(EnvProvisioningStep):
    """
    Provisions the environment type's AWS Service Catalog product in the target account and waits
    for the provisioned product to become available.
    """

    def input_keys(self) -> dict:
        return {
            'requestContext': 'object',
            'resolvedVars': 'object',
            'portfolioId': 'string',
            'productId': 'string',
            'envTypeId': 'string',
            'envTypeConfigId': 'string',
        }

    def _target_sc_client(self, request_context, resolved_vars):
        return self.get_service_catalog_client(
            request_context,
            self.target_account_role_arn(resolved_vars),
            resolved_vars.get('externalId'),
        )

    def start(self):
        request_context = self.payload.object('requestContext')
        resolved_vars = self.payload.object('resolvedVars')
        product_id = self.payload.string('productId')
        env_type_id = self.payload.string('envTypeId')
        env_type_config_id = self.payload.string('envTypeConfigId')

        env_type = self.services.must_find('envTypeService').must_find(request_context, id=env_type_id)
        target_role_arn = self.target_account_role_arn(resolved_vars)
        target_sc_client = self._target_sc_client(request_context, resolved_vars)

        timestamp = DateUtil.get_current_epoch_millis()
        stack_name = f'{STACK_NAME_PREFIX}{timestamp}'
        # "namespace" is one of the variables available to the configuration expressions
        resolved_vars['namespace'] = stack_name

        env_type_config = self.services.must_find('envTypeConfigService').must_find(
            request_context, env_type_id, id=env_type_config_id
        )

        # A static Namespace param resolved from the configuration would clash between launches
        params = resolve_var_expressions(env_type_config.get('params'), resolved_vars)
        namespace, namespace_index = get_namespace_and_index(params, timestamp)
        if namespace_index >= 0:
            params[namespace_index]['Value'] = namespace

        custom_tags = resolve_var_expressions(env_type_config.get('tags'), resolved_vars)
        default_tags = self.get_default_tags(request_context, resolved_vars)
        effective_tags = union_by_key(custom_tags, default_tags)
        resolved_vars['tags'] = effective_tags

        launch_path = service_catalog.get_launch_path(target_sc_client, product_id, target_role_arn)

        provision_params = {
            'ProductId': product_id,
            'ProvisionedProductName': stack_name,
            'ProvisioningArtifactId': env_type['provisioningArtifact']['id'],
            'PathId': launch_path['Id'],
            'ProvisioningParameters': params,
            'Tags': effective_tags,
        }
        self.print(f'Provisioning AWS Service Catalog Product {product_id}', provisionParams=provision_params)
        record_detail = target_sc_client.provision_product(**provision_params)['RecordDetail']

        self.state.set_key('RECORD_ID', record_detail['RecordId'])
        self.state.set_key('PROVISIONED_PRODUCT_ID', record_detail['ProvisionedProductId'])
        self.state.set_key('STACK_NAME', stack_name)

        return (
            self.wait(POLL_INTERVAL_SECONDS)
            .max_attempts(POLL_MAX_ATTEMPTS)
            .until('should_resume_workflow')
            .then_call('on_successful_completion')
            .otherwise_call('report_timeout')
        )

    def should_resume_workflow(self) -> bool:
        provisioned_product_id = self.state.string('PROVISIONED_PRODUCT_ID')
        request_context = self.payload.object('requestContext')
        resolved_vars = self.payload.object('resolvedVars')

        target_sc_client = self._target_sc_client(request_context, resolved_vars)
        detail = target_sc_client.describe_provisioned_product(Id=provisioned_product_id)['ProvisionedProductDetail']

        status = detail.get('Status')
        if status in FAILURE_STATUSES:
            raise ProvisioningFailedError(
                f'Error provisioning environment {resolved_vars.get("name")}. Reason: {detail.get("StatusMessage")}'
            )
        return status in SUCCESS_STATUSES

    def on_successful_completion(self):
        request_context = self.payload.object('requestContext')
        resolved_vars = self.payload.object('resolvedVars')
        record_id = self.state.string('RECORD_ID')
        provisioned_product_id = self.state.string('PROVISIONED_PRODUCT_ID')

        target_sc_client = self._target_sc_client(request_context, resolved_vars)
        record_outputs = target_sc_client.describe_record(Id=record_id).get('RecordOutputs', [])

        self.visit_plugins(
            PluginHook.ON_ENV_PROVISIONING_SUCCESS,
            {
                'requestContext': request_context,
                'resolvedVars': resolved_vars,
                'status': EnvironmentStatus.COMPLETED,
                'outputs': record_outputs,
                'provisionedProductId': provisioned_product_id,
            },
        )

    def on_fail(self, error):
        self.print_error(error)
        request_context = self.payload.optional_object('requestContext', {})
        resolved_vars = self.payload.optional_object('resolvedVars', {})
        # not set when the failure happened before the product was provisioned
        provisioned_product_id = self.state.optional_string('PROVISIONED_PRODUCT_ID', '')

        self.print(
            f'Error provisioning product {self.payload.optional_string("productId")} from portfolio '
            f'{self.payload.optional_string("portfolioId")} by {self.target_account_role_arn(resolved_vars)}',
        )
        self.visit_plugins(
            PluginHook.ON_ENV_PROVISIONING_FAILURE,
            {
                'requestContext': request_context,
                'resolvedVars': resolved_vars,
                'status': EnvironmentStatus.FAILED,
                'error': error,
                'provisionedProductId': provisioned_product_id,
            },
        )

    def report_timeout(self):
        stack_name = self.state.string('STACK_NAME')
        resolved_vars = self.payload.object('resolvedVars')
        raise WorkflowTimeoutError(
            f'Error provisioning environment "{resolved_vars.get("name")}". The workflow timed-out because the '
            f'stack "{stack_name}" did not complete within the timeout period of {POLL_TIMEOUT_DESCRIPTION}.'
        )

    def get_default_tags(self, request_context: dict, resolved_vars: dict) -> list:
        result = self.visit_plugins(
            PluginHook.GET_DEFAULT_TAGS,
            {'requestContext': request_context, 'resolvedVars': resolved_vars, 'tags': []},
        )
        return (result or {}).get('tags', [])
