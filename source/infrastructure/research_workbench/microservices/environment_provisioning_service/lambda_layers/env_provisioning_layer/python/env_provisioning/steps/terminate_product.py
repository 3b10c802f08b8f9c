# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import uuid

from env_provisioning.constants import (
    POLL_INTERVAL_SECONDS,
    POLL_MAX_ATTEMPTS,
    POLL_TIMEOUT_DESCRIPTION,
    EnvironmentStatus,
    PluginHook,
)
from env_provisioning.errors import ProvisioningFailedError, WorkflowTimeoutError
from env_provisioning.steps.base import EnvProvisioningStep

FAILURE_STATUSES = ('FAILED', 'IN_PROGRESS_IN_ERROR')
SUCCESS_STATUSES = ('SUCCEEDED',)


def _record_errors_message(record_errors) -> str:
    return ', '.join(f'[{e.get("Code")}] - {e.get("Description")}' for e in record_errors or [])


class TerminateProduct(EnvProvisioningStep):
    """
    Terminates the provisioned product of an environment and waits for the termination record to
    complete. Environments whose launch failed before anything was provisioned have no provisioned
    product; they complete right away.
    """

    def input_keys(self) -> dict:
        return {
            'requestContext': 'object',
            'envId': 'string',
            'provisionedProductId': 'optionalString',
        }

    def _target_sc_client(self):
        role_arn = self.payload.optional_string('xAccEnvMgmtRoleArn') or self.env_mgmt_role_arn
        return self.get_service_catalog_client(
            self.payload.object('requestContext'),
            role_arn,
            self.payload.optional_string('externalId'),
        )

    def start(self):
        provisioned_product_id = self.payload.optional_string('provisionedProductId', '')
        env_id = self.payload.string('envId')

        if provisioned_product_id:
            # the token is generated once here and never on a poll
            record_detail = self._target_sc_client().terminate_provisioned_product(
                ProvisionedProductId=provisioned_product_id,
                TerminateToken=str(uuid.uuid4()),
            )['RecordDetail']
            self.state.set_key('RECORD_ID', record_detail['RecordId'])

        if self.settings.enable_egress_store:
            self.services.must_find('dataEgressService').delete_main_account_egress_store_role(env_id)

        return (
            self.wait(POLL_INTERVAL_SECONDS)
            .max_attempts(POLL_MAX_ATTEMPTS)
            .until('should_resume_workflow')
            .then_call('on_successful_completion')
            .otherwise_call('report_timeout')
        )

    def should_resume_workflow(self) -> bool:
        record_id = self.state.optional_string('RECORD_ID')
        if not record_id:
            return True

        env_id = self.payload.string('envId')
        env_name = self.payload.optional_string('envName', '')
        detail = self._target_sc_client().describe_record(Id=record_id)['RecordDetail']

        status = detail.get('Status')
        if status in FAILURE_STATUSES:
            raise ProvisioningFailedError(
                f'Error terminating environment {env_name} with id {env_id}. '
                f'Reason: {_record_errors_message(detail.get("RecordErrors"))}'
            )
        return status in SUCCESS_STATUSES

    def _describe_record_if_any(self):
        record_id = self.state.optional_string('RECORD_ID')
        if not record_id:
            return None
        return self._target_sc_client().describe_record(Id=record_id)

    def on_successful_completion(self):
        self.visit_plugins(
            PluginHook.ON_ENV_TERMINATION_SUCCESS,
            {
                'requestContext': self.payload.object('requestContext'),
                'status': EnvironmentStatus.TERMINATED,
                'envId': self.payload.string('envId'),
                'record': self._describe_record_if_any(),
            },
        )

    def on_fail(self, error):
        self.print_error(error)
        self.visit_plugins(
            PluginHook.ON_ENV_TERMINATION_FAILURE,
            {
                'requestContext': self.payload.optional_object('requestContext', {}),
                'status': EnvironmentStatus.TERMINATING_FAILED,
                'error': error,
                'envId': self.payload.optional_string('envId'),
                'record': self._describe_record_if_any(),
            },
        )

    def report_timeout(self):
        env_id = self.payload.string('envId')
        env_name = self.payload.optional_string('envName', '')
        provisioned_product_id = self.payload.optional_string('provisionedProductId', '')
        if provisioned_product_id:
            reason = f'the AWS Service Catalog Product "{provisioned_product_id}" did not terminate'
        else:
            reason = 'the environment did not terminate'
        raise WorkflowTimeoutError(
            f'Error terminating environment "{env_name}" with id "{env_id}". The workflow timed-out because '
            f'{reason} within the timeout period of {POLL_TIMEOUT_DESCRIPTION}.'
        )
