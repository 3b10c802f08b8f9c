# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from aws_lambda_powertools import Logger

logger = Logger(service="Environment Record Plugin", level="INFO")


class EnvironmentRecordPlugin:
    """
    Keeps the environment record in step with the provisioning and termination workflows.
    """

    def __init__(self, environment_sc_service):
        self.environment_sc_service = environment_sc_service

    def _update(self, request_context, env_id, **attributes):
        existing = self.environment_sc_service.must_find(request_context, id=env_id, fields=['rev'])
        environment = {'id': env_id, 'rev': existing.get('rev', 0), **attributes}
        logger.info(f'Updating environment {env_id} to status {attributes.get("status")}')
        return self.environment_sc_service.update(request_context, environment)

    def on_env_provisioning_success(self, payload: dict) -> dict:
        self._update(
            payload.get('requestContext'),
            payload['resolvedVars']['envId'],
            status=payload['status'],
            outputs=payload.get('outputs'),
            provisionedProductId=payload.get('provisionedProductId'),
            inWorkflow='false',
        )
        return payload

    def on_env_provisioning_failure(self, payload: dict) -> dict:
        error = payload.get('error')
        self._update(
            payload.get('requestContext'),
            payload['resolvedVars']['envId'],
            status=payload['status'],
            outputs=payload.get('outputs'),
            provisionedProductId=payload.get('provisionedProductId'),
            error=str(error) if error else None,
            inWorkflow='false',
        )
        return payload

    def on_env_termination_success(self, payload: dict) -> dict:
        self._update(
            payload.get('requestContext'),
            payload['envId'],
            status=payload['status'],
            inWorkflow='false',
        )
        return payload

    def on_env_termination_failure(self, payload: dict) -> dict:
        error = payload.get('error')
        self._update(
            payload.get('requestContext'),
            payload['envId'],
            status=payload['status'],
            error=str(error) if error else None,
            inWorkflow='false',
        )
        return payload
