# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Read access (and, for environments, status updates) to the records the provisioning workflows
depend on. Each service is a thin adapter over one DynamoDB table.
"""

from microservice_shared.dynamodb import DynamodbHelper
from microservice_shared.utilities import DateUtil, JsonUtil

from env_provisioning.errors import NotFoundError


class DynamodbEntityService:
    entity_title = 'entity'

    def __init__(self, table_name: str, dynamodb_helper: DynamodbHelper = None):
        self.table_name = table_name
        self.dynamodb_helper = dynamodb_helper or DynamodbHelper()

    def find(self, request_context: dict, id: str, fields: list = None):
        item = self.dynamodb_helper.dynamodb_get_item(self.table_name, {'id': id})
        if item is None:
            return None
        if fields:
            return {field: item[field] for field in fields if field in item}
        return item

    def must_find(self, request_context: dict, id: str, fields: list = None) -> dict:
        item = self.find(request_context, id=id, fields=fields)
        if item is None:
            raise NotFoundError(f'{self.entity_title} with id "{id}" does not exist')
        return item


class EnvironmentScService(DynamodbEntityService):
    entity_title = 'environment'

    def update(self, request_context: dict, environment: dict) -> dict:
        """
        Update an environment record. ``environment`` must contain the ``id`` and the ``rev`` the caller
        read; the write fails if another writer updated the record in between.
        """
        environment = dict(environment)
        env_id = environment.pop('id')
        rev = environment.pop('rev', 0)
        by = (request_context or {}).get('principalIdentifier', {}).get('uid', '')

        attributes = {key: value for key, value in environment.items() if value is not None}
        attributes['rev'] = rev + 1
        attributes['updatedAt'] = DateUtil.get_current_utc_iso_timestamp()
        if by:
            attributes['updatedBy'] = by

        return self.dynamodb_helper.dynamodb_update_item(
            self.table_name,
            {'id': env_id},
            JsonUtil.to_dynamodb(attributes),
            condition_expression='attribute_exists(id) AND (attribute_not_exists(rev) OR rev = :expectedRev)',
            condition_values={':expectedRev': rev},
        )


class EnvTypeService(DynamodbEntityService):
    entity_title = 'environment type'


class EnvTypeConfigService(DynamodbEntityService):
    """Environment type configurations, keyed by the environment type id and the configuration id."""
    entity_title = 'environment type configuration'

    def find(self, request_context: dict, env_type_id: str, id: str = None, fields: list = None):
        item = self.dynamodb_helper.dynamodb_get_item(self.table_name, {'envTypeId': env_type_id, 'id': id})
        if item is None:
            return None
        item.setdefault('params', [])
        item.setdefault('tags', [])
        return item

    def must_find(self, request_context: dict, env_type_id: str, id: str = None, fields: list = None) -> dict:
        item = self.find(request_context, env_type_id, id=id)
        if item is None:
            raise NotFoundError(
                f'{self.entity_title} with id "{id}" does not exist for environment type "{env_type_id}"'
            )
        return item


class IndexesService(DynamodbEntityService):
    entity_title = 'index'


class AwsAccountsService(DynamodbEntityService):
    entity_title = 'AWS account'
