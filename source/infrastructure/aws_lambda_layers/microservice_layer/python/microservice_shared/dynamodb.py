# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from decimal import Decimal

from microservice_shared.aws_clients import get_service_resource
from microservice_shared.utilities import LoggerUtil


class DynamodbHelper:
    """
    Helper class for interacting with AWS DynamoDB.
    """
    def __init__(self):
        """
        Initializes the DynamodbHelper instance.
        """
        self.logger = LoggerUtil.create_logger()

    @staticmethod
    def to_python(value):
        """
        Convert the Decimal values returned by the DynamoDB resource API back into int/float,
        recursing into maps and lists.
        """
        if isinstance(value, Decimal):
            return int(value) if value % 1 == 0 else float(value)
        if isinstance(value, dict):
            return {k: DynamodbHelper.to_python(v) for k, v in value.items()}
        if isinstance(value, list):
            return [DynamodbHelper.to_python(v) for v in value]
        return value

    def dynamodb_get_item(self, table_name: str, key: dict):
        """
        Read a single item from a DynamoDB table.

        Parameters
        ----------
        table_name : str
            The name of the DynamoDB table.
        key : dict
            The primary key of the item.

        Returns
        -------
        dict or None
            The item with DynamoDB numbers converted to int/float, or None when the item does not exist.
        """
        self.logger.info(f'Reading item: {key} from table: {table_name}')
        dynamodb = get_service_resource('dynamodb')
        table = dynamodb.Table(table_name)

        response = table.get_item(Key=key, ConsistentRead=True)
        item = response.get('Item')
        return self.to_python(item) if item is not None else None

    def dynamodb_put_item(self, table_name: str, item: dict, condition_expression: str = None,
                          expression_attribute_values: dict = None):
        """
        Put an item into a DynamoDB table.

        Parameters
        ----------
        table_name : str
            The name of the DynamoDB table.
        item : dict
            The item to put into the table.
        condition_expression : str, optional
            Condition that must hold for the write to succeed.
        expression_attribute_values : dict, optional
            Values referenced by the condition expression.

        Raises
        ------
        botocore.exceptions.ClientError
            If there is an error putting the item into the DynamoDB table.
        """
        self.logger.info(f'Creating item: {item} in table: {table_name}')
        dynamodb = get_service_resource('dynamodb')
        table = dynamodb.Table(table_name)

        params = {'Item': item}
        if condition_expression:
            params['ConditionExpression'] = condition_expression
        if expression_attribute_values:
            params['ExpressionAttributeValues'] = expression_attribute_values

        try:
            response = table.put_item(**params)
            self.logger.info(f'Response: {response["ResponseMetadata"]["HTTPStatusCode"]}')
        except Exception as e:
            self.logger.error(f"Failed to write record {item} to DynamoDB table {table_name}")
            self.logger.error(e)
            raise

    def dynamodb_update_item(self, table_name: str, key: dict, attributes: dict, condition_expression: str = None,
                             condition_values: dict = None) -> dict:
        """
        Set the given attributes on an existing item and return the updated item.

        Parameters
        ----------
        table_name : str
            The name of the DynamoDB table.
        key : dict
            The primary key of the item.
        attributes : dict
            Attribute names and values to set.
        condition_expression : str, optional
            Condition that must hold for the write to succeed, for example an optimistic locking check.
        condition_values : dict, optional
            Values referenced by the condition expression.

        Raises
        ------
        botocore.exceptions.ClientError
            If the condition fails or the item cannot be updated.
        """
        self.logger.info(f'Updating item: {key} in table: {table_name}')
        dynamodb = get_service_resource('dynamodb')
        table = dynamodb.Table(table_name)

        names = {f'#a{i}': name for i, name in enumerate(attributes)}
        values = {f':v{i}': value for i, value in enumerate(attributes.values())}
        values.update(condition_values or {})
        params = {
            'Key': key,
            'UpdateExpression': 'SET ' + ', '.join(f'#a{i} = :v{i}' for i in range(len(attributes))),
            'ExpressionAttributeNames': names,
            'ExpressionAttributeValues': values,
            'ReturnValues': 'ALL_NEW',
        }
        if condition_expression:
            params['ConditionExpression'] = condition_expression

        try:
            response = table.update_item(**params)
        except Exception as e:
            self.logger.error(f"Failed to update record {key} in DynamoDB table {table_name}")
            self.logger.error(e)
            raise
        return self.to_python(response.get('Attributes', {}))
