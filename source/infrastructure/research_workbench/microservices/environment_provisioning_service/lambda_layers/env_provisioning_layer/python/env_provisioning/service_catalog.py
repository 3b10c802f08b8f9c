# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Resolution of the AWS Service Catalog launch path, portfolio and launch constraint role of a product.

A product can only be launched when it is available to the launching role through exactly one
portfolio, otherwise there is no way to tell which portfolio (and which launch constraint) applies.
"""

import json

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from env_provisioning.constants import NOT_FOUND_ERROR_CODES
from env_provisioning.errors import ConfigurationError

logger = Logger(service="Environment Provisioning Service Catalog", level="INFO")


def _not_shared_message(product_id, role_arn) -> str:
    return f'The product {product_id} is not shared with the {role_arn} role.'


def _multiple_portfolios_message(product_id, role_arn, candidate_ids=None) -> str:
    candidates = f' [{", ".join(candidate_ids)}]' if candidate_ids else ''
    return (
        f'The product {product_id} is shared via multiple portfolios{candidates}, do not know which portfolio to '
        f'launch from. Please make sure the product is shared to {role_arn} via only one portfolio.'
    )


def _paginate(client, operation_name: str, result_key: str, **kwargs) -> list:
    items = []
    for page in client.get_paginator(operation_name).paginate(**kwargs):
        items.extend(page.get(result_key, []))
    return items


def list_launch_paths(client, product_id: str) -> list:
    """All launch path summaries of the product, empty when the product is not found."""
    try:
        return _paginate(client, 'list_launch_paths', 'LaunchPathSummaries', ProductId=product_id)
    except ClientError as e:
        if e.response['Error']['Code'] in NOT_FOUND_ERROR_CODES:
            return []
        raise


def get_launch_path(client, product_id: str, role_arn: str) -> dict:
    launch_paths = list_launch_paths(client, product_id)
    if not launch_paths:
        raise ConfigurationError(_not_shared_message(product_id, role_arn))
    if len(launch_paths) > 1:
        raise ConfigurationError(
            _multiple_portfolios_message(product_id, role_arn, [path.get('Id', '') for path in launch_paths])
        )
    return launch_paths[0]


def is_portfolio_shared_with_role(client, portfolio_id: str, role_arn: str) -> bool:
    paginator = client.get_paginator('list_principals_for_portfolio')
    for page in paginator.paginate(PortfolioId=portfolio_id):
        if any(principal.get('PrincipalARN') == role_arn for principal in page.get('Principals', [])):
            return True
    return False


def find_portfolio(client, product_id: str, role_arn: str) -> dict:
    """
    Find the single portfolio of the product that is shared with the role.

    Every page of portfolios is scanned before the exactly-one check is applied so the result does
    not depend on the page order.
    """
    shared_portfolios = [
        portfolio
        for portfolio in _paginate(client, 'list_portfolios_for_product', 'PortfolioDetails', ProductId=product_id)
        if is_portfolio_shared_with_role(client, portfolio['Id'], role_arn)
    ]

    if not shared_portfolios:
        raise ConfigurationError(_not_shared_message(product_id, role_arn))
    if len(shared_portfolios) > 1:
        raise ConfigurationError(
            _multiple_portfolios_message(product_id, role_arn, [portfolio['Id'] for portfolio in shared_portfolios])
        )
    return shared_portfolios[0]


def find_launch_constraint_role_name(client, portfolio_id: str, product_id: str) -> str:
    constraints = _paginate(
        client,
        'list_constraints_for_portfolio',
        'ConstraintDetails',
        PortfolioId=portfolio_id,
        ProductId=product_id,
    )
    # AWS Service Catalog allows at most one launch constraint per portfolio/product
    launch_constraints = [constraint for constraint in constraints if constraint.get('Type') == 'LAUNCH']
    if not launch_constraints:
        raise ConfigurationError(
            f'The portfolio {portfolio_id} does not have any launch constraint role specified. '
            f'Please specify a local role name as launch constraint'
        )

    response = client.describe_constraint(Id=launch_constraints[0]['ConstraintId'])
    # ConstraintParameters is a JSON string such as '{"LocalRoleName":"sc-launch-role"}'
    parameters = json.loads(response.get('ConstraintParameters') or '{}')
    local_role_name = parameters.get('LocalRoleName')
    if not local_role_name:
        raise ConfigurationError(
            f'The portfolio {portfolio_id} has incorrect launch constraint specified. '
            f'Make sure a local role name is specified as launch constraint for the portfolio.'
        )
    logger.info(f'Found launch constraint role {local_role_name} for portfolio {portfolio_id}')
    return local_role_name
