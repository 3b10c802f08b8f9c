# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
# ###############################################################################
# PURPOSE:
#   * Unit test for env_provisioning/service_catalog.py.
# USAGE:
#   pytest source/tests/unit_tests/research_workbench_tests/env_provisioning/test_service_catalog.py
###############################################################################

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from env_provisioning.errors import ConfigurationError
from env_provisioning.service_catalog import (
    find_launch_constraint_role_name,
    find_portfolio,
    get_launch_path,
    is_portfolio_shared_with_role,
    list_launch_paths,
)

PRODUCT_ID = 'prod-abc123'
ROLE_ARN = 'arn:aws:iam::123456789012:role/rw-env-mgmt'


def mock_sc_client(pages_by_operation, principals_by_portfolio=None):
    """
    Service Catalog client whose paginators return ``pages_by_operation[name]``.
    ``list_principals_for_portfolio`` pages are looked up per portfolio id.
    """
    principals_by_portfolio = principals_by_portfolio or {}

    def get_paginator(operation_name):
        paginator = MagicMock()
        if operation_name == 'list_principals_for_portfolio':
            paginator.paginate.side_effect = lambda PortfolioId: principals_by_portfolio.get(PortfolioId, [])
        else:
            paginator.paginate.return_value = pages_by_operation.get(operation_name, [])
        return paginator

    client = MagicMock()
    client.get_paginator.side_effect = get_paginator
    return client


def _principals(*arns):
    return [{'Principals': [{'PrincipalARN': arn, 'PrincipalType': 'IAM'} for arn in arns]}]


def test_get_launch_path_exactly_one():
    client = mock_sc_client({'list_launch_paths': [{'LaunchPathSummaries': [{'Id': 'lp-1', 'Name': 'portfolio'}]}]})
    assert get_launch_path(client, PRODUCT_ID, ROLE_ARN) == {'Id': 'lp-1', 'Name': 'portfolio'}


def test_get_launch_path_none():
    client = mock_sc_client({'list_launch_paths': [{'LaunchPathSummaries': []}]})

    with pytest.raises(ConfigurationError) as error:
        get_launch_path(client, PRODUCT_ID, ROLE_ARN)
    assert str(error.value) == f'The product {PRODUCT_ID} is not shared with the {ROLE_ARN} role.'


def test_get_launch_path_multiple_across_pages():
    client = mock_sc_client({'list_launch_paths': [
        {'LaunchPathSummaries': [{'Id': 'lp-1'}]},
        {'LaunchPathSummaries': [{'Id': 'lp-2'}]},
    ]})

    with pytest.raises(ConfigurationError) as error:
        get_launch_path(client, PRODUCT_ID, ROLE_ARN)
    assert 'shared via multiple portfolios [lp-1, lp-2]' in str(error.value)
    assert ROLE_ARN in str(error.value)


def test_list_launch_paths_product_not_found():
    client = MagicMock()
    client.get_paginator.return_value.paginate.side_effect = ClientError(
        {'Error': {'Code': 'ResourceNotFoundException', 'Message': 'not found'}}, 'ListLaunchPaths')

    assert list_launch_paths(client, PRODUCT_ID) == []


def test_list_launch_paths_other_errors_raise():
    client = MagicMock()
    client.get_paginator.return_value.paginate.side_effect = ClientError(
        {'Error': {'Code': 'AccessDeniedException', 'Message': 'denied'}}, 'ListLaunchPaths')

    with pytest.raises(ClientError):
        list_launch_paths(client, PRODUCT_ID)


def test_is_portfolio_shared_with_role():
    client = mock_sc_client({}, {'port-1': _principals('arn:aws:iam::123456789012:role/other', ROLE_ARN)})

    assert is_portfolio_shared_with_role(client, 'port-1', ROLE_ARN)
    assert not is_portfolio_shared_with_role(client, 'port-2', ROLE_ARN)


def test_find_portfolio_filters_to_shared():
    client = mock_sc_client(
        {'list_portfolios_for_product': [
            {'PortfolioDetails': [{'Id': 'port-1'}]},
            {'PortfolioDetails': [{'Id': 'port-2'}]},
        ]},
        {'port-2': _principals(ROLE_ARN)},
    )

    assert find_portfolio(client, PRODUCT_ID, ROLE_ARN) == {'Id': 'port-2'}


def test_find_portfolio_none_shared():
    client = mock_sc_client({'list_portfolios_for_product': [{'PortfolioDetails': [{'Id': 'port-1'}]}]})

    with pytest.raises(ConfigurationError, match='is not shared with the'):
        find_portfolio(client, PRODUCT_ID, ROLE_ARN)


def test_find_portfolio_multiple_shared():
    client = mock_sc_client(
        {'list_portfolios_for_product': [{'PortfolioDetails': [{'Id': 'port-1'}, {'Id': 'port-2'}]}]},
        {'port-1': _principals(ROLE_ARN), 'port-2': _principals(ROLE_ARN)},
    )

    with pytest.raises(ConfigurationError, match=r'multiple portfolios \[port-1, port-2\]'):
        find_portfolio(client, PRODUCT_ID, ROLE_ARN)


def test_find_launch_constraint_role_name():
    client = mock_sc_client({'list_constraints_for_portfolio': [{'ConstraintDetails': [
        {'ConstraintId': 'cons-tag', 'Type': 'RESOURCE_UPDATE'},
        {'ConstraintId': 'cons-launch', 'Type': 'LAUNCH'},
    ]}]})
    client.describe_constraint.return_value = {'ConstraintParameters': '{"LocalRoleName": "sc-launch-role"}'}

    assert find_launch_constraint_role_name(client, 'port-1', PRODUCT_ID) == 'sc-launch-role'
    client.describe_constraint.assert_called_once_with(Id='cons-launch')


def test_find_launch_constraint_missing():
    client = mock_sc_client({'list_constraints_for_portfolio': [{'ConstraintDetails': []}]})

    with pytest.raises(ConfigurationError, match='does not have any launch constraint role specified'):
        find_launch_constraint_role_name(client, 'port-1', PRODUCT_ID)


def test_find_launch_constraint_without_local_role_name():
    client = mock_sc_client({'list_constraints_for_portfolio': [{'ConstraintDetails': [
        {'ConstraintId': 'cons-launch', 'Type': 'LAUNCH'},
    ]}]})
    client.describe_constraint.return_value = {'ConstraintParameters': '{"RoleArn": "arn:aws:iam::1:role/x"}'}

    with pytest.raises(ConfigurationError, match='has incorrect launch constraint specified'):
        find_launch_constraint_role_name(client, 'port-1', PRODUCT_ID)
