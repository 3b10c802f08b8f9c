# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from aws_lambda_powertools import Logger

from microservice_shared.aws_clients import get_service_client

logger = Logger(service="Environment Provisioning Data Egress", level="INFO")


class DataEgressService:
    """Clean up of the data egress store resources kept in the main account."""

    def __init__(self, iam_client=None):
        self._iam_client = iam_client

    @property
    def iam(self):
        if self._iam_client is None:
            self._iam_client = get_service_client('iam')
        return self._iam_client

    @staticmethod
    def get_main_account_egress_store_role(egress_store_id: str) -> str:
        return f'swb-study-{egress_store_id}'

    def delete_main_account_egress_store_role(self, egress_store_id: str):
        role_name = self.get_main_account_egress_store_role(egress_store_id)
        logger.info(f'Deleting egress store role {role_name}')

        policy_arns = []
        for page in self.iam.get_paginator('list_attached_role_policies').paginate(RoleName=role_name):
            policy_arns.extend(policy['PolicyArn'] for policy in page.get('AttachedPolicies', []))

        for policy_arn in policy_arns:
            self.iam.detach_role_policy(RoleName=role_name, PolicyArn=policy_arn)
        self.iam.delete_role(RoleName=role_name)
        for policy_arn in policy_arns:
            self.iam.delete_policy(PolicyArn=policy_arn)
