# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import json

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from env_provisioning.client_provider import account_id_from_arn, find_or_none
from env_provisioning.constants import ALREADY_EXISTS_ERROR_CODE
from env_provisioning.errors import RoleCloneError

logger = Logger(service="Environment Provisioning Role Cloner", level="INFO")

MAX_POLICY_VERSIONS = 5


def _policy_document_text(document) -> str:
    # boto3 returns IAM policy documents already URL-decoded and parsed
    if isinstance(document, (dict, list)):
        return json.dumps(document)
    return document


def _is_aws_managed(policy: dict) -> bool:
    # arn:aws:iam::aws:policy/AmazonEC2FullAccess vs arn:aws:iam::123456789012:policy/CustomerPolicy
    return account_id_from_arn(policy['PolicyArn']) == 'aws'


def _already_exists(error: ClientError) -> bool:
    return error.response['Error']['Code'] == ALREADY_EXISTS_ERROR_CODE


class RoleCloner:
    """
    Clones an IAM role from a source account into a target account with the same name, trust policy,
    description, inline policies and managed policies. Cloning is create-or-update, so running it
    again against an already cloned role only applies the differences.

    Roles with a permissions boundary are not supported.
    """

    def __init__(self, src_iam_client, target_iam_client):
        self.src = src_iam_client
        self.target = target_iam_client

    @staticmethod
    def get_role(iam_client, role_name: str):
        response = find_or_none(iam_client.get_role, RoleName=role_name)
        return response['Role'] if response else None

    @staticmethod
    def _list(iam_client, operation_name: str, result_key: str, **kwargs) -> list:
        items = []
        for page in iam_client.get_paginator(operation_name).paginate(**kwargs):
            items.extend(page.get(result_key, []))
        return items

    def clone_role(self, role_name: str) -> dict:
        src_role = self.get_role(self.src, role_name)
        if not src_role:
            raise RoleCloneError(f'Cannot clone "{role_name}" role. The role does not exist in the source account.')
        if src_role.get('PermissionsBoundary'):
            raise RoleCloneError(
                f'Cannot clone "{role_name}" role. Cloning of roles with PermissionsBoundary is not supported yet.'
            )

        target_role = self.get_role(self.target, role_name)
        if target_role and target_role.get('Arn') == src_role.get('Arn'):
            # source and target are the same account
            return target_role

        if target_role:
            self._update_role(src_role, target_role)
        else:
            target_role = self._create_role(src_role)

        self.sync_inline_policies(role_name)
        self.sync_managed_policies(role_name)
        return target_role

    def _create_role(self, src_role: dict) -> dict:
        logger.info(f'Creating role {src_role["RoleName"]} in the target account')
        params = {
            'RoleName': src_role['RoleName'],
            'AssumeRolePolicyDocument': _policy_document_text(src_role['AssumeRolePolicyDocument']),
            'Path': src_role.get('Path', '/'),
        }
        if src_role.get('Description'):
            params['Description'] = src_role['Description']
        if src_role.get('MaxSessionDuration'):
            params['MaxSessionDuration'] = src_role['MaxSessionDuration']
        if src_role.get('Tags'):
            params['Tags'] = src_role['Tags']
        try:
            return self.target.create_role(**params)['Role']
        except ClientError as e:
            if not _already_exists(e):
                raise
        # created by a concurrent clone of the same role since the lookup
        target_role = self.get_role(self.target, src_role['RoleName'])
        self._update_role(src_role, target_role)
        return target_role

    def _update_role(self, src_role: dict, target_role: dict):
        role_name = src_role['RoleName']
        if src_role['AssumeRolePolicyDocument'] != target_role['AssumeRolePolicyDocument']:
            logger.info(f'Updating the trust policy of role {role_name} in the target account')
            self.target.update_assume_role_policy(
                RoleName=role_name,
                PolicyDocument=_policy_document_text(src_role['AssumeRolePolicyDocument']),
            )
        if src_role.get('Description', '') != target_role.get('Description', ''):
            self.target.update_role_description(RoleName=role_name, Description=src_role.get('Description', ''))

    def sync_inline_policies(self, role_name: str):
        src_names = self._list(self.src, 'list_role_policies', 'PolicyNames', RoleName=role_name)
        target_names = self._list(self.target, 'list_role_policies', 'PolicyNames', RoleName=role_name)

        for policy_name in src_names:
            src_policy = self.src.get_role_policy(RoleName=role_name, PolicyName=policy_name)
            target_policy = None
            if policy_name in target_names:
                target_policy = find_or_none(self.target.get_role_policy, RoleName=role_name, PolicyName=policy_name)
            if target_policy and target_policy['PolicyDocument'] == src_policy['PolicyDocument']:
                continue
            self.target.put_role_policy(
                RoleName=role_name,
                PolicyName=policy_name,
                PolicyDocument=_policy_document_text(src_policy['PolicyDocument']),
            )

        for policy_name in target_names:
            if policy_name not in src_names:
                self.target.delete_role_policy(RoleName=role_name, PolicyName=policy_name)

    def sync_managed_policies(self, role_name: str):
        src_policies = self._list(self.src, 'list_attached_role_policies', 'AttachedPolicies', RoleName=role_name)
        target_policies = self._list(self.target, 'list_attached_role_policies', 'AttachedPolicies', RoleName=role_name)

        self._sync_aws_managed_policies(
            role_name,
            [p for p in src_policies if _is_aws_managed(p)],
            [p for p in target_policies if _is_aws_managed(p)],
        )
        self._sync_customer_managed_policies(
            role_name,
            [p for p in src_policies if not _is_aws_managed(p)],
            [p for p in target_policies if not _is_aws_managed(p)],
        )

    def _sync_aws_managed_policies(self, role_name: str, src_policies: list, target_policies: list):
        src_arns = [p['PolicyArn'] for p in src_policies]
        target_arns = [p['PolicyArn'] for p in target_policies]
        for arn in src_arns:
            if arn not in target_arns:
                self.target.attach_role_policy(RoleName=role_name, PolicyArn=arn)
        for arn in target_arns:
            if arn not in src_arns:
                self.target.detach_role_policy(RoleName=role_name, PolicyArn=arn)

    def _sync_customer_managed_policies(self, role_name: str, src_policies: list, target_policies: list):
        # customer managed policies are matched by name, their ARNs differ by account
        target_by_name = {p['PolicyName']: p for p in target_policies}
        src_names = {p['PolicyName'] for p in src_policies}
        target_account_id = account_id_from_arn(self.get_role(self.target, role_name)['Arn']) if src_policies else None

        for src_policy in src_policies:
            policy_info, document = self._get_default_policy_document(self.src, src_policy['PolicyArn'])
            target_policy = target_by_name.get(src_policy['PolicyName'])
            if target_policy is None:
                # the policy may exist unattached, e.g. left behind by an interrupted clone
                policy_arn = self._ensure_policy(target_account_id, policy_info, document)
                self.target.attach_role_policy(RoleName=role_name, PolicyArn=policy_arn)
            else:
                self._sync_policy_document(target_policy['PolicyArn'], document)

        for target_policy in target_policies:
            if target_policy['PolicyName'] in src_names:
                continue
            self.target.detach_role_policy(RoleName=role_name, PolicyArn=target_policy['PolicyArn'])
            response = find_or_none(self.target.get_policy, PolicyArn=target_policy['PolicyArn'])
            policy_info = response['Policy'] if response else None
            if (
                policy_info
                and policy_info.get('AttachmentCount', 0) <= 0
                and policy_info.get('PermissionsBoundaryUsageCount', 0) <= 0
            ):
                self.delete_policy(target_policy['PolicyArn'])

    def _ensure_policy(self, target_account_id: str, policy_info: dict, document) -> str:
        """Create the policy in the target account, or bring an existing one with the same name up to date."""
        path = policy_info.get('Path', '/')
        policy_arn = f'arn:aws:iam::{target_account_id}:policy{path}{policy_info["PolicyName"]}'
        if find_or_none(self.target.get_policy, PolicyArn=policy_arn) is None:
            params = {
                'PolicyName': policy_info['PolicyName'],
                'Path': path,
                'PolicyDocument': _policy_document_text(document),
            }
            if policy_info.get('Description'):
                params['Description'] = policy_info['Description']
            try:
                return self.target.create_policy(**params)['Policy']['Arn']
            except ClientError as e:
                if not _already_exists(e):
                    raise
        self._sync_policy_document(policy_arn, document)
        return policy_arn

    def _sync_policy_document(self, policy_arn: str, document):
        _, target_document = self._get_default_policy_document(self.target, policy_arn)
        if target_document != document:
            self.create_policy_version(policy_arn, document)

    @staticmethod
    def _get_default_policy_document(iam_client, policy_arn: str):
        policy_info = iam_client.get_policy(PolicyArn=policy_arn)['Policy']
        version = iam_client.get_policy_version(PolicyArn=policy_arn, VersionId=policy_info['DefaultVersionId'])
        return policy_info, version['PolicyVersion']['Document']

    def create_policy_version(self, policy_arn: str, document):
        """Make ``document`` the default version of the policy, rotating out the oldest version at the limit."""
        versions = self._list(self.target, 'list_policy_versions', 'Versions', PolicyArn=policy_arn)
        if len(versions) >= MAX_POLICY_VERSIONS:
            non_default = [v for v in versions if not v.get('IsDefaultVersion')]
            oldest = min(non_default, key=lambda v: v['CreateDate'])
            self.target.delete_policy_version(PolicyArn=policy_arn, VersionId=oldest['VersionId'])
        self.target.create_policy_version(
            PolicyArn=policy_arn,
            PolicyDocument=_policy_document_text(document),
            SetAsDefault=True,
        )

    def delete_policy(self, policy_arn: str):
        versions = self._list(self.target, 'list_policy_versions', 'Versions', PolicyArn=policy_arn)
        for version in versions:
            if not version.get('IsDefaultVersion'):
                self.target.delete_policy_version(PolicyArn=policy_arn, VersionId=version['VersionId'])
        self.target.delete_policy(PolicyArn=policy_arn)
