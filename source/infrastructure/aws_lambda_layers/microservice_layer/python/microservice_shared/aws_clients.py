# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import os

import boto3
from botocore.config import Config

_service_clients = {}
_service_resources = {}


def get_botocore_config(**overrides) -> Config:
    """
    Build the botocore configuration shared by every client created by the solution.

    Parameters
    ----------
    overrides:
        Additional keyword arguments merged into the botocore Config

    Returns
    -------
    botocore.config.Config
    """
    solution_id = os.environ.get("SOLUTION_ID", "SO0000")
    solution_version = os.environ.get("SOLUTION_VERSION", "v0.0.0")
    options = {
        "region_name": os.environ.get("AWS_REGION", os.environ.get("AWS_DEFAULT_REGION")),
        "retries": {"max_attempts": 10, "mode": "standard"},
        "user_agent_extra": f"AwsSolution/{solution_id}/{solution_version}",
    }
    options.update(overrides)
    return Config(**options)


def get_service_client(service_name: str, **kwargs):
    """
    Return a cached boto3 client for the given service, created with the solution botocore config.
    Clients created with explicit keyword arguments (credentials, region) are never cached.
    """
    if kwargs:
        return boto3.client(service_name, config=get_botocore_config(), **kwargs)

    if service_name not in _service_clients:
        _service_clients[service_name] = boto3.client(service_name, config=get_botocore_config())
    return _service_clients[service_name]


def get_service_resource(service_name: str, **kwargs):
    """
    Return a cached boto3 resource for the given service, created with the solution botocore config.
    """
    if kwargs:
        return boto3.resource(service_name, config=get_botocore_config(), **kwargs)

    if service_name not in _service_resources:
        _service_resources[service_name] = boto3.resource(service_name, config=get_botocore_config())
    return _service_resources[service_name]


def reset_service_clients():
    _service_clients.clear()
    _service_resources.clear()
