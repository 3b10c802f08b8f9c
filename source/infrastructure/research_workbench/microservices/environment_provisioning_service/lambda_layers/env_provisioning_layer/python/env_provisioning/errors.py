# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0


class EnvProvisioningError(Exception):
    """Base class for errors raised by the environment provisioning workflows."""


class ConfigurationError(EnvProvisioningError):
    """The product, portfolio, launch constraint or account setup does not allow the launch."""


class RoleCloneError(EnvProvisioningError):
    pass


class ProvisioningFailedError(EnvProvisioningError):
    """AWS Service Catalog reported a failed provisioning or termination."""


class WorkflowTimeoutError(EnvProvisioningError):
    pass


class VariableResolutionError(EnvProvisioningError):
    pass


class NotFoundError(EnvProvisioningError):
    pass

