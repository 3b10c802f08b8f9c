# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from .launch_product import LaunchProduct
from .read_environment_info import ReadEnvironmentInfo
from .replicate_launch_constraint import ReplicateLaunchConstraint
from .share_portfolio import SharePortfolio
from .terminate_product import TerminateProduct

__all__ = [
    "LaunchProduct",
    "ReadEnvironmentInfo",
    "ReplicateLaunchConstraint",
    "SharePortfolio",
    "TerminateProduct",
]
