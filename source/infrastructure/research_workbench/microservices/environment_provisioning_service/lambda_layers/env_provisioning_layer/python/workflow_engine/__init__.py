# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from .decisions import CallDecision, WaitDecision, WaitDecisionBuilder
from .payload import MissingPayloadKeyError, PayloadTypeError, StepState, WorkflowPayload
from .runner import WorkflowRunner
from .services import ServiceNotFoundError, ServicesContainer
from .state_store import InMemoryWorkflowStateStore, WorkflowInstanceNotFoundError, WorkflowStateStore
from .step_base import StepBase
from .step_loop import StepLoop, StepLoopError

__all__ = [
    "CallDecision",
    "WaitDecision",
    "WaitDecisionBuilder",
    "MissingPayloadKeyError",
    "PayloadTypeError",
    "StepState",
    "WorkflowPayload",
    "WorkflowRunner",
    "ServiceNotFoundError",
    "ServicesContainer",
    "InMemoryWorkflowStateStore",
    "WorkflowInstanceNotFoundError",
    "WorkflowStateStore",
    "StepBase",
    "StepLoop",
    "StepLoopError",
]
