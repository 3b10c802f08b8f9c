# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from aws_lambda_powertools import Logger

from workflow_engine.decisions import WaitDecisionBuilder
from workflow_engine.payload import StepState, WorkflowPayload
from workflow_engine.services import ServicesContainer


class StepBase:
    """
    Base class for workflow steps.

    The step loop calls ``start`` once. A step that finishes right away returns None; a step that
    has to wait for an asynchronous operation returns ``self.wait(...)``. Failures raised from any
    step method are routed to ``on_fail``.
    """

    def __init__(
            self,
            payload: WorkflowPayload,
            state: StepState = None,
            settings=None,
            services: ServicesContainer = None,
            logger: Logger = None,
    ):
        self.payload = payload
        self.state = state if state is not None else StepState()
        self.settings = settings
        self.services = services if services is not None else ServicesContainer()
        self.logger = logger or Logger(service=self.__class__.__name__, level="INFO")

    def input_keys(self) -> dict:
        return {}

    def output_keys(self) -> dict:
        return {}

    def start(self):
        raise NotImplementedError

    def on_pass(self):
        """Invoked by the step loop when the step completes."""

    def wait(self, seconds) -> WaitDecisionBuilder:
        return WaitDecisionBuilder(seconds)

    def print(self, msg, **fields):
        self.logger.info(msg, extra=fields)

    def print_error(self, error, **fields):
        self.logger.error(f'{self.__class__.__name__} failed: {error}', extra=fields)
