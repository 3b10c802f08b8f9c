# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from microservice_shared.aws_clients import get_service_client


class Metrics:
    def __init__(self, metrics_namespace, resource_prefix, logger):
        """
        Initialize the Metrics class.

        :param metrics_namespace: The namespace for CloudWatch metrics.
        :param resource_prefix: A prefix used for CloudWatch metric dimensions.
        :param logger: Logger instance for logging information and errors.
        """
        self.metrics_namespace = metrics_namespace
        self.resource_prefix = resource_prefix
        self.logger = logger

    def _metric(self, metric_name, value):
        return {
            'MetricName': metric_name,
            'Dimensions': [{'Name': 'stack-name', 'Value': self.resource_prefix}],
            'Value': value,
            'Unit': 'Count'
        }

    def put_metrics_count_value_1(self, metric_name):
        """
        Record a metric with a value of 1 in CloudWatch.

        :param metric_name: The name of the metric to record.
        """
        try:
            self.logger.info(
                f"Recording 1 (count) for metric {metric_name} in CloudWatch namespace {self.metrics_namespace}")
            cloudwatch_client = get_service_client('cloudwatch')
            cloudwatch_client.put_metric_data(
                Namespace=self.metrics_namespace,
                MetricData=[self._metric(metric_name, 1)]
            )
        except Exception as e:
            # Log error but do not raise so that execution is not interrupted
            self.logger.error(f"Error recording metric {metric_name}: {e}")
