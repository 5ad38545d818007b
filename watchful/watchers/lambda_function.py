"""
Lambda Function Watcher
Error, throttle and duration alarms and graphs for a Lambda function
"""
import math
from typing import Optional
from aws_cdk import (
    aws_cloudwatch as cloudwatch,
    aws_lambda as lambda_,
)
from constructs import Construct

from .watcher_base import WatcherBase

# Lambda's own default when no timeout is configured
DEFAULT_TIMEOUT_SECONDS = 3


class WatchLambdaFunction(WatcherBase):
    """Watches invocations, errors, throttles and p99 duration of a Lambda function"""

    kind = "lambda_function"

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        title: str,
        watchful,
        fn: lambda_.Function,
        errors_per_minute_threshold: Optional[float] = None,
        throttles_per_minute_threshold: Optional[float] = None,
        duration_threshold_percent: Optional[float] = None
    ):
        self.require_resource(fn, lambda_.Function, "Lambda function")

        super().__init__(scope, construct_id, title, watchful, {
            "errors_per_minute_threshold": errors_per_minute_threshold,
            "throttles_per_minute_threshold": throttles_per_minute_threshold,
            "duration_threshold_percent": duration_threshold_percent,
        })
        self.fn = fn

        timeout_seconds = fn.node.default_child.timeout or DEFAULT_TIMEOUT_SECONDS

        self.watchful.add_section(title, links=[
            {"title": "AWS Lambda Console", "url": self._link_for_function()},
            {"title": "CloudWatch Logs", "url": self._link_for_logs()},
        ])

        invocations_metric = fn.metric_invocations()
        errors_metric, errors_alarm = self._create_errors_monitor()
        throttles_metric, throttles_alarm = self._create_throttles_monitor()
        duration_metric, duration_threshold_ms = self._create_duration_monitor(timeout_seconds)

        self.watchful.add_widgets(
            self.create_graph_widget(
                f"Invocations/{_minutes(invocations_metric)}min",
                [invocations_metric]
            ),
            self.create_graph_widget(
                f"Errors/{_minutes(errors_metric)}min",
                [errors_metric],
                left_annotations=[errors_alarm.to_annotation()]
            ),
            self.create_graph_widget(
                f"Throttles/{_minutes(throttles_metric)}min",
                [throttles_metric],
                left_annotations=[throttles_alarm.to_annotation()]
            ),
            self.create_graph_widget(
                f"Duration/{_minutes(duration_metric)}min",
                [duration_metric],
                left_annotations=[
                    cloudwatch.HorizontalAnnotation(label="p99", value=duration_threshold_ms, color="#FF3333"),
                ]
            ),
        )

    def _create_errors_monitor(self):
        threshold = self.thresholds["errors_per_minute_threshold"]
        errors_metric = self.fn.metric_errors(statistic="Sum")
        errors_alarm = self.create_alarm(
            "ErrorsAlarm",
            errors_metric,
            threshold=threshold,
            comparison_operator=cloudwatch.ComparisonOperator.GREATER_THAN_THRESHOLD,
            evaluation_periods=3,
            alarm_description=f"Over {threshold} errors per minute"
        )
        return errors_metric, errors_alarm

    def _create_throttles_monitor(self):
        threshold = self.thresholds["throttles_per_minute_threshold"]
        throttles_metric = self.fn.metric_throttles(statistic="Sum")
        throttles_alarm = self.create_alarm(
            "ThrottlesAlarm",
            throttles_metric,
            threshold=threshold,
            comparison_operator=cloudwatch.ComparisonOperator.GREATER_THAN_THRESHOLD,
            evaluation_periods=3,
            alarm_description=f"Over {threshold} throttles per minute"
        )
        return throttles_metric, throttles_alarm

    def _create_duration_monitor(self, timeout_seconds: float):
        percent = self.thresholds["duration_threshold_percent"]
        duration_metric = self.fn.metric_duration(statistic="p99")
        threshold_seconds = math.floor(percent / 100 * timeout_seconds)
        threshold_ms = threshold_seconds * 1000
        self.create_alarm(
            "DurationAlarm",
            duration_metric,
            threshold=threshold_ms,
            comparison_operator=cloudwatch.ComparisonOperator.GREATER_THAN_OR_EQUAL_TO_THRESHOLD,
            evaluation_periods=3,
            alarm_description=f"p99 latency >= {threshold_seconds}s ({percent}%)"
        )
        return duration_metric, threshold_ms

    def _link_for_function(self) -> str:
        return (f"https://console.aws.amazon.com/lambda/home?region={self.region}"
                f"#/functions/{self.fn.function_name}?tab=graph")

    def _link_for_logs(self) -> str:
        return (f"https://console.aws.amazon.com/cloudwatch/home?region={self.region}"
                f"#logEventViewer:group=/aws/lambda/{self.fn.function_name}")


def _minutes(metric: cloudwatch.Metric) -> int:
    return int(metric.period.to_minutes())
