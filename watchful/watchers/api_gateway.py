"""
API Gateway Watcher
Call, error and latency alarms and graphs for a REST API, optionally per operation
"""
from typing import Dict, List, NamedTuple, Optional, Sequence
from aws_cdk import (
    Duration,
    aws_apigateway as apigw,
    aws_cloudwatch as cloudwatch,
)
from constructs import Construct

from .watcher_base import WatcherBase


class WatchedOperation(NamedTuple):
    """A single API operation to graph separately"""
    http_method: str
    http_path: str


class WatchApiGateway(WatcherBase):
    """Watches calls, 4XX/5XX errors and latency of an API Gateway REST API"""

    kind = "api_gateway"

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        title: str,
        watchful,
        rest_api: apigw.RestApi,
        server_error_threshold: Optional[float] = None,
        latency_threshold_ms: Optional[float] = None,
        watched_operations: Optional[Sequence[WatchedOperation]] = None,
        cache_graph: bool = False
    ):
        self.require_resource(rest_api, apigw.RestApi, "API Gateway REST API")

        super().__init__(scope, construct_id, title, watchful, {
            "server_error_threshold": server_error_threshold,
            "latency_threshold_ms": latency_threshold_ms,
        })
        self.rest_api = rest_api
        self.api_name = rest_api.node.default_child.name
        self.stage = rest_api.deployment_stage.stage_name
        self.cache_graph = cache_graph

        error_threshold = self.thresholds["server_error_threshold"]
        if error_threshold:
            self.create_alarm(
                "5XXErrorAlarm",
                self._metric("5XXError", label="HTTP 5XX", statistic="Sum", period=Duration.minutes(5)),
                threshold=error_threshold,
                comparison_operator=cloudwatch.ComparisonOperator.GREATER_THAN_OR_EQUAL_TO_THRESHOLD,
                evaluation_periods=1,
                alarm_description=f"at {error_threshold} 5XX errors over 5 minutes"
            )

        latency_threshold = self.thresholds["latency_threshold_ms"]
        if latency_threshold:
            self.create_alarm(
                "LatencyAlarm",
                self._metric("Latency", label="p99", statistic="p99", period=Duration.minutes(5)),
                threshold=latency_threshold,
                comparison_operator=cloudwatch.ComparisonOperator.GREATER_THAN_OR_EQUAL_TO_THRESHOLD,
                evaluation_periods=3,
                alarm_description=f"p99 latency >= {latency_threshold}ms"
            )

        self.watchful.add_section(title, links=[
            {"title": "Amazon API Gateway Console", "url": self._link_for_api()},
        ])

        for operation in [None, *(watched_operations or [])]:
            self.watchful.add_widgets(*self._create_operation_widgets(operation, error_threshold))

    def _create_operation_widgets(self, operation: Optional[WatchedOperation],
                                  error_threshold: Optional[float]) -> List[cloudwatch.GraphWidget]:
        prefix = f"{operation.http_method} {operation.http_path}" if operation else "Overall"
        width = 6 if self.cache_graph else 8

        calls_annotations = []
        if error_threshold:
            calls_annotations.append(
                cloudwatch.HorizontalAnnotation(value=error_threshold, color="#FF0000", label="5XX Errors Alarm")
            )

        widgets = [
            self.create_graph_widget(
                f"{prefix} Calls/min",
                [
                    self._metric("Count", operation, label="Calls", statistic="Sum", color="#1F77B4"),
                    self._metric("4XXError", operation, label="HTTP 4XX", statistic="Sum", color="#FF7F0E"),
                    self._metric("5XXError", operation, label="HTTP 5XX", statistic="Sum", color="#D62728"),
                ],
                width=width,
                left_annotations=calls_annotations
            ),
        ]

        if self.cache_graph:
            widgets.append(
                self.create_graph_widget(
                    f"{prefix} Cache/min",
                    [
                        self._metric("CacheHitCount", operation, label="Hit", statistic="Sum"),
                        self._metric("CacheMissCount", operation, label="Miss", statistic="Sum"),
                    ],
                    width=width
                )
            )

        widgets.append(
            self.create_graph_widget(
                f"{prefix} Latency (ms)",
                self._latency_metrics("Latency", operation),
                width=width
            )
        )
        widgets.append(
            self.create_graph_widget(
                f"{prefix} Backend Latency (ms)",
                self._latency_metrics("IntegrationLatency", operation),
                width=width
            )
        )
        return widgets

    def _latency_metrics(self, metric_name: str,
                         operation: Optional[WatchedOperation]) -> List[cloudwatch.Metric]:
        return [
            self._metric(metric_name, operation, label=statistic, statistic=statistic)
            for statistic in ("Minimum", "Average", "p90", "Maximum")
        ]

    def _metric(self, metric_name: str, operation: Optional[WatchedOperation] = None,
                period: Optional[Duration] = None, **metric_props) -> cloudwatch.Metric:
        dimensions: Dict[str, str] = {"ApiName": self.api_name, "Stage": self.stage}
        if operation:
            dimensions["Method"] = operation.http_method
            dimensions["Resource"] = operation.http_path

        return cloudwatch.Metric(
            namespace="AWS/ApiGateway",
            metric_name=metric_name,
            dimensions_map=dimensions,
            period=period or Duration.minutes(1),
            **metric_props
        )

    def _link_for_api(self) -> str:
        return (f"https://console.aws.amazon.com/apigateway/home?region={self.region}"
                f"#/apis/{self.rest_api.rest_api_id}")
