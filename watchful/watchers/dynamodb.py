"""
DynamoDB Table Watcher
Capacity and throttling alarms and graphs for a DynamoDB table
"""
from typing import Optional
from aws_cdk import (
    Duration,
    Stack,
    aws_cloudwatch as cloudwatch,
    aws_dynamodb as dynamodb,
)
from constructs import Construct

from .watcher_base import WatcherBase

# Period the capacity alarms sum consumed units over
ALARM_PERIOD = Duration.minutes(5)


class WatchDynamoTable(WatcherBase):
    """Watches consumed capacity and throttle events of a DynamoDB table"""

    kind = "dynamodb"

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        title: str,
        watchful,
        table: dynamodb.Table,
        read_capacity_threshold_percent: Optional[float] = None,
        write_capacity_threshold_percent: Optional[float] = None,
        throttled_requests_threshold: Optional[float] = None
    ):
        self.require_resource(table, dynamodb.Table, "DynamoDB table")
        cfn_table = table.node.default_child
        pay_per_request = cfn_table.billing_mode == dynamodb.BillingMode.PAY_PER_REQUEST.value
        if not pay_per_request:
            read_capacity, write_capacity = _provisioned_capacity(table)

        super().__init__(scope, construct_id, title, watchful, {
            "read_capacity_threshold_percent": read_capacity_threshold_percent,
            "write_capacity_threshold_percent": write_capacity_threshold_percent,
            "throttled_requests_threshold": throttled_requests_threshold,
        })
        self.table = table

        self.watchful.add_section(title, links=[
            {"title": "Amazon DynamoDB Console", "url": self._link_for_table()},
        ])

        read_metric = table.metric_consumed_read_capacity_units(
            label="Consumed", period=Duration.minutes(1), statistic="Sum"
        )
        write_metric = table.metric_consumed_write_capacity_units(
            label="Consumed", period=Duration.minutes(1), statistic="Sum"
        )

        if pay_per_request:
            self.watchful.add_widgets(
                self.create_graph_widget("Read Capacity Units/1min", [read_metric], width=12),
                self.create_graph_widget("Write Capacity Units/1min", [write_metric], width=12),
            )
        else:
            read_percent = self.thresholds["read_capacity_threshold_percent"]
            write_percent = self.thresholds["write_capacity_threshold_percent"]
            self._create_capacity_alarm("read", read_metric, read_capacity, read_percent)
            self._create_capacity_alarm("write", write_metric, write_capacity, write_percent)
            self.watchful.add_widgets(
                self._create_capacity_graph("Read", read_metric, read_capacity, read_percent),
                self._create_capacity_graph("Write", write_metric, write_capacity, write_percent),
            )

        self._create_throttles_monitor()

    def _create_capacity_alarm(self, capacity_type: str, metric: cloudwatch.Metric,
                               provisioned: float, percentage: float) -> cloudwatch.Alarm:
        threshold = calculate_units(provisioned, percentage, ALARM_PERIOD)
        return self.create_alarm(
            f"CapacityAlarm:{capacity_type}",
            metric.with_(period=ALARM_PERIOD, statistic="Sum"),
            threshold=threshold,
            comparison_operator=cloudwatch.ComparisonOperator.GREATER_THAN_OR_EQUAL_TO_THRESHOLD,
            evaluation_periods=1,
            alarm_description=f"at {percentage}% of {capacity_type} capacity"
        )

    def _create_capacity_graph(self, capacity_type: str, metric: cloudwatch.Metric,
                               provisioned: float, percentage: float) -> cloudwatch.GraphWidget:
        return self.create_graph_widget(
            f"{capacity_type} Capacity Units/{int(metric.period.to_minutes())}min",
            [metric],
            width=12,
            left_annotations=[
                cloudwatch.HorizontalAnnotation(
                    label="Provisioned",
                    value=provisioned * metric.period.to_seconds(),
                    color="#58D68D"
                ),
                cloudwatch.HorizontalAnnotation(
                    label=f"Alarm on {percentage}%",
                    value=calculate_units(provisioned, percentage, metric.period),
                    color="#FF3333"
                ),
            ]
        )

    def _create_throttles_monitor(self) -> None:
        throttles_metric = cloudwatch.MathExpression(
            expression="read + write",
            label="Throttle events",
            period=ALARM_PERIOD,
            using_metrics={
                "read": self.table.metric("ReadThrottleEvents", statistic="Sum", period=ALARM_PERIOD),
                "write": self.table.metric("WriteThrottleEvents", statistic="Sum", period=ALARM_PERIOD),
            }
        )
        threshold = self.thresholds["throttled_requests_threshold"]
        throttles_alarm = self.create_alarm(
            "ThrottlesAlarm",
            throttles_metric,
            threshold=threshold,
            comparison_operator=cloudwatch.ComparisonOperator.GREATER_THAN_THRESHOLD,
            evaluation_periods=1,
            alarm_description=f"Over {threshold} throttle events per 5 minutes",
            treat_missing_data=cloudwatch.TreatMissingData.NOT_BREACHING
        )
        self.watchful.add_widgets(
            self.create_graph_widget(
                "Throttle Events/5min",
                [throttles_metric],
                width=24,
                left_annotations=[throttles_alarm.to_annotation()]
            )
        )

    def _link_for_table(self) -> str:
        return (f"https://console.aws.amazon.com/dynamodb/home?region={self.region}"
                f"#tables:selected={self.table.table_name};tab=overview")


def calculate_units(provisioned: float, percentage: float, period: Duration) -> float:
    """Capacity units consumed over ``period`` at ``percentage`` of provisioned throughput"""
    return provisioned * (percentage / 100) * period.to_seconds()


def _provisioned_capacity(table: dynamodb.Table):
    cfn_table = table.node.default_child
    throughput = Stack.of(table).resolve(cfn_table.provisioned_throughput) or {}
    read_capacity = throughput.get("readCapacityUnits")
    write_capacity = throughput.get("writeCapacityUnits")
    if read_capacity is None or write_capacity is None:
        raise ValueError(f"Provisioned capacity of {table.node.path} is not set")
    return read_capacity, write_capacity
