"""
Step Functions Watcher
Execution failure, throttling and timeout alarms for a state machine
"""
from typing import Optional
from aws_cdk import (
    Duration,
    aws_cloudwatch as cloudwatch,
    aws_stepfunctions as sfn,
)
from constructs import Construct

from .watcher_base import WatcherBase


class WatchStateMachine(WatcherBase):
    """Watches executions of a Step Functions state machine"""

    kind = "state_machine"

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        title: str,
        watchful,
        state_machine: sfn.StateMachine,
        failed_executions_threshold: Optional[float] = None,
        throttled_executions_threshold: Optional[float] = None,
        timed_out_executions_threshold: Optional[float] = None
    ):
        self.require_resource(state_machine, sfn.StateMachine, "Step Functions state machine")

        super().__init__(scope, construct_id, title, watchful, {
            "failed_executions_threshold": failed_executions_threshold,
            "throttled_executions_threshold": throttled_executions_threshold,
            "timed_out_executions_threshold": timed_out_executions_threshold,
        })
        self.state_machine = state_machine

        self.watchful.add_section(title, links=[
            {"title": "AWS Step Functions Console", "url": self._link_for_state_machine()},
        ])

        period = Duration.minutes(5)
        failed_metric = state_machine.metric_failed(period=period, statistic="Sum", label="Failed")
        throttled_metric = state_machine.metric_throttled(period=period, statistic="Sum", label="Throttled")
        timed_out_metric = state_machine.metric_timed_out(period=period, statistic="Sum", label="Timed out")

        for alarm_id, metric, key in (
            ("ExecutionsFailedAlarm", failed_metric, "failed_executions_threshold"),
            ("ExecutionsThrottledAlarm", throttled_metric, "throttled_executions_threshold"),
            ("ExecutionsTimedOutAlarm", timed_out_metric, "timed_out_executions_threshold"),
        ):
            threshold = self.thresholds[key]
            self.create_alarm(
                alarm_id,
                metric,
                threshold=threshold,
                comparison_operator=cloudwatch.ComparisonOperator.GREATER_THAN_THRESHOLD,
                evaluation_periods=1,
                alarm_description=f"Over {threshold} {metric.label.lower()} executions per 5 minutes",
                treat_missing_data=cloudwatch.TreatMissingData.NOT_BREACHING
            )

        self.watchful.add_widgets(
            self.create_graph_widget(
                "Executions",
                [
                    state_machine.metric_started(period=period, statistic="Sum", label="Started"),
                    state_machine.metric_succeeded(period=period, statistic="Sum", label="Succeeded"),
                    failed_metric,
                ],
                width=12
            ),
            self.create_graph_widget(
                "Execution Time (ms)",
                [state_machine.metric_time(period=period, statistic="Average", label="Avg Execution Time")],
                right=[throttled_metric, timed_out_metric],
                width=12
            ),
        )

    def _link_for_state_machine(self) -> str:
        return (f"https://console.aws.amazon.com/states/home?region={self.region}"
                f"#/statemachines/view/{self.state_machine.state_machine_arn}")
