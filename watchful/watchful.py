"""
Watchful Construct
Owns the dashboard and alarm topic, and routes every alarm to the configured actions
"""
import logging
from typing import Dict, List, Optional, Sequence, Set
from aws_cdk import (
    CfnOutput,
    Names,
    Stack,
    aws_apigateway as apigw,
    aws_cloudwatch as cloudwatch,
    aws_cloudwatch_actions as cloudwatch_actions,
    aws_dynamodb as dynamodb,
    aws_lambda as lambda_,
    aws_rds as rds,
    aws_sns as sns,
    aws_sns_subscriptions as sns_subs,
    aws_sqs as sqs,
    aws_stepfunctions as sfn,
)
from constructs import Construct, IConstruct

from .alarm_actions import actionable_alarm, normalize_alarm_actions
from .aspect import WatchfulAspect
from .watchers import (
    WatchApiGateway,
    WatchDynamoTable,
    WatchLambdaFunction,
    WatchRdsAurora,
    WatchStateMachine,
    WatchedOperation,
)


logger = logging.getLogger(__name__)


class Watchful(Construct):
    """Dashboard, alarms and notifications for the resources it is asked to watch"""

    def __init__(self, scope: Construct, construct_id: str,
                 alarm_email: Optional[str] = None,
                 alarm_sqs: Optional[sqs.IQueue] = None,
                 alarm_sns: Optional[sns.ITopic] = None,
                 alarm_action_arns: Optional[Sequence[str]] = None,
                 alarm_actions: Optional[Sequence[cloudwatch.IAlarmAction]] = None,
                 dashboard_name: Optional[str] = None,
                 **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.alarm_actions = normalize_alarm_actions(alarm_action_arns, alarm_actions)
        self._registered_alarms: Set[str] = set()

        self.alarm_topic = self._create_alarm_topic(alarm_email, alarm_sqs, alarm_sns)
        self._create_dashboard(dashboard_name)

    def _create_alarm_topic(self, alarm_email: Optional[str], alarm_sqs: Optional[sqs.IQueue],
                            alarm_sns: Optional[sns.ITopic]) -> Optional[sns.ITopic]:
        """Use the given topic, or create one when a subscription is requested"""
        topic = alarm_sns
        if topic is None and (alarm_email or alarm_sqs):
            topic = sns.Topic(self, "AlarmTopic", display_name="Watchful Alarms")
            logger.info(f"Created alarm topic for {self.node.path}")

        # Subscriptions are added to a borrowed topic as well
        if topic is not None and alarm_email:
            topic.add_subscription(sns_subs.EmailSubscription(alarm_email))

        if topic is not None and alarm_sqs:
            topic.add_subscription(sns_subs.SqsSubscription(alarm_sqs))

        return topic

    def _create_dashboard(self, dashboard_name: Optional[str]) -> None:
        """Create the dashboard and export its console link"""
        self.dashboard = cloudwatch.Dashboard(
            self, "Dashboard",
            dashboard_name=dashboard_name
        )

        CfnOutput(
            self, "WatchfulDashboard",
            value=link_for_dashboard(self.dashboard)
        )

    def add_widgets(self, *widgets: cloudwatch.IWidget) -> None:
        """Append widgets to the dashboard"""
        self.dashboard.add_widgets(*widgets)

    def add_section(self, title: str, links: Optional[List[Dict[str, str]]] = None) -> None:
        """Add a full-width heading with optional link buttons ({"title", "url"} dicts)"""
        markdown = [
            f"# {title}",
            " | ".join(f"[button:{link['title']}]({link['url']})" for link in links or []),
        ]

        self.add_widgets(cloudwatch.TextWidget(width=24, markdown="\n".join(markdown)))

    def add_alarm(self, alarm: cloudwatch.IAlarm) -> None:
        """Attach the topic and every configured action to ``alarm``.

        Alarms that cannot carry actions themselves are wrapped in a composite
        alarm mirroring their ALARM state, and the actions go on the wrapper.
        """
        alarm_path = alarm.node.path
        if alarm_path in self._registered_alarms:
            logger.debug(f"Alarm {alarm_path} is already registered")
            return
        self._registered_alarms.add(alarm_path)

        target = actionable_alarm(self, alarm)

        if self.alarm_topic is not None:
            target.add_alarm_action(cloudwatch_actions.SnsAction(self.alarm_topic))

        if self.alarm_actions:
            target.add_alarm_action(*self.alarm_actions)

        logger.debug(f"Registered alarm {alarm_path} with {len(self.alarm_actions)} custom actions")

    def watch_scope(self, scope: IConstruct, api_gateway: bool = True, dynamodb: bool = True,
                    lambda_function: bool = True, rds_aurora: bool = True) -> None:
        """Automatically watch every supported resource under ``scope``"""
        WatchfulAspect.apply(
            scope, self,
            api_gateway=api_gateway,
            dynamodb=dynamodb,
            lambda_function=lambda_function,
            rds_aurora=rds_aurora
        )

    def watch_dynamo_table(self, title: str, table: dynamodb.Table, **options) -> WatchDynamoTable:
        """Watch a DynamoDB table; see WatchDynamoTable for options"""
        return WatchDynamoTable(
            self, _watcher_id(table),
            title=title, watchful=self, table=table, **options
        )

    def watch_api_gateway(self, title: str, rest_api: apigw.RestApi,
                          watched_operations: Optional[Sequence[WatchedOperation]] = None,
                          **options) -> WatchApiGateway:
        """Watch an API Gateway REST API; see WatchApiGateway for options"""
        return WatchApiGateway(
            self, _watcher_id(rest_api),
            title=title, watchful=self, rest_api=rest_api,
            watched_operations=watched_operations, **options
        )

    def watch_lambda_function(self, title: str, fn: lambda_.Function, **options) -> WatchLambdaFunction:
        """Watch a Lambda function; see WatchLambdaFunction for options"""
        return WatchLambdaFunction(
            self, _watcher_id(fn),
            title=title, watchful=self, fn=fn, **options
        )

    def watch_rds_aurora_cluster(self, title: str, cluster: rds.DatabaseCluster, **options) -> WatchRdsAurora:
        """Watch an RDS Aurora cluster; see WatchRdsAurora for options"""
        return WatchRdsAurora(
            self, _watcher_id(cluster),
            title=title, watchful=self, cluster=cluster, **options
        )

    def watch_state_machine(self, title: str, state_machine: sfn.StateMachine, **options) -> WatchStateMachine:
        """Watch a Step Functions state machine; see WatchStateMachine for options"""
        return WatchStateMachine(
            self, _watcher_id(state_machine),
            title=title, watchful=self, state_machine=state_machine, **options
        )


def _watcher_id(resource: Optional[IConstruct]) -> str:
    if resource is None:
        raise ValueError("A resource to watch is required")
    return Names.node_unique_id(resource.node)


def link_for_dashboard(dashboard: cloudwatch.Dashboard) -> str:
    """Console URL of a dashboard, resolved at deploy time"""
    cfn_dashboard = dashboard.node.default_child
    region = Stack.of(dashboard).region
    return f"https://console.aws.amazon.com/cloudwatch/home?region={region}#dashboards:name={cfn_dashboard.ref}"
