"""
Watchful
Dashboards, alarms and notifications for the resources of a CDK app
"""

from .alarm_actions import ArnAlarmAction, actionable_alarm, normalize_alarm_actions, supports_alarm_actions
from .aspect import ResourceKind, WatchfulAspect, resource_kind_of
from .watchful import Watchful, link_for_dashboard
from .watchers import (
    WatcherBase,
    WatchApiGateway,
    WatchedOperation,
    WatchDynamoTable,
    WatchLambdaFunction,
    WatchRdsAurora,
    WatchStateMachine,
)

__all__ = [
    'Watchful',
    'WatchfulAspect',
    'ResourceKind',
    'resource_kind_of',
    'link_for_dashboard',
    'ArnAlarmAction',
    'normalize_alarm_actions',
    'supports_alarm_actions',
    'actionable_alarm',
    'WatcherBase',
    'WatchApiGateway',
    'WatchedOperation',
    'WatchDynamoTable',
    'WatchLambdaFunction',
    'WatchRdsAurora',
    'WatchStateMachine'
]
