"""
Alarm Actions for Watchful
Normalizes configured alarm actions and wraps alarms that cannot carry actions
"""
import logging
from typing import List, Optional, Sequence
import jsii
from aws_cdk import (
    Names,
    aws_cloudwatch as cloudwatch,
)
from constructs import Construct


logger = logging.getLogger(__name__)


@jsii.implements(cloudwatch.IAlarmAction)
class ArnAlarmAction:
    """Alarm action that notifies a literal ARN"""

    def __init__(self, alarm_action_arn: str) -> None:
        self.alarm_action_arn = alarm_action_arn

    def bind(self, scope: Construct, alarm: cloudwatch.IAlarm) -> cloudwatch.AlarmActionConfig:
        return cloudwatch.AlarmActionConfig(alarm_action_arn=self.alarm_action_arn)


def normalize_alarm_actions(alarm_action_arns: Optional[Sequence[str]] = None,
                            alarm_actions: Optional[Sequence[cloudwatch.IAlarmAction]] = None
                            ) -> List[cloudwatch.IAlarmAction]:
    """Turn literal ARNs and action bindings into one ordered action list.

    ARNs come first, then the bindings, each in declaration order. Bindings are
    resolved by the alarm when they are attached, once per alarm.
    """
    actions: List[cloudwatch.IAlarmAction] = [
        ArnAlarmAction(arn) for arn in alarm_action_arns or []
    ]
    actions.extend(alarm_actions or [])
    return actions


def supports_alarm_actions(alarm: cloudwatch.IAlarm) -> bool:
    """Whether actions attached to ``alarm`` end up on a deployed alarm resource"""
    if not callable(getattr(alarm, "add_alarm_action", None)):
        return False

    # Imported alarms accept actions but are bare references with no children
    node = getattr(alarm, "node", None)
    if node is None:
        return True
    return len(node.children) > 0


def actionable_alarm(scope: Construct, alarm: cloudwatch.IAlarm) -> cloudwatch.IAlarm:
    """Return ``alarm`` itself, or a composite alarm mirroring its ALARM state.

    The wrapper is created once per alarm under ``scope`` and reused afterwards.
    """
    if supports_alarm_actions(alarm):
        return alarm

    wrapper_id = f"{Names.node_unique_id(alarm.node)}Wrapper"
    existing = scope.node.try_find_child(wrapper_id)
    if existing is not None:
        return existing

    logger.debug(f"Wrapping {alarm.node.path} in a composite alarm to carry actions")
    return cloudwatch.CompositeAlarm(
        scope, wrapper_id,
        alarm_description=f"Mirrors ALARM state of {alarm.node.path}",
        alarm_rule=cloudwatch.AlarmRule.from_alarm(alarm, cloudwatch.AlarmState.ALARM)
    )
