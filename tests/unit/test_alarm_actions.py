"""
Unit tests for alarm action helpers
"""
import unittest
import jsii
import aws_cdk as cdk

from aws_cdk import (
    Duration,
    aws_cloudwatch as cloudwatch,
)
from aws_cdk.assertions import Template

from watchful import Watchful
from watchful.alarm_actions import (
    ArnAlarmAction,
    actionable_alarm,
    normalize_alarm_actions,
    supports_alarm_actions,
)


class ActionlessAlarm:
    """Object with an alarm ARN but no way to attach actions"""
    alarm_arn = "arn:aws:cloudwatch:us-east-1:123456789012:alarm:Actionless"


class BareAlarm:
    """Object that accepts actions but is not a construct"""

    def add_alarm_action(self, *actions):
        pass


@jsii.implements(cloudwatch.IAlarm)
class DelegatingAlarm(cdk.Resource):
    """Alarm construct that forwards actions to an inner alarm"""

    def __init__(self, scope, construct_id, metric):
        super().__init__(scope, construct_id)
        self.inner = metric.create_alarm(self, "Inner", threshold=1, evaluation_periods=1)

    @property
    def alarm_arn(self):
        return self.inner.alarm_arn

    @property
    def alarm_name(self):
        return self.inner.alarm_name

    def render_alarm_rule(self):
        return self.inner.render_alarm_rule()

    def add_alarm_action(self, *actions):
        self.inner.add_alarm_action(*actions)


class TestAlarmActions(unittest.TestCase):
    """Test action normalization and alarm capability checks"""

    def setUp(self):
        self.app = cdk.App()
        self.stack = cdk.Stack(self.app, "TestStack")
        self.metric = cloudwatch.Metric(namespace="Test", metric_name="Errors", period=Duration.minutes(1))
        self.alarm = self.metric.create_alarm(self.stack, "Alarm", threshold=1, evaluation_periods=1)

    def imported_alarm(self):
        return cloudwatch.Alarm.from_alarm_arn(
            self.stack, "Imported", "arn:aws:cloudwatch:us-east-1:123456789012:alarm:Imported"
        )

    def test_arns_come_before_bindings(self):
        binding = ArnAlarmAction("arn:binding")
        actions = normalize_alarm_actions(["arn:a", "arn:b"], [binding])

        self.assertEqual([action.alarm_action_arn for action in actions], ["arn:a", "arn:b", "arn:binding"])
        self.assertIs(actions[2], binding)

    def test_no_actions(self):
        self.assertEqual(normalize_alarm_actions(), [])
        self.assertEqual(normalize_alarm_actions([], []), [])

    def test_arn_action_binds_to_arn(self):
        config = ArnAlarmAction("arn:a").bind(self.stack, self.alarm)

        self.assertEqual(config.alarm_action_arn, "arn:a")

    def test_native_alarm_supports_actions(self):
        self.assertTrue(supports_alarm_actions(self.alarm))

    def test_imported_alarm_does_not_support_actions(self):
        self.assertFalse(supports_alarm_actions(self.imported_alarm()))

    def test_object_without_add_alarm_action(self):
        self.assertFalse(supports_alarm_actions(ActionlessAlarm()))

    def test_object_without_node(self):
        self.assertTrue(supports_alarm_actions(BareAlarm()))

    def test_delegating_alarm_supports_actions(self):
        """Constructs that forward add_alarm_action to a child alarm qualify"""
        delegating = DelegatingAlarm(self.stack, "Delegating", self.metric)

        self.assertTrue(supports_alarm_actions(delegating))
        self.assertIs(actionable_alarm(self.stack, delegating), delegating)

    def test_delegating_alarm_gets_actions_directly(self):
        """Actions registered through Watchful land on the inner alarm, with no wrapper"""
        wf = Watchful(self.stack, "watchful", alarm_action_arns=["arn:a"])
        delegating = DelegatingAlarm(self.stack, "Delegating", self.metric)

        wf.add_alarm(delegating)
        template = Template.from_stack(self.stack)

        template.resource_count_is("AWS::CloudWatch::CompositeAlarm", 0)
        template.has_resource_properties("AWS::CloudWatch::Alarm", {
            "AlarmActions": ["arn:a"]
        })

    def test_native_alarm_is_not_wrapped(self):
        self.assertIs(actionable_alarm(self.stack, self.alarm), self.alarm)

    def test_imported_alarm_is_wrapped_once(self):
        imported = self.imported_alarm()
        wrapper = actionable_alarm(self.stack, imported)

        self.assertIsInstance(wrapper, cloudwatch.CompositeAlarm)
        self.assertIs(actionable_alarm(self.stack, imported), wrapper)


if __name__ == '__main__':
    unittest.main()
