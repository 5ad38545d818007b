"""
Unit tests for the Watchful aspect
Tests automatic discovery of supported resources within a scope
"""
import unittest
import aws_cdk as cdk

from aws_cdk import (
    aws_apigateway as apigw,
    aws_dynamodb as dynamodb,
    aws_ec2 as ec2,
    aws_lambda as lambda_,
    aws_rds as rds,
    aws_s3 as s3,
    aws_sqs as sqs,
)
from aws_cdk.assertions import Template

from watchful import (
    Watchful,
    WatchApiGateway,
    WatchDynamoTable,
    WatchLambdaFunction,
    WatchRdsAurora,
)
from watchful.aspect import ResourceKind, resource_kind_of


WATCHER_TYPES = (WatchApiGateway, WatchDynamoTable, WatchLambdaFunction, WatchRdsAurora)


def watchers_of(watchful, watcher_type):
    return [child for child in watchful.node.children if isinstance(child, watcher_type)]


class TestWatchedStack(unittest.TestCase):
    """Base setup for discovery tests"""

    def setUp(self):
        """Create a stack with one resource of each supported kind plus unsupported ones"""
        self.app = cdk.App()
        self.stack = cdk.Stack(self.app, "TestStack")

        self.table = dynamodb.Table(
            self.stack, "Table",
            partition_key=dynamodb.Attribute(name="ID", type=dynamodb.AttributeType.STRING)
        )
        self.function = lambda_.Function(
            self.stack, "Function",
            runtime=lambda_.Runtime.PYTHON_3_12,
            handler="index.handler",
            code=lambda_.Code.from_inline("def handler(event, context):\n    return event\n")
        )
        self.api = apigw.LambdaRestApi(self.stack, "Api", handler=self.function)
        self.cluster = rds.DatabaseCluster(
            self.stack, "Cluster",
            engine=rds.DatabaseClusterEngine.aurora_mysql(
                version=rds.AuroraMysqlEngineVersion.VER_3_04_0
            ),
            writer=rds.ClusterInstance.provisioned("Writer"),
            vpc=ec2.Vpc(self.stack, "Vpc")
        )
        sqs.Queue(self.stack, "Queue")
        s3.Bucket(self.stack, "Bucket")


class TestWatchfulAspect(TestWatchedStack):
    """Test watch_scope discovery"""

    def watch(self, **flags):
        watchful = Watchful(self.stack, "watchful")
        watchful.watch_scope(self.stack, **flags)
        return watchful, Template.from_stack(self.stack)

    def assert_watcher_counts(self, watchful, api_gateway, dynamodb, lambda_function, rds_aurora):
        self.assertEqual(len(watchers_of(watchful, WatchApiGateway)), api_gateway)
        self.assertEqual(len(watchers_of(watchful, WatchDynamoTable)), dynamodb)
        self.assertEqual(len(watchers_of(watchful, WatchLambdaFunction)), lambda_function)
        self.assertEqual(len(watchers_of(watchful, WatchRdsAurora)), rds_aurora)

    def test_watches_every_supported_resource(self):
        """Each supported resource gets exactly one watcher"""
        watchful, template = self.watch()

        self.assert_watcher_counts(watchful, api_gateway=1, dynamodb=1, lambda_function=1, rds_aurora=1)
        # 1 API + 3 table + 3 function + 1 cluster
        template.resource_count_is("AWS::CloudWatch::Alarm", 8)

    def test_api_gateway_disabled(self):
        watchful, template = self.watch(api_gateway=False)

        self.assert_watcher_counts(watchful, api_gateway=0, dynamodb=1, lambda_function=1, rds_aurora=1)
        template.resource_count_is("AWS::CloudWatch::Alarm", 7)

    def test_dynamodb_disabled(self):
        watchful, template = self.watch(dynamodb=False)

        self.assert_watcher_counts(watchful, api_gateway=1, dynamodb=0, lambda_function=1, rds_aurora=1)
        template.resource_count_is("AWS::CloudWatch::Alarm", 5)

    def test_lambda_function_disabled(self):
        watchful, template = self.watch(lambda_function=False)

        self.assert_watcher_counts(watchful, api_gateway=1, dynamodb=1, lambda_function=0, rds_aurora=1)
        template.resource_count_is("AWS::CloudWatch::Alarm", 5)

    def test_rds_aurora_disabled(self):
        watchful, template = self.watch(rds_aurora=False)

        self.assert_watcher_counts(watchful, api_gateway=1, dynamodb=1, lambda_function=1, rds_aurora=0)
        template.resource_count_is("AWS::CloudWatch::Alarm", 7)

    def test_all_kinds_disabled(self):
        """With every kind off, queues, buckets and everything else produce nothing"""
        watchful, template = self.watch(
            api_gateway=False, dynamodb=False, lambda_function=False, rds_aurora=False
        )

        self.assertEqual(
            [child for child in watchful.node.children if isinstance(child, WATCHER_TYPES)], []
        )
        template.resource_count_is("AWS::CloudWatch::Alarm", 0)

    def test_title_is_node_path(self):
        """Discovered resources are titled by their construct path"""
        watchful, _ = self.watch()

        [table_watcher] = watchers_of(watchful, WatchDynamoTable)
        [function_watcher] = watchers_of(watchful, WatchLambdaFunction)
        [cluster_watcher] = watchers_of(watchful, WatchRdsAurora)
        self.assertEqual(table_watcher.title, "TestStack/Table")
        self.assertEqual(function_watcher.title, "TestStack/Function")
        self.assertEqual(cluster_watcher.title, "TestStack/Cluster")

    def test_nested_scope_only(self):
        """Only resources under the given scope are watched"""
        other = cdk.Stack(self.app, "Other")
        dynamodb.Table(
            other, "Table",
            partition_key=dynamodb.Attribute(name="ID", type=dynamodb.AttributeType.STRING)
        )
        watchful = Watchful(other, "watchful")
        watchful.watch_scope(other)
        Template.from_stack(other)

        [table_watcher] = watchers_of(watchful, WatchDynamoTable)
        self.assertEqual(table_watcher.title, "Other/Table")
        self.assertEqual(watchers_of(watchful, WatchLambdaFunction), [])
        self.assertEqual(watchers_of(watchful, WatchRdsAurora), [])


class TestResourceKind(TestWatchedStack):
    """Test resource kind detection"""

    def test_supported_kinds(self):
        self.assertIs(resource_kind_of(self.table), ResourceKind.DYNAMODB)
        self.assertIs(resource_kind_of(self.api), ResourceKind.API_GATEWAY)
        self.assertIs(resource_kind_of(self.function), ResourceKind.LAMBDA_FUNCTION)
        self.assertIs(resource_kind_of(self.cluster), ResourceKind.RDS_AURORA)

    def test_unsupported_kinds(self):
        self.assertIsNone(resource_kind_of(self.stack.node.find_child("Queue")))
        self.assertIsNone(resource_kind_of(self.stack.node.find_child("Bucket")))
        self.assertIsNone(resource_kind_of(self.stack))


if __name__ == '__main__':
    unittest.main()
