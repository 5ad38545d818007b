"""
Watchful Example Application Stack
A small serverless API with Watchful watching everything in it
"""
from typing import Optional, Sequence
from aws_cdk import (
    Duration,
    RemovalPolicy,
    Stack,
    aws_apigateway as apigw,
    aws_dynamodb as dynamodb,
    aws_lambda as lambda_,
)
from constructs import Construct

from .watchful import Watchful


HANDLER_CODE = """
import json
import os

def handler(event, context):
    return {"statusCode": 200, "body": json.dumps({"table": os.environ["TABLE_NAME"]})}
"""


class WatchfulExampleStack(Stack):
    """Example stack: a table, a function, an API, and a Watchful over the whole stack"""

    def __init__(self, scope: Construct, construct_id: str,
                 alarm_email: Optional[str] = None,
                 alarm_action_arns: Optional[Sequence[str]] = None,
                 **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.table = dynamodb.Table(
            self, "Table",
            partition_key=dynamodb.Attribute(name="ID", type=dynamodb.AttributeType.STRING),
            removal_policy=RemovalPolicy.DESTROY
        )

        self.function = lambda_.Function(
            self, "Handler",
            runtime=lambda_.Runtime.PYTHON_3_12,
            handler="index.handler",
            code=lambda_.Code.from_inline(HANDLER_CODE),
            timeout=Duration.seconds(10),
            environment={"TABLE_NAME": self.table.table_name}
        )
        self.table.grant_read_data(self.function)

        self.api = apigw.LambdaRestApi(
            self, "Api",
            handler=self.function
        )

        self.watchful = Watchful(
            self, "Watchful",
            alarm_email=alarm_email,
            alarm_action_arns=alarm_action_arns
        )
        self.watchful.watch_scope(self)
