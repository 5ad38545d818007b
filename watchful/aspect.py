"""
Watchful Aspect
Discovers supported resources in a construct tree and watches them
"""
import logging
from enum import Enum
from typing import TYPE_CHECKING, Dict, Optional
import jsii
from aws_cdk import (
    Aspects,
    IAspect,
    aws_apigateway as apigw,
    aws_dynamodb as dynamodb,
    aws_lambda as lambda_,
    aws_rds as rds,
)
from constructs import IConstruct

if TYPE_CHECKING:
    from .watchful import Watchful


logger = logging.getLogger(__name__)


class ResourceKind(Enum):
    """Resource kinds that can be discovered automatically"""
    API_GATEWAY = "api_gateway"
    DYNAMODB = "dynamodb"
    LAMBDA_FUNCTION = "lambda_function"
    RDS_AURORA = "rds_aurora"


_KIND_TYPES = (
    (ResourceKind.API_GATEWAY, apigw.RestApi),
    (ResourceKind.DYNAMODB, dynamodb.Table),
    (ResourceKind.LAMBDA_FUNCTION, lambda_.Function),
    (ResourceKind.RDS_AURORA, rds.DatabaseCluster),
)


def resource_kind_of(node: IConstruct) -> Optional[ResourceKind]:
    """The kind of ``node``, or None when it is not a watchable resource"""
    for kind, resource_type in _KIND_TYPES:
        if isinstance(node, resource_type):
            return kind
    return None


@jsii.implements(IAspect)
class WatchfulAspect:
    """CDK Aspect that watches every supported resource within a scope"""

    def __init__(self, watchful: "Watchful", api_gateway: bool = True, dynamodb: bool = True,
                 lambda_function: bool = True, rds_aurora: bool = True):
        self.watchful = watchful
        self.enabled: Dict[ResourceKind, bool] = {
            ResourceKind.API_GATEWAY: api_gateway,
            ResourceKind.DYNAMODB: dynamodb,
            ResourceKind.LAMBDA_FUNCTION: lambda_function,
            ResourceKind.RDS_AURORA: rds_aurora,
        }

    @classmethod
    def apply(cls, scope: IConstruct, watchful: "Watchful", **flags: bool) -> "WatchfulAspect":
        """Create the aspect and register it on ``scope``"""
        aspect = cls(watchful, **flags)
        Aspects.of(scope).add(aspect)
        return aspect

    def visit(self, node: IConstruct) -> None:
        """Watch ``node`` if its kind is recognized and enabled"""
        kind = resource_kind_of(node)
        if kind is None or not self.enabled[kind]:
            return

        title = node.node.path
        logger.debug(f"Auto-watching {kind.value} {title}")

        if kind is ResourceKind.API_GATEWAY:
            self.watchful.watch_api_gateway(title, node)
        elif kind is ResourceKind.DYNAMODB:
            self.watchful.watch_dynamo_table(title, node)
        elif kind is ResourceKind.LAMBDA_FUNCTION:
            self.watchful.watch_lambda_function(title, node)
        elif kind is ResourceKind.RDS_AURORA:
            self.watchful.watch_rds_aurora_cluster(title, node)
