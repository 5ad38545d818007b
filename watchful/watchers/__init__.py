"""
Watchers Module
Contains the per-resource watchers that create alarms and dashboard widgets
"""

from .watcher_base import WatcherBase
from .api_gateway import WatchApiGateway, WatchedOperation
from .dynamodb import WatchDynamoTable
from .lambda_function import WatchLambdaFunction
from .rds_aurora import WatchRdsAurora
from .state_machine import WatchStateMachine

__all__ = [
    'WatcherBase',
    'WatchApiGateway',
    'WatchedOperation',
    'WatchDynamoTable',
    'WatchLambdaFunction',
    'WatchRdsAurora',
    'WatchStateMachine'
]
