"""
Watcher Base Class
Provides common alarm and widget helpers for resource watchers
"""
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence
from aws_cdk import (
    CfnResource,
    Stack,
    aws_cloudwatch as cloudwatch,
)
from constructs import Construct, IConstruct

from ..config import resolve_thresholds

if TYPE_CHECKING:
    from ..watchful import Watchful


logger = logging.getLogger(__name__)


class WatcherBase(Construct):
    """Base class for the per-resource watchers"""

    # Key into DEFAULT_THRESHOLDS
    kind: str = ""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        title: str,
        watchful: "Watchful",
        thresholds: Optional[Dict[str, Any]] = None
    ):
        super().__init__(scope, construct_id)
        self.title = title
        self.watchful = watchful
        self.thresholds = resolve_thresholds(self, self.kind, thresholds)
        self.alarms: List[cloudwatch.Alarm] = []
        logger.debug(f"Watching {self.kind} {title}")

    @staticmethod
    def require_resource(resource: Optional[IConstruct], resource_type: type, description: str) -> Any:
        """Validate the watched resource before anything is added to the tree"""
        if resource is None:
            raise ValueError(f"{description} is required")
        if not isinstance(resource, resource_type):
            raise TypeError(f"Expected {description}, got {type(resource).__name__}")
        if not isinstance(resource.node.default_child, CfnResource):
            raise TypeError(f"{description} {resource.node.path} must be defined in this app, not imported")
        return resource

    @property
    def region(self) -> str:
        return Stack.of(self).region

    def create_alarm(
        self,
        alarm_id: str,
        metric: cloudwatch.IMetric,
        threshold: float,
        comparison_operator: cloudwatch.ComparisonOperator,
        evaluation_periods: int,
        alarm_description: str,
        treat_missing_data: Optional[cloudwatch.TreatMissingData] = None
    ) -> cloudwatch.Alarm:
        """Create an alarm and register it with Watchful"""
        alarm = metric.create_alarm(
            self, alarm_id,
            alarm_description=alarm_description,
            threshold=threshold,
            comparison_operator=comparison_operator,
            evaluation_periods=evaluation_periods,
            treat_missing_data=treat_missing_data
        )
        self.watchful.add_alarm(alarm)
        self.alarms.append(alarm)
        return alarm

    def create_graph_widget(
        self,
        title: str,
        left: Sequence[cloudwatch.IMetric],
        width: int = 6,
        left_annotations: Optional[Sequence[cloudwatch.HorizontalAnnotation]] = None,
        right: Optional[Sequence[cloudwatch.IMetric]] = None,
        stacked: bool = False
    ) -> cloudwatch.GraphWidget:
        """Create a graph widget with standardized sizing"""
        return cloudwatch.GraphWidget(
            title=title,
            width=width,
            height=6,
            stacked=stacked,
            left=list(left),
            right=list(right) if right else None,
            left_annotations=list(left_annotations) if left_annotations else None,
            left_y_axis=cloudwatch.YAxisProps(min=0)
        )
