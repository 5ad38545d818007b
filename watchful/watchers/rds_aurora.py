"""
RDS Aurora Watcher
CPU, connection, replication and cache alarms and graphs for an Aurora cluster
"""
from typing import Optional
from aws_cdk import (
    Duration,
    aws_cloudwatch as cloudwatch,
    aws_rds as rds,
)
from constructs import Construct

from .watcher_base import WatcherBase


class WatchRdsAurora(WatcherBase):
    """Watches an RDS Aurora cluster"""

    kind = "rds_aurora"

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        title: str,
        watchful,
        cluster: rds.DatabaseCluster,
        cpu_maximum_threshold_percent: Optional[float] = None,
        db_connections_maximum_threshold: Optional[float] = None,
        db_replica_lag_maximum_threshold: Optional[float] = None,
        db_buffer_cache_minimum_threshold: Optional[float] = None
    ):
        self.require_resource(cluster, rds.DatabaseCluster, "RDS Aurora cluster")

        super().__init__(scope, construct_id, title, watchful, {
            "cpu_maximum_threshold_percent": cpu_maximum_threshold_percent,
            "db_connections_maximum_threshold": db_connections_maximum_threshold,
            "db_replica_lag_maximum_threshold": db_replica_lag_maximum_threshold,
            "db_buffer_cache_minimum_threshold": db_buffer_cache_minimum_threshold,
        })
        self.cluster = cluster

        self.watchful.add_section(title, links=[
            {"title": "AWS RDS Cluster", "url": self._link_for_cluster()},
        ])

        cpu_metric = self._metric("CPUUtilization", "Maximum")
        connections_metric = self._metric("DatabaseConnections", "Maximum")
        replica_lag_metric = self._metric("AuroraReplicaLag", "Maximum")
        buffer_cache_metric = self._metric("BufferCacheHitRatio", "Average")

        cpu_alarm = self._create_maximum_alarm(
            "CpuUtilizationAlarm", cpu_metric,
            self.thresholds["cpu_maximum_threshold_percent"], "CPU utilization"
        )
        # A zero threshold leaves these three unalarmed
        connections_alarm = None
        connections_threshold = self.thresholds["db_connections_maximum_threshold"]
        if connections_threshold:
            connections_alarm = self._create_maximum_alarm(
                "DbConnectionsAlarm", connections_metric, connections_threshold, "DB connections"
            )

        replica_lag_alarm = None
        replica_lag_threshold = self.thresholds["db_replica_lag_maximum_threshold"]
        if replica_lag_threshold:
            replica_lag_alarm = self._create_maximum_alarm(
                "DbReplicaLagAlarm", replica_lag_metric, replica_lag_threshold, "replica lag"
            )

        buffer_cache_alarm = None
        buffer_cache_threshold = self.thresholds["db_buffer_cache_minimum_threshold"]
        if buffer_cache_threshold:
            buffer_cache_alarm = self.create_alarm(
                "DbBufferCacheHitRatioAlarm",
                buffer_cache_metric,
                threshold=buffer_cache_threshold,
                comparison_operator=cloudwatch.ComparisonOperator.LESS_THAN_THRESHOLD,
                evaluation_periods=3,
                alarm_description=f"Buffer cache hit ratio under {buffer_cache_threshold}"
            )

        self.watchful.add_widgets(
            self.create_graph_widget("CPUUtilization", [cpu_metric],
                                     left_annotations=_annotations(cpu_alarm)),
            self.create_graph_widget("DB Connections", [connections_metric],
                                     left_annotations=_annotations(connections_alarm)),
            self.create_graph_widget("DB Replica Lag", [replica_lag_metric],
                                     left_annotations=_annotations(replica_lag_alarm)),
            self.create_graph_widget("DB BufferCache Hit Ratio", [buffer_cache_metric],
                                     left_annotations=_annotations(buffer_cache_alarm)),
        )
        self.watchful.add_widgets(
            self.create_graph_widget(
                "RDS DML Overview",
                [
                    self._metric(f"{operation}Throughput", "Average")
                    for operation in ("Insert", "Update", "Select", "Delete")
                ],
                width=24
            )
        )

    def _create_maximum_alarm(self, alarm_id: str, metric: cloudwatch.Metric,
                              threshold: float, description: str) -> cloudwatch.Alarm:
        return self.create_alarm(
            alarm_id,
            metric,
            threshold=threshold,
            comparison_operator=cloudwatch.ComparisonOperator.GREATER_THAN_THRESHOLD,
            evaluation_periods=3,
            alarm_description=f"Maximum {description} over {threshold}"
        )

    def _metric(self, metric_name: str, statistic: str) -> cloudwatch.Metric:
        return cloudwatch.Metric(
            namespace="AWS/RDS",
            metric_name=metric_name,
            dimensions_map={"DBClusterIdentifier": self.cluster.cluster_identifier},
            period=Duration.minutes(5),
            statistic=statistic
        )

    def _link_for_cluster(self) -> str:
        return (f"https://console.aws.amazon.com/rds/home?region={self.region}"
                f"#database:id={self.cluster.cluster_identifier};is-cluster=true")


def _annotations(alarm: Optional[cloudwatch.Alarm]):
    return [alarm.to_annotation()] if alarm else None
