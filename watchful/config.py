"""
Threshold Configuration for Watchful
Default alarm thresholds per resource kind, overridable through CDK context
"""
from typing import Any, Dict, Optional
from constructs import IConstruct


CONTEXT_KEY = "watchful"

DEFAULT_THRESHOLDS: Dict[str, Dict[str, Optional[float]]] = {
    "dynamodb": {
        "read_capacity_threshold_percent": 80,
        "write_capacity_threshold_percent": 80,
        "throttled_requests_threshold": 0,
    },
    "lambda_function": {
        "errors_per_minute_threshold": 0,
        "throttles_per_minute_threshold": 0,
        "duration_threshold_percent": 80,
    },
    "api_gateway": {
        # 0 disables the 5XX alarm
        "server_error_threshold": 1,
        "latency_threshold_ms": None,
    },
    # 0 disables the connections, replica lag and buffer cache alarms
    "rds_aurora": {
        "cpu_maximum_threshold_percent": 80,
        "db_connections_maximum_threshold": 0,
        "db_replica_lag_maximum_threshold": 0,
        "db_buffer_cache_minimum_threshold": 0,
    },
    "state_machine": {
        "failed_executions_threshold": 0,
        "throttled_executions_threshold": 0,
        "timed_out_executions_threshold": 0,
    },
}


def resolve_thresholds(scope: IConstruct, kind: str,
                       overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Optional[float]]:
    """Merge defaults, CDK context and explicit keyword overrides for a resource kind.

    Explicit values win over context, context wins over defaults. ``None`` in
    ``overrides`` means the caller did not set that option.
    """
    if kind not in DEFAULT_THRESHOLDS:
        raise KeyError(f"Unknown resource kind: {kind}")

    thresholds = dict(DEFAULT_THRESHOLDS[kind])

    context = scope.node.try_get_context(CONTEXT_KEY) or {}
    if not isinstance(context, dict):
        raise ValueError(f"Context key '{CONTEXT_KEY}' must be an object, got {type(context).__name__}")

    kind_context = context.get(kind) or {}
    if not isinstance(kind_context, dict):
        raise ValueError(f"Context key '{CONTEXT_KEY}.{kind}' must be an object, got {type(kind_context).__name__}")

    for key, value in kind_context.items():
        if key in thresholds:
            thresholds[key] = value

    for key, value in (overrides or {}).items():
        if value is not None:
            thresholds[key] = value

    return thresholds
