"""Prometheus monitoring for the governance engine."""

from agvote.infrastructure.monitoring.governance_metrics import (
    GovernanceMetricsCollector,
    get_governance_metrics_collector,
    reset_governance_metrics_collector,
)

__all__: list[str] = [
    "GovernanceMetricsCollector",
    "get_governance_metrics_collector",
    "reset_governance_metrics_collector",
]
