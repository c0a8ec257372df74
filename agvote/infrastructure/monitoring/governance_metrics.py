"""Prometheus counters for the governance engine.

| Counter                    | Labels                  | Incremented when            |
|----------------------------|-------------------------|-----------------------------|
| ballots_cast_total         | value, proxy            | a ballot is stored          |
| ballots_rejected_total     | reason                  | a cast is refused           |
| official_decisions_total   | source, decision        | an official result is saved |
| meeting_transitions_total  | from_status, to_status  | a transition is applied     |

Every counter also carries ``service`` and ``environment`` labels.
"""

from __future__ import annotations

import os
import threading

from prometheus_client import CollectorRegistry, Counter

DEFAULT_SERVICE_NAME = "agvote-governance"

_ENGINE_LABELS = ("service", "environment")


class GovernanceMetricsCollector:
    """Engine counters registered on one CollectorRegistry.

    Tests pass their own registry so that collectors never share samples.
    """

    def __init__(
        self,
        registry: CollectorRegistry | None = None,
        service_name: str | None = None,
        environment: str | None = None,
    ) -> None:
        self._registry = registry or CollectorRegistry()
        self._engine_labels = {
            "service": service_name
            or os.environ.get("SERVICE_NAME", DEFAULT_SERVICE_NAME),
            "environment": environment
            or os.environ.get("GOVERNANCE_ENVIRONMENT", "production"),
        }

        self.ballots_cast_total = self._counter(
            "ballots_cast_total",
            "Ballots stored, by value and whether a proxy holder cast them",
            "value",
            "proxy",
        )
        self.ballots_rejected_total = self._counter(
            "ballots_rejected_total",
            "Ballot casts refused, by error code",
            "reason",
        )
        self.official_decisions_total = self._counter(
            "official_decisions_total",
            "Official motion results saved, by tally source and decision",
            "source",
            "decision",
        )
        self.meeting_transitions_total = self._counter(
            "meeting_transitions_total",
            "Meeting lifecycle transitions applied",
            "from_status",
            "to_status",
        )

    def _counter(self, name: str, documentation: str, *labels: str) -> Counter:
        return Counter(
            name=name,
            documentation=documentation,
            labelnames=[*labels, *_ENGINE_LABELS],
            registry=self._registry,
        )

    def record_ballot_cast(self, value: str, is_proxy_vote: bool) -> None:
        proxy = "true" if is_proxy_vote else "false"
        self.ballots_cast_total.labels(
            value=value, proxy=proxy, **self._engine_labels
        ).inc()

    def record_ballot_rejected(self, reason: str) -> None:
        """Count a refused cast under its stable error code."""
        self.ballots_rejected_total.labels(reason=reason, **self._engine_labels).inc()

    def record_official_decision(self, source: str, decision: str) -> None:
        self.official_decisions_total.labels(
            source=source, decision=decision, **self._engine_labels
        ).inc()

    def record_transition(self, from_status: str, to_status: str) -> None:
        self.meeting_transitions_total.labels(
            from_status=from_status, to_status=to_status, **self._engine_labels
        ).inc()

    def get_registry(self) -> CollectorRegistry:
        return self._registry


_collector: GovernanceMetricsCollector | None = None
_collector_lock = threading.Lock()


def get_governance_metrics_collector() -> GovernanceMetricsCollector:
    """Process-wide collector, created on first use."""
    global _collector
    with _collector_lock:
        if _collector is None:
            _collector = GovernanceMetricsCollector()
        return _collector


def reset_governance_metrics_collector() -> None:
    """Drop the process-wide collector. Tests only."""
    global _collector
    with _collector_lock:
        _collector = None
