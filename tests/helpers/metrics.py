"""Helpers for reading Prometheus samples in tests."""

from __future__ import annotations

from prometheus_client import CollectorRegistry


def sample_total(registry: CollectorRegistry, name: str, **labels: str) -> float:
    """Sum the samples of a metric whose labels include the given ones."""
    total = 0.0
    for family in registry.collect():
        for sample in family.samples:
            if sample.name != name:
                continue
            if all(sample.labels.get(key) == value for key, value in labels.items()):
                total += sample.value
    return total
