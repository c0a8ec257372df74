"""Governance engine configuration.

Environment Variables:
- PROXY_MAX_PER_RECEIVER: Active proxies one member may hold per meeting
  (default: 99, min: 1, max: 999)
- MANUAL_TALLY_EPSILON: Tolerance when checking a manual tally against its
  total (default: 1e-6, min: 0, max: 0.5)
- GOVERNANCE_ENVIRONMENT: "production" (JSON logs) or "development"
  (default: production)

Unparseable values fall back to the default; out-of-range values are
clamped into bounds.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

_N = TypeVar("_N", int, float)

DEFAULT_PROXY_MAX_PER_RECEIVER = 99
MIN_PROXY_MAX_PER_RECEIVER = 1
MAX_PROXY_MAX_PER_RECEIVER = 999

DEFAULT_MANUAL_TALLY_EPSILON = 1e-6
MIN_MANUAL_TALLY_EPSILON = 0.0
MAX_MANUAL_TALLY_EPSILON = 0.5

ENVIRONMENTS = ("production", "development")
DEFAULT_ENVIRONMENT = "production"


def _clamped_env(
    key: str, parse: Callable[[str], _N], default: _N, low: _N, high: _N
) -> _N:
    raw = os.environ.get(key)
    if raw is None:
        return default
    try:
        value = parse(raw)
    except ValueError:
        return default
    return max(low, min(value, high))


def _require_between(name: str, value: float, low: float, high: float) -> None:
    if not low <= value <= high:
        raise ValueError(f"{name} must be between {low} and {high}, got {value}")


@dataclass(frozen=True)
class GovernanceConfig:
    """Tunables shared by the engine services.

    Attributes:
        proxy_max_per_receiver: Cap on active delegations held by one
            receiver in one meeting.
        manual_tally_epsilon: Tolerance of the manual tally consistency check.
        environment: Deployment environment, selects the log renderer.
    """

    proxy_max_per_receiver: int = DEFAULT_PROXY_MAX_PER_RECEIVER
    manual_tally_epsilon: float = DEFAULT_MANUAL_TALLY_EPSILON
    environment: str = DEFAULT_ENVIRONMENT

    def __post_init__(self) -> None:
        _require_between(
            "proxy_max_per_receiver",
            self.proxy_max_per_receiver,
            MIN_PROXY_MAX_PER_RECEIVER,
            MAX_PROXY_MAX_PER_RECEIVER,
        )
        _require_between(
            "manual_tally_epsilon",
            self.manual_tally_epsilon,
            MIN_MANUAL_TALLY_EPSILON,
            MAX_MANUAL_TALLY_EPSILON,
        )
        if self.environment not in ENVIRONMENTS:
            raise ValueError(
                f"environment must be one of {ENVIRONMENTS}, got {self.environment!r}"
            )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_environment(cls) -> GovernanceConfig:
        """Build a config from the process environment.

        Unknown environment names fall back to production.
        """
        environment = os.environ.get("GOVERNANCE_ENVIRONMENT", "").strip().lower()
        return cls(
            proxy_max_per_receiver=_clamped_env(
                "PROXY_MAX_PER_RECEIVER",
                int,
                DEFAULT_PROXY_MAX_PER_RECEIVER,
                MIN_PROXY_MAX_PER_RECEIVER,
                MAX_PROXY_MAX_PER_RECEIVER,
            ),
            manual_tally_epsilon=_clamped_env(
                "MANUAL_TALLY_EPSILON",
                float,
                DEFAULT_MANUAL_TALLY_EPSILON,
                MIN_MANUAL_TALLY_EPSILON,
                MAX_MANUAL_TALLY_EPSILON,
            ),
            environment=(
                environment if environment in ENVIRONMENTS else DEFAULT_ENVIRONMENT
            ),
        )


DEFAULT_GOVERNANCE_CONFIG = GovernanceConfig()

# Small proxy cap so tests can reach the cap path
TEST_GOVERNANCE_CONFIG = GovernanceConfig(
    proxy_max_per_receiver=2,
    environment="development",
)
