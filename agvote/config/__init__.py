"""Configuration for the governance engine."""

from agvote.config.governance_config import (
    DEFAULT_GOVERNANCE_CONFIG,
    TEST_GOVERNANCE_CONFIG,
    GovernanceConfig,
)

__all__: list[str] = [
    "DEFAULT_GOVERNANCE_CONFIG",
    "GovernanceConfig",
    "TEST_GOVERNANCE_CONFIG",
]
