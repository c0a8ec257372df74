"""structlog setup for the governance engine.

Every engine module logs through ``structlog.get_logger(__name__)``; this
module only decides how entries are rendered. Production renders one JSON
object per line for log shipping, development a colored console line.

Entry Shape (production):
    {
        "timestamp": "2026-03-14T18:02:11.482913Z",
        "level": "warning",
        "event": "Ballot rejected - member not present",
        "correlation_id": "uuid",
        "tenant_id": "tenant-a",
        "motion_id": "...",
        "member_id": "..."
    }

Usage:
    from agvote.config.governance_config import GovernanceConfig
    from agvote.infrastructure.observability import configure_logging

    configure_logging(GovernanceConfig.from_environment())
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, cast

import structlog
from structlog.typing import Processor

from agvote.infrastructure.observability.correlation import (
    correlation_id_processor,
    tenant_id_processor,
)

if TYPE_CHECKING:
    from agvote.config.governance_config import GovernanceConfig

LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"


def _get_log_level() -> int:
    """Resolve LOG_LEVEL to a logging level, INFO when unset or unknown."""
    level_name = os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else logging.INFO


def _context_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        cast(Processor, correlation_id_processor),
        cast(Processor, tenant_id_processor),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(environment: str) -> Processor:
    if environment == "development":
        return structlog.dev.ConsoleRenderer(colors=True)
    return structlog.processors.JSONRenderer(ensure_ascii=False)


def configure_structlog(environment: str = "production") -> None:
    """Configure structlog rendering.

    Call once at process start, before the first entry is logged: loggers
    are cached on first use.

    Args:
        environment: "development" for console output; anything else
            renders JSON.
    """
    structlog.configure(
        processors=[*_context_processors(), _renderer(environment)],
        wrapper_class=structlog.make_filtering_bound_logger(_get_log_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(config: GovernanceConfig) -> None:
    """Configure structlog for the environment named by the engine config."""
    configure_structlog(environment=config.environment)
