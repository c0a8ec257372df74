"""Log rendering and per-request log context for the governance engine."""

from agvote.infrastructure.observability.correlation import (
    correlation_id_processor,
    generate_correlation_id,
    get_correlation_id,
    get_log_tenant_id,
    log_context,
    set_correlation_id,
    set_log_tenant_id,
    tenant_id_processor,
)
from agvote.infrastructure.observability.logging import (
    configure_logging,
    configure_structlog,
)

__all__: list[str] = [
    "configure_logging",
    "configure_structlog",
    "correlation_id_processor",
    "generate_correlation_id",
    "get_correlation_id",
    "get_log_tenant_id",
    "log_context",
    "set_correlation_id",
    "set_log_tenant_id",
    "tenant_id_processor",
]
