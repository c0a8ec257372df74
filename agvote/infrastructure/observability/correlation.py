"""Per-request log context: correlation id and tenant id.

The values sit in contextvars, so each asyncio task sees its own copy and
concurrent requests never stamp each other's entries. Only the log
processors below read them. Engine services get their tenant from the
explicit TenantContext argument, never from here.

Usage:
    with log_context(tenant, correlation_id=request_header_value):
        await ballots.cast_ballot(tenant, payload)
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any
from uuid import uuid4

if TYPE_CHECKING:
    from agvote.domain.models.tenant import TenantContext

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")
_log_tenant_id: ContextVar[str] = ContextVar("log_tenant_id", default="")


def generate_correlation_id() -> str:
    return str(uuid4())


def get_correlation_id() -> str:
    """Current correlation id, "" when none was set."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    _correlation_id.set(correlation_id)


def get_log_tenant_id() -> str:
    """Tenant id stamped on entries of the current context, "" when unset."""
    return _log_tenant_id.get()


def set_log_tenant_id(tenant_id: str) -> None:
    _log_tenant_id.set(tenant_id)


@contextmanager
def log_context(
    tenant: TenantContext, correlation_id: str | None = None
) -> Iterator[str]:
    """Stamp every entry logged inside the block with tenant and correlation.

    A correlation id is generated when the caller brings none. The previous
    values are restored on exit.

    Yields:
        The correlation id in effect inside the block.
    """
    effective_id = correlation_id or generate_correlation_id()
    correlation_token = _correlation_id.set(effective_id)
    tenant_token = _log_tenant_id.set(tenant.tenant_id)
    try:
        yield effective_id
    finally:
        _log_tenant_id.reset(tenant_token)
        _correlation_id.reset(correlation_token)


def correlation_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add ``correlation_id`` to the entry when one is set."""
    if correlation_id := _correlation_id.get():
        event_dict["correlation_id"] = correlation_id
    return event_dict


def tenant_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add ``tenant_id`` to the entry; a value bound on the logger wins."""
    if tenant_id := _log_tenant_id.get():
        event_dict.setdefault("tenant_id", tenant_id)
    return event_dict
