"""Audit sink port.

The sink is tenant-scoped and append-only. Appends are fire-and-forget from
the engine's point of view: a failing sink never fails an operation.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, Protocol


class AuditSinkProtocol(Protocol):
    """Protocol for appending structured audit events."""

    @abstractmethod
    async def append(
        self,
        event_type: str,
        tenant_id: str,
        resource_type: str,
        resource_id: str,
        payload: dict[str, Any],
        actor_id: str | None = None,
    ) -> None:
        """Append one audit event."""
        ...
