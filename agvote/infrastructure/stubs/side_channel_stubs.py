"""Recording audit sink and broadcaster stubs.

Both record every call for assertions. Setting fail_with makes every call
raise that exception, to exercise best-effort handling.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from agvote.application.ports.audit_sink import AuditSinkProtocol
from agvote.application.ports.governance_broadcaster import (
    GovernanceBroadcasterProtocol,
)


@dataclass(frozen=True)
class AuditEntry:
    """One appended audit event."""

    event_type: str
    tenant_id: str
    resource_type: str
    resource_id: str
    payload: dict[str, Any] = field(default_factory=dict)
    actor_id: str | None = None


class InMemoryAuditSink(AuditSinkProtocol):
    """In-memory stub implementation of AuditSinkProtocol."""

    def __init__(self) -> None:
        self.entries: list[AuditEntry] = []
        self.fail_with: Exception | None = None

    async def append(
        self,
        event_type: str,
        tenant_id: str,
        resource_type: str,
        resource_id: str,
        payload: dict[str, Any],
        actor_id: str | None = None,
    ) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.entries.append(
            AuditEntry(
                event_type=event_type,
                tenant_id=tenant_id,
                resource_type=resource_type,
                resource_id=resource_id,
                payload=dict(payload),
                actor_id=actor_id,
            )
        )

    def events_of_type(self, event_type: str) -> list[AuditEntry]:
        return [entry for entry in self.entries if entry.event_type == event_type]

    def clear(self) -> None:
        """Clear all recorded entries (for testing)."""
        self.entries.clear()
        self.fail_with = None


class RecordingBroadcaster(GovernanceBroadcasterProtocol):
    """In-memory stub implementation of GovernanceBroadcasterProtocol.

    Attributes:
        messages: (channel, meeting_id, payload) tuples in send order.
    """

    def __init__(self) -> None:
        self.messages: list[tuple[str, str, dict[str, Any]]] = []
        self.fail_with: Exception | None = None

    def _record(self, channel: str, meeting_id: str, payload: dict[str, Any]) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.messages.append((channel, meeting_id, payload))

    async def vote_cast(
        self, meeting_id: str, motion_id: str, tally: dict[str, Any]
    ) -> None:
        self._record("vote_cast", meeting_id, {"motion_id": motion_id, **tally})

    async def attendance_updated(
        self, meeting_id: str, stats: dict[str, int]
    ) -> None:
        self._record("attendance_updated", meeting_id, dict(stats))

    async def meeting_status_changed(
        self, meeting_id: str, tenant_id: str, new_status: str, old_status: str
    ) -> None:
        self._record(
            "meeting_status_changed",
            meeting_id,
            {
                "tenant_id": tenant_id,
                "new_status": new_status,
                "old_status": old_status,
            },
        )

    def channel(self, name: str) -> list[tuple[str, str, dict[str, Any]]]:
        return [message for message in self.messages if message[0] == name]

    def clear(self) -> None:
        """Clear all recorded messages (for testing)."""
        self.messages.clear()
        self.fail_with = None
