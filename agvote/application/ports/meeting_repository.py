"""Meeting repository port.

Meetings are always resolved under a tenant. A meeting that exists under
another tenant is indistinguishable from a missing one.
"""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import Protocol

from agvote.domain.models.meeting import Meeting, MeetingStatus


class MeetingRepositoryProtocol(Protocol):
    """Protocol for meeting storage operations."""

    @abstractmethod
    async def find_by_id_for_tenant(
        self, meeting_id: str, tenant_id: str
    ) -> Meeting | None:
        """Retrieve a meeting scoped to a tenant.

        Returns:
            The meeting if it resolves under the tenant, None otherwise.
        """
        ...

    @abstractmethod
    async def lock_for_update(self, meeting_id: str, tenant_id: str) -> Meeting | None:
        """Re-read a meeting under an exclusive row lock.

        Must be called inside a transaction opened by the transaction
        manager. The lock is released when that transaction ends.

        Returns:
            The locked meeting, or None if it no longer resolves.
        """
        ...

    @abstractmethod
    async def update_status(
        self,
        meeting_id: str,
        tenant_id: str,
        status: MeetingStatus,
        validated_at: datetime | None = None,
        archived_at: datetime | None = None,
    ) -> Meeting:
        """Write a new status and optional lifecycle timestamps.

        Timestamps left as None are not modified.

        Returns:
            The updated meeting.
        """
        ...
