"""Meeting repository stub implementation."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from agvote.application.ports.meeting_repository import MeetingRepositoryProtocol
from agvote.domain.models.meeting import Meeting, MeetingStatus
from agvote.infrastructure.stubs.governance_store import InMemoryGovernanceStore
from agvote.infrastructure.stubs.transaction_manager_stub import held_locks


class MeetingRepositoryStub(MeetingRepositoryProtocol):
    """In-memory stub implementation of MeetingRepositoryProtocol.

    lock_for_update acquires a per-meeting asyncio.Lock registered with the
    current TransactionManagerStub transaction, the in-memory equivalent of
    SELECT ... FOR UPDATE.
    """

    def __init__(self, store: InMemoryGovernanceStore) -> None:
        self._store = store

    async def find_by_id_for_tenant(
        self, meeting_id: str, tenant_id: str
    ) -> Meeting | None:
        meeting = self._store.meetings.get(meeting_id)
        if meeting is None or meeting.tenant_id != tenant_id:
            return None
        return meeting

    async def lock_for_update(self, meeting_id: str, tenant_id: str) -> Meeting | None:
        """Lock the meeting row until the current transaction exits.

        Raises:
            RuntimeError: If called outside a transaction.
        """
        locks = held_locks()
        if locks is None:
            raise RuntimeError("lock_for_update requires an open transaction")
        lock = self._store.row_lock(meeting_id)
        if lock not in locks:
            await lock.acquire()
            locks.append(lock)
        return await self.find_by_id_for_tenant(meeting_id, tenant_id)

    async def update_status(
        self,
        meeting_id: str,
        tenant_id: str,
        status: MeetingStatus,
        validated_at: datetime | None = None,
        archived_at: datetime | None = None,
    ) -> Meeting:
        """Write a new status.

        Raises:
            KeyError: If the meeting does not resolve under the tenant.
        """
        meeting = await self.find_by_id_for_tenant(meeting_id, tenant_id)
        if meeting is None:
            raise KeyError(f"Meeting not found: {meeting_id}")
        updated = replace(
            meeting,
            status=status,
            validated_at=validated_at or meeting.validated_at,
            archived_at=archived_at or meeting.archived_at,
        )
        self._store.meetings[meeting_id] = updated
        return updated
