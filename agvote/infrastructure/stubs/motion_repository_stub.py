"""Motion repository stub implementation."""

from __future__ import annotations

from dataclasses import replace

from agvote.application.ports.motion_repository import MotionRepositoryProtocol
from agvote.domain.models.decision import OfficialResult
from agvote.domain.models.motion import Motion, MotionContext
from agvote.infrastructure.stubs.governance_store import InMemoryGovernanceStore


class MotionRepositoryStub(MotionRepositoryProtocol):
    """In-memory stub implementation of MotionRepositoryProtocol."""

    def __init__(self, store: InMemoryGovernanceStore) -> None:
        self._store = store

    def _context(self, motion_id: str) -> MotionContext | None:
        motion = self._store.motions.get(motion_id)
        if motion is None:
            return None
        meeting = self._store.meetings.get(motion.meeting_id)
        if meeting is None:
            return None
        return MotionContext(motion=motion, meeting=meeting)

    def _for_meeting(self, meeting_id: str, tenant_id: str) -> list[Motion]:
        return [
            motion
            for motion in self._store.motions.values()
            if motion.meeting_id == meeting_id and motion.tenant_id == tenant_id
        ]

    def _has_ballots(self, motion_id: str) -> bool:
        return any(key[0] == motion_id for key in self._store.ballots)

    async def find_with_ballot_context(self, motion_id: str) -> MotionContext | None:
        return self._context(motion_id)

    async def find_with_official_context(
        self, motion_id: str
    ) -> MotionContext | None:
        return self._context(motion_id)

    async def count_for_meeting(self, meeting_id: str, tenant_id: str) -> int:
        return len(self._for_meeting(meeting_id, tenant_id))

    async def count_open_motions(self, meeting_id: str, tenant_id: str) -> int:
        return sum(1 for m in self._for_meeting(meeting_id, tenant_id) if m.is_open)

    async def count_closed_motions(self, meeting_id: str, tenant_id: str) -> int:
        return sum(1 for m in self._for_meeting(meeting_id, tenant_id) if m.is_closed)

    async def count_bad_closed_motions(self, meeting_id: str, tenant_id: str) -> int:
        return sum(
            1
            for m in self._for_meeting(meeting_id, tenant_id)
            if m.is_closed
            and not m.has_consistent_manual_tally()
            and not self._has_ballots(m.id)
        )

    async def count_consolidated_motions(
        self, meeting_id: str, tenant_id: str
    ) -> int:
        return sum(
            1
            for m in self._for_meeting(meeting_id, tenant_id)
            if m.is_closed and m.official is not None
        )

    async def list_closed_for_meeting(
        self, meeting_id: str, tenant_id: str
    ) -> list[Motion]:
        closed = [m for m in self._for_meeting(meeting_id, tenant_id) if m.is_closed]
        closed.sort(key=lambda m: (m.closed_at, m.id))
        return closed

    async def update_official_results(
        self, motion_id: str, tenant_id: str, result: OfficialResult
    ) -> None:
        motion = self._store.motions.get(motion_id)
        if motion is None or motion.tenant_id != tenant_id:
            return
        self._store.motions[motion_id] = replace(motion, official=result)
