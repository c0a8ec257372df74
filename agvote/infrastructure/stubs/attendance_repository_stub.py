"""Attendance repository stub implementation."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone

from agvote.application.ports.attendance_repository import (
    AttendanceRepositoryProtocol,
)
from agvote.domain.models.attendance import (
    ATTENDING_MODES,
    DIRECT_MODES,
    Attendance,
    AttendanceMode,
    AttendanceSummary,
)
from agvote.infrastructure.stubs.governance_store import InMemoryGovernanceStore


class AttendanceRepositoryStub(AttendanceRepositoryProtocol):
    """In-memory stub implementation of AttendanceRepositoryProtocol."""

    def __init__(self, store: InMemoryGovernanceStore) -> None:
        self._store = store

    def _rows(self, meeting_id: str, tenant_id: str) -> list[Attendance]:
        return [
            row
            for (row_meeting_id, _), row in self._store.attendances.items()
            if row_meeting_id == meeting_id and row.tenant_id == tenant_id
        ]

    async def find(
        self, meeting_id: str, member_id: str, tenant_id: str
    ) -> Attendance | None:
        row = self._store.attendances.get((meeting_id, member_id))
        if row is None or row.tenant_id != tenant_id:
            return None
        return row

    async def is_present(self, meeting_id: str, member_id: str, tenant_id: str) -> bool:
        row = await self.find(meeting_id, member_id, tenant_id)
        return row is not None and row.mode in ATTENDING_MODES

    async def is_present_direct(
        self, meeting_id: str, member_id: str, tenant_id: str
    ) -> bool:
        row = await self.find(meeting_id, member_id, tenant_id)
        return row is not None and row.mode in DIRECT_MODES

    async def upsert(self, attendance: Attendance) -> Attendance | None:
        stored = Attendance(
            meeting_id=attendance.meeting_id,
            member_id=attendance.member_id,
            tenant_id=attendance.tenant_id,
            mode=attendance.mode,
            effective_power=attendance.effective_power,
            notes=attendance.notes,
            checked_in_at=datetime.now(timezone.utc),
        )
        self._store.attendances[(attendance.meeting_id, attendance.member_id)] = stored
        return stored

    async def delete_by_meeting_and_member(
        self, meeting_id: str, member_id: str, tenant_id: str
    ) -> bool:
        if await self.find(meeting_id, member_id, tenant_id) is None:
            return False
        del self._store.attendances[(meeting_id, member_id)]
        return True

    async def list_for_meeting(
        self, meeting_id: str, tenant_id: str
    ) -> list[Attendance]:
        rows = self._rows(meeting_id, tenant_id)
        rows.sort(key=lambda row: row.member_id)
        return rows

    async def summary_for_meeting(
        self, meeting_id: str, tenant_id: str
    ) -> AttendanceSummary:
        attending = [
            row
            for row in self._rows(meeting_id, tenant_id)
            if row.mode in ATTENDING_MODES
        ]
        return AttendanceSummary(
            present_count=len(attending),
            present_weight=sum(row.effective_power for row in attending),
        )

    async def count_present_or_remote(self, meeting_id: str, tenant_id: str) -> int:
        return await self.count_present_members(meeting_id, tenant_id, DIRECT_MODES)

    async def count_present_members(
        self, meeting_id: str, tenant_id: str, modes: Iterable[AttendanceMode]
    ) -> int:
        allowed = set(modes)
        return sum(
            1 for row in self._rows(meeting_id, tenant_id) if row.mode in allowed
        )

    async def sum_present_weight(
        self, meeting_id: str, tenant_id: str, modes: Iterable[AttendanceMode]
    ) -> float:
        allowed = set(modes)
        return sum(
            row.effective_power
            for row in self._rows(meeting_id, tenant_id)
            if row.mode in allowed
        )

    async def get_stats_by_mode(
        self, meeting_id: str, tenant_id: str
    ) -> dict[AttendanceMode, int]:
        stats = {mode: 0 for mode in AttendanceMode}
        for row in self._rows(meeting_id, tenant_id):
            stats[row.mode] += 1
        return stats
