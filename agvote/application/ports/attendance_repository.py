"""Attendance repository port."""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Iterable
from typing import Protocol

from agvote.domain.models.attendance import (
    Attendance,
    AttendanceMode,
    AttendanceSummary,
)


class AttendanceRepositoryProtocol(Protocol):
    """Protocol for attendance storage, keyed by (meeting_id, member_id)."""

    @abstractmethod
    async def is_present(self, meeting_id: str, member_id: str, tenant_id: str) -> bool:
        """Check for present, remote or proxy attendance."""
        ...

    @abstractmethod
    async def is_present_direct(
        self, meeting_id: str, member_id: str, tenant_id: str
    ) -> bool:
        """Check for present or remote attendance only."""
        ...

    @abstractmethod
    async def upsert(self, attendance: Attendance) -> Attendance | None:
        """Insert or replace the row for the pair.

        Returns:
            The stored row, or None if the write produced nothing.
        """
        ...

    @abstractmethod
    async def find(
        self, meeting_id: str, member_id: str, tenant_id: str
    ) -> Attendance | None:
        """Read back the row for the pair."""
        ...

    @abstractmethod
    async def delete_by_meeting_and_member(
        self, meeting_id: str, member_id: str, tenant_id: str
    ) -> bool:
        """Delete the row for the pair.

        Returns:
            True if a row was removed.
        """
        ...

    @abstractmethod
    async def list_for_meeting(
        self, meeting_id: str, tenant_id: str
    ) -> list[Attendance]:
        """List attendance rows of a meeting."""
        ...

    @abstractmethod
    async def summary_for_meeting(
        self, meeting_id: str, tenant_id: str
    ) -> AttendanceSummary:
        """Count and weight of present, remote and proxy rows."""
        ...

    @abstractmethod
    async def count_present_or_remote(self, meeting_id: str, tenant_id: str) -> int:
        """Count members attending directly."""
        ...

    @abstractmethod
    async def count_present_members(
        self, meeting_id: str, tenant_id: str, modes: Iterable[AttendanceMode]
    ) -> int:
        """Count rows whose mode is in modes."""
        ...

    @abstractmethod
    async def sum_present_weight(
        self, meeting_id: str, tenant_id: str, modes: Iterable[AttendanceMode]
    ) -> float:
        """Sum effective power of rows whose mode is in modes."""
        ...

    @abstractmethod
    async def get_stats_by_mode(
        self, meeting_id: str, tenant_id: str
    ) -> dict[AttendanceMode, int]:
        """Count rows per attendance mode."""
        ...
