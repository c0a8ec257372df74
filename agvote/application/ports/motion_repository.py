"""Motion repository port."""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol

from agvote.domain.models.decision import OfficialResult
from agvote.domain.models.motion import Motion, MotionContext


class MotionRepositoryProtocol(Protocol):
    """Protocol for motion storage operations.

    Counting queries are read-only projections used by the lifecycle
    controller. None of them take locks.
    """

    @abstractmethod
    async def find_with_ballot_context(self, motion_id: str) -> MotionContext | None:
        """Load a motion joined with its meeting, for ballot casting."""
        ...

    @abstractmethod
    async def find_with_official_context(
        self, motion_id: str
    ) -> MotionContext | None:
        """Load a motion joined with its meeting, for official tallying."""
        ...

    @abstractmethod
    async def count_for_meeting(self, meeting_id: str, tenant_id: str) -> int:
        """Count all motions of a meeting."""
        ...

    @abstractmethod
    async def count_open_motions(self, meeting_id: str, tenant_id: str) -> int:
        """Count motions opened and not yet closed."""
        ...

    @abstractmethod
    async def count_closed_motions(self, meeting_id: str, tenant_id: str) -> int:
        """Count closed motions."""
        ...

    @abstractmethod
    async def count_bad_closed_motions(self, meeting_id: str, tenant_id: str) -> int:
        """Count closed motions with no usable result.

        A closed motion is bad when its manual tally is not consistent and
        no ballot was cast on it.
        """
        ...

    @abstractmethod
    async def count_consolidated_motions(
        self, meeting_id: str, tenant_id: str
    ) -> int:
        """Count closed motions whose official result has been persisted."""
        ...

    @abstractmethod
    async def list_closed_for_meeting(
        self, meeting_id: str, tenant_id: str
    ) -> list[Motion]:
        """List closed motions of a meeting."""
        ...

    @abstractmethod
    async def update_official_results(
        self, motion_id: str, tenant_id: str, result: OfficialResult
    ) -> None:
        """Overwrite the official result fields of a motion."""
        ...
