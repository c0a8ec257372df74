"""Real-time broadcast port.

Broadcasts are best-effort. Callers wrap every call so that a failure here
never reaches the primary operation.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, Protocol


class GovernanceBroadcasterProtocol(Protocol):
    """Protocol for pushing live updates to connected operators."""

    @abstractmethod
    async def vote_cast(
        self, meeting_id: str, motion_id: str, tally: dict[str, Any]
    ) -> None:
        """Publish the updated tally of a motion."""
        ...

    @abstractmethod
    async def attendance_updated(
        self, meeting_id: str, stats: dict[str, int]
    ) -> None:
        """Publish per-mode attendance statistics."""
        ...

    @abstractmethod
    async def meeting_status_changed(
        self, meeting_id: str, tenant_id: str, new_status: str, old_status: str
    ) -> None:
        """Publish a lifecycle transition."""
        ...
