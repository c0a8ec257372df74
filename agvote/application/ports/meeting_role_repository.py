"""Meeting role repository port."""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol


class MeetingRoleRepositoryProtocol(Protocol):
    """Protocol for meeting role assignments (president, secretary...)."""

    @abstractmethod
    async def find_president(self, meeting_id: str, tenant_id: str) -> str | None:
        """Get the member id assigned as president, if any."""
        ...
