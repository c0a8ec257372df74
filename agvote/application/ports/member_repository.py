"""Member repository port."""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol

from agvote.domain.models.member import Member


class MemberRepositoryProtocol(Protocol):
    """Protocol for member lookups and eligibility aggregates."""

    @abstractmethod
    async def find_by_id_for_tenant(
        self, member_id: str, tenant_id: str
    ) -> Member | None:
        """Retrieve a member scoped to a tenant."""
        ...

    @abstractmethod
    async def count_active(self, tenant_id: str) -> int:
        """Count active members of a tenant."""
        ...

    @abstractmethod
    async def sum_active_weight(self, tenant_id: str) -> float:
        """Sum the effective weight of active members of a tenant."""
        ...
