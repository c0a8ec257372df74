"""Member repository stub implementation."""

from __future__ import annotations

from agvote.application.ports.member_repository import MemberRepositoryProtocol
from agvote.domain.models.member import Member
from agvote.infrastructure.stubs.governance_store import InMemoryGovernanceStore


class MemberRepositoryStub(MemberRepositoryProtocol):
    """In-memory stub implementation of MemberRepositoryProtocol."""

    def __init__(self, store: InMemoryGovernanceStore) -> None:
        self._store = store

    async def find_by_id_for_tenant(
        self, member_id: str, tenant_id: str
    ) -> Member | None:
        member = self._store.members.get(member_id)
        if member is None or member.tenant_id != tenant_id:
            return None
        return member

    def _active(self, tenant_id: str) -> list[Member]:
        return [
            member
            for member in self._store.members.values()
            if member.tenant_id == tenant_id and member.is_active
        ]

    async def count_active(self, tenant_id: str) -> int:
        return len(self._active(tenant_id))

    async def sum_active_weight(self, tenant_id: str) -> float:
        return sum(member.effective_weight for member in self._active(tenant_id))
