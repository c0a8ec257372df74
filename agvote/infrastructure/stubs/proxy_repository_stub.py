"""Proxy delegation repository stub implementation."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone

from agvote.application.ports.proxy_repository import ProxyRepositoryProtocol
from agvote.domain.models.proxy import ProxyDelegation
from agvote.infrastructure.stubs.governance_store import InMemoryGovernanceStore


class ProxyRepositoryStub(ProxyRepositoryProtocol):
    """In-memory stub implementation of ProxyRepositoryProtocol.

    Revoked delegations are kept with is_active=False, as an audit trail.
    """

    def __init__(self, store: InMemoryGovernanceStore) -> None:
        self._store = store

    def _active(
        self, meeting_id: str, tenant_id: str | None = None
    ) -> list[ProxyDelegation]:
        return [
            delegation
            for delegation in self._store.proxies
            if delegation.is_active
            and delegation.meeting_id == meeting_id
            and (tenant_id is None or delegation.tenant_id == tenant_id)
        ]

    async def has_active_proxy(
        self, meeting_id: str, giver_id: str, receiver_id: str
    ) -> bool:
        return any(
            d.giver_member_id == giver_id and d.receiver_member_id == receiver_id
            for d in self._active(meeting_id)
        )

    async def upsert(self, delegation: ProxyDelegation) -> ProxyDelegation:
        await self.revoke_for_giver(
            delegation.meeting_id, delegation.giver_member_id, delegation.tenant_id
        )
        self._store.proxies.append(delegation)
        return delegation

    async def revoke_for_giver(
        self, meeting_id: str, giver_id: str, tenant_id: str
    ) -> int:
        revoked = 0
        now = datetime.now(timezone.utc)
        for index, delegation in enumerate(self._store.proxies):
            if (
                delegation.is_active
                and delegation.meeting_id == meeting_id
                and delegation.tenant_id == tenant_id
                and delegation.giver_member_id == giver_id
            ):
                self._store.proxies[index] = replace(
                    delegation, is_active=False, revoked_at=now
                )
                revoked += 1
        return revoked

    async def list_for_meeting(
        self, meeting_id: str, tenant_id: str
    ) -> list[ProxyDelegation]:
        return self._active(meeting_id, tenant_id)

    async def count_active_as_giver(
        self, meeting_id: str, member_id: str, tenant_id: str
    ) -> int:
        return sum(
            1
            for d in self._active(meeting_id, tenant_id)
            if d.giver_member_id == member_id
        )

    async def count_active_as_receiver(
        self, meeting_id: str, member_id: str, tenant_id: str
    ) -> int:
        return sum(
            1
            for d in self._active(meeting_id, tenant_id)
            if d.receiver_member_id == member_id
        )
