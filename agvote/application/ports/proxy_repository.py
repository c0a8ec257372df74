"""Proxy delegation repository port."""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol

from agvote.domain.models.proxy import ProxyDelegation


class ProxyRepositoryProtocol(Protocol):
    """Protocol for proxy delegation storage.

    At most one active delegation exists per (meeting, giver).
    """

    @abstractmethod
    async def has_active_proxy(
        self, meeting_id: str, giver_id: str, receiver_id: str
    ) -> bool:
        """Check for an active delegation from giver to receiver."""
        ...

    @abstractmethod
    async def upsert(self, delegation: ProxyDelegation) -> ProxyDelegation:
        """Record a delegation, replacing the giver's active one."""
        ...

    @abstractmethod
    async def revoke_for_giver(
        self, meeting_id: str, giver_id: str, tenant_id: str
    ) -> int:
        """Revoke the giver's active delegations.

        Returns:
            Number of delegations revoked.
        """
        ...

    @abstractmethod
    async def list_for_meeting(
        self, meeting_id: str, tenant_id: str
    ) -> list[ProxyDelegation]:
        """List active delegations of a meeting."""
        ...

    @abstractmethod
    async def count_active_as_giver(
        self, meeting_id: str, member_id: str, tenant_id: str
    ) -> int:
        """Count active delegations the member gives."""
        ...

    @abstractmethod
    async def count_active_as_receiver(
        self, meeting_id: str, member_id: str, tenant_id: str
    ) -> int:
        """Count active delegations the member holds."""
        ...
