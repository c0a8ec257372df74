"""Policy and meeting role repository stub implementations."""

from __future__ import annotations

from agvote.application.ports.meeting_role_repository import (
    MeetingRoleRepositoryProtocol,
)
from agvote.application.ports.policy_repository import PolicyRepositoryProtocol
from agvote.domain.models.policy import QuorumPolicy, VotePolicy
from agvote.infrastructure.stubs.governance_store import InMemoryGovernanceStore


class PolicyRepositoryStub(PolicyRepositoryProtocol):
    """In-memory stub implementation of PolicyRepositoryProtocol."""

    def __init__(self, store: InMemoryGovernanceStore) -> None:
        self._store = store

    async def find_vote_policy(self, policy_id: str) -> VotePolicy | None:
        return self._store.vote_policies.get(policy_id)

    async def find_quorum_policy(self, policy_id: str) -> QuorumPolicy | None:
        return self._store.quorum_policies.get(policy_id)


class MeetingRoleRepositoryStub(MeetingRoleRepositoryProtocol):
    """In-memory stub implementation of MeetingRoleRepositoryProtocol."""

    def __init__(self, store: InMemoryGovernanceStore) -> None:
        self._store = store

    async def find_president(self, meeting_id: str, tenant_id: str) -> str | None:
        return self._store.presidents.get((meeting_id, tenant_id))
