"""Policy repository port."""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol

from agvote.domain.models.policy import QuorumPolicy, VotePolicy


class PolicyRepositoryProtocol(Protocol):
    """Protocol for quorum and vote policy lookups."""

    @abstractmethod
    async def find_vote_policy(self, policy_id: str) -> VotePolicy | None:
        ...

    @abstractmethod
    async def find_quorum_policy(self, policy_id: str) -> QuorumPolicy | None:
        ...
