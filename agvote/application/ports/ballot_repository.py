"""Ballot repository port."""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol

from agvote.domain.models.ballot import Ballot, BallotTally


class BallotRepositoryProtocol(Protocol):
    """Protocol for ballot storage, keyed by (motion_id, member_id).

    Writes are upserts: concurrent casts for the same seat resolve to a
    single stored ballot, last writer wins.
    """

    @abstractmethod
    async def cast_ballot(self, ballot: Ballot) -> None:
        """Insert or replace the ballot for its seat."""
        ...

    @abstractmethod
    async def find_by_motion_and_member(
        self, motion_id: str, member_id: str, tenant_id: str
    ) -> Ballot | None:
        """Read back the ballot for a seat."""
        ...

    @abstractmethod
    async def tally(self, motion_id: str, tenant_id: str) -> BallotTally:
        """Aggregate counts and weights of all ballots on a motion."""
        ...
