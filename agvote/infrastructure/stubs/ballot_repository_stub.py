"""Ballot repository stub implementation."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone

from agvote.application.ports.ballot_repository import BallotRepositoryProtocol
from agvote.domain.models.ballot import Ballot, BallotTally
from agvote.infrastructure.stubs.governance_store import InMemoryGovernanceStore


class BallotRepositoryStub(BallotRepositoryProtocol):
    """In-memory stub implementation of BallotRepositoryProtocol.

    cast_ballot is an upsert on (motion_id, member_id): last writer wins.
    """

    def __init__(self, store: InMemoryGovernanceStore) -> None:
        self._store = store

    async def cast_ballot(self, ballot: Ballot) -> None:
        self._store.ballots[(ballot.motion_id, ballot.member_id)] = replace(
            ballot, cast_at=datetime.now(timezone.utc)
        )

    async def find_by_motion_and_member(
        self, motion_id: str, member_id: str, tenant_id: str
    ) -> Ballot | None:
        ballot = self._store.ballots.get((motion_id, member_id))
        if ballot is None or ballot.tenant_id != tenant_id:
            return None
        return ballot

    async def tally(self, motion_id: str, tenant_id: str) -> BallotTally:
        return BallotTally.from_ballots(
            [
                ballot
                for (ballot_motion_id, _), ballot in self._store.ballots.items()
                if ballot_motion_id == motion_id and ballot.tenant_id == tenant_id
            ]
        )
