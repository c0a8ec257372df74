"""Ballot domain model and weighted tally aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from agvote.domain.errors.validation import InvalidArgumentError


class BallotValue(Enum):
    """Value of a single ballot.

    Values:
        FOR: In favour
        AGAINST: Against
        ABSTAIN: Abstention (expressed, may count as against by policy)
        NSP: "Ne se prononce pas", recorded but never expressed
    """

    FOR = "for"
    AGAINST = "against"
    ABSTAIN = "abstain"
    NSP = "nsp"

    @classmethod
    def parse(cls, raw: str | BallotValue) -> BallotValue:
        """Parse a raw ballot value.

        Legacy values such as "yes"/"no" are refused.

        Raises:
            InvalidArgumentError: If the value is not for/against/abstain/nsp.
        """
        if isinstance(raw, cls):
            return raw
        value = str(raw or "").strip()
        try:
            return cls(value)
        except ValueError:
            raise InvalidArgumentError(
                "Valeur de vote invalide (for/against/abstain/nsp attendue)",
                field="value",
                code="invalid_vote_value",
            ) from None


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class Ballot:
    """A member's vote on a motion, keyed by (motion_id, member_id).

    Attributes:
        tenant_id: Owning tenant.
        meeting_id: Meeting of the motion.
        motion_id: The motion voted on.
        member_id: The member whose vote is counted.
        value: Ballot value.
        weight: Voting weight snapshot taken at cast time.
        is_proxy_vote: True when cast by a proxy holder.
        proxy_source_member_id: The proxy holder who cast it, if any.
        cast_at: When the ballot was (last) written.
    """

    tenant_id: str
    meeting_id: str
    motion_id: str
    member_id: str
    value: BallotValue
    weight: float
    is_proxy_vote: bool = False
    proxy_source_member_id: str | None = None
    cast_at: datetime = field(default_factory=_utc_now)


@dataclass(frozen=True, eq=True)
class BallotTally:
    """Weighted aggregate of all ballots on one motion."""

    count_for: int = 0
    count_against: int = 0
    count_abstain: int = 0
    count_nsp: int = 0
    weight_for: float = 0.0
    weight_against: float = 0.0
    weight_abstain: float = 0.0
    weight_total: float = 0.0

    @property
    def total_ballots(self) -> int:
        return self.count_for + self.count_against + self.count_abstain + self.count_nsp

    @property
    def expressed_weight(self) -> float:
        return self.weight_for + self.weight_against + self.weight_abstain

    @classmethod
    def from_ballots(cls, ballots: list[Ballot]) -> BallotTally:
        """Aggregate ballots by value (nsp weight only counts in the total)."""
        counts = {value: 0 for value in BallotValue}
        weights = {value: 0.0 for value in BallotValue}
        for ballot in ballots:
            counts[ballot.value] += 1
            weights[ballot.value] += max(0.0, ballot.weight)
        return cls(
            count_for=counts[BallotValue.FOR],
            count_against=counts[BallotValue.AGAINST],
            count_abstain=counts[BallotValue.ABSTAIN],
            count_nsp=counts[BallotValue.NSP],
            weight_for=weights[BallotValue.FOR],
            weight_against=weights[BallotValue.AGAINST],
            weight_abstain=weights[BallotValue.ABSTAIN],
            weight_total=sum(weights.values()),
        )
