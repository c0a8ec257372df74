"""Decision and tally source models.

The official result of a motion is computed from exactly one tally source:
either the manual tally entered by the bureau or the electronic ballot
aggregate. Both variants expose the same weights so that the decision
procedure is a single function over one value.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar


class Decision(Enum):
    """Ruling on a motion."""

    ADOPTED = "adopted"
    REJECTED = "rejected"
    NO_QUORUM = "no_quorum"


class TallySourceKind(Enum):
    """Where official figures come from."""

    MANUAL = "manual"
    EVOTE = "evote"


@dataclass(frozen=True, eq=True)
class ManualTally:
    """Officially entered figures, consistent with their total."""

    kind: ClassVar[TallySourceKind] = TallySourceKind.MANUAL

    for_weight: float
    against_weight: float
    abstain_weight: float
    total: float

    @property
    def expressed_weight(self) -> float:
        return self.for_weight + self.against_weight + self.abstain_weight


@dataclass(frozen=True, eq=True)
class ElectronicTally:
    """Weighted aggregate of the ballots cast electronically."""

    kind: ClassVar[TallySourceKind] = TallySourceKind.EVOTE

    for_weight: float
    against_weight: float
    abstain_weight: float
    total: float
    ballot_count: int = 0

    @property
    def expressed_weight(self) -> float:
        return self.for_weight + self.against_weight + self.abstain_weight


TallySource = ManualTally | ElectronicTally


@dataclass(frozen=True, eq=True)
class DecisionOutcome:
    """Result of the pure policy evaluation.

    Attributes:
        decision: adopted, rejected or no_quorum.
        reason: Human-readable explanation citing the figures.
        quorum_met: None when no quorum policy applied.
        quorum_ratio: Expressed weight over the quorum denominator.
        majority_ratio: "for" over the majority denominator.
        majority_threshold: Threshold "for" had to exceed.
    """

    decision: Decision
    reason: str
    quorum_met: bool | None = None
    quorum_ratio: float | None = None
    majority_ratio: float | None = None
    majority_threshold: float | None = None


@dataclass(frozen=True, eq=True)
class OfficialResult:
    """Authoritative, persisted result of a motion."""

    source: TallySourceKind
    for_weight: float
    against_weight: float
    abstain_weight: float
    total: float
    decision: Decision
    reason: str

    @classmethod
    def from_tally(cls, tally: TallySource, outcome: DecisionOutcome) -> OfficialResult:
        return cls(
            source=tally.kind,
            for_weight=tally.for_weight,
            against_weight=tally.against_weight,
            abstain_weight=tally.abstain_weight,
            total=tally.total,
            decision=outcome.decision,
            reason=outcome.reason,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the flat shape exposed to controllers."""
        return {
            "source": self.source.value,
            "for": self.for_weight,
            "against": self.against_weight,
            "abstain": self.abstain_weight,
            "total": self.total,
            "decision": self.decision.value,
            "reason": self.reason,
        }
