"""Motion domain model.

A motion is "open" when it has been opened and not yet closed. Official
result fields are the only fields the official tally engine may write;
they are recomputable at will from the stored ballots or manual tally.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from agvote.domain.models.decision import OfficialResult
from agvote.domain.models.meeting import Meeting

# Tolerance when checking that manual for/against/abstain add up to the total.
MANUAL_TALLY_EPSILON = 1e-6


@dataclass(frozen=True, eq=True)
class Motion:
    """A resolution put to the vote during a meeting.

    Attributes:
        id: Motion identifier.
        meeting_id: Owning meeting.
        tenant_id: Owning tenant.
        title: Display title.
        opened_at: When voting opened, if ever.
        closed_at: When voting closed, if ever.
        vote_policy_id: Motion-level vote policy override.
        quorum_policy_id: Motion-level quorum policy override.
        manual_total: Officially entered total (0 when not entered).
        manual_for: Officially entered "for" weight.
        manual_against: Officially entered "against" weight.
        manual_abstain: Officially entered "abstain" weight.
        official: Last persisted official result, if consolidated.
    """

    id: str
    meeting_id: str
    tenant_id: str
    title: str = ""
    opened_at: datetime | None = None
    closed_at: datetime | None = None
    vote_policy_id: str | None = None
    quorum_policy_id: str | None = None
    manual_total: float = 0.0
    manual_for: float = 0.0
    manual_against: float = 0.0
    manual_abstain: float = 0.0
    official: OfficialResult | None = None

    @property
    def is_open(self) -> bool:
        return self.opened_at is not None and self.closed_at is None

    @property
    def is_closed(self) -> bool:
        return self.closed_at is not None

    def has_consistent_manual_tally(
        self, epsilon: float = MANUAL_TALLY_EPSILON
    ) -> bool:
        """Check whether the manual tally is usable as the official source.

        Args:
            epsilon: Allowed difference between the sum and the total.

        Returns:
            True if manual_total > 0 and for + against + abstain equals it.
        """
        if self.manual_total <= 0:
            return False
        manual_sum = self.manual_for + self.manual_against + self.manual_abstain
        return abs(manual_sum - self.manual_total) < epsilon


@dataclass(frozen=True, eq=True)
class MotionContext:
    """A motion joined with its meeting, as loaded for casting or tallying."""

    motion: Motion
    meeting: Meeting

    @property
    def tenant_id(self) -> str:
        return self.meeting.tenant_id

    @property
    def meeting_id(self) -> str:
        return self.meeting.id
