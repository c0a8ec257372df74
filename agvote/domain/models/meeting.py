"""Meeting domain model and lifecycle state machine.

State Machine:
    draft -> scheduled
    scheduled -> frozen | draft
    frozen -> live | scheduled
    live -> paused | closed
    paused -> live | closed
    closed -> validated
    validated -> archived

Terminal State:
    archived is terminal. Once a meeting is archived no further status
    change is ever legal, and attendance/ballot writes are refused.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from agvote.domain.errors.validation import InvalidArgumentError


class MeetingStatus(Enum):
    """Status in the meeting lifecycle.

    States:
        DRAFT: Agenda being prepared
        SCHEDULED: Convocation sent, agenda published
        FROZEN: Attendance roll frozen, ready to open
        LIVE: In session, votes may be cast on open motions
        PAUSED: Session suspended, no motion may be open
        CLOSED: Session ended, results pending validation
        VALIDATED: Results validated by the president
        ARCHIVED: Immutable audit record (terminal)
    """

    DRAFT = "draft"
    SCHEDULED = "scheduled"
    FROZEN = "frozen"
    LIVE = "live"
    PAUSED = "paused"
    CLOSED = "closed"
    VALIDATED = "validated"
    ARCHIVED = "archived"

    @classmethod
    def parse(cls, raw: str | MeetingStatus) -> MeetingStatus:
        """Parse a raw status string.

        Args:
            raw: Status value, surrounding whitespace ignored.

        Returns:
            The matching MeetingStatus.

        Raises:
            InvalidArgumentError: If the value is not a known status.
        """
        if isinstance(raw, cls):
            return raw
        value = str(raw or "").strip()
        try:
            return cls(value)
        except ValueError:
            raise InvalidArgumentError(
                f"Statut '{value}' invalide.", field="status", code="invalid_status"
            ) from None

    def is_terminal(self) -> bool:
        """Check if this status is terminal (archived)."""
        return self is MeetingStatus.ARCHIVED

    def next_statuses(self) -> tuple[MeetingStatus, ...]:
        """Get the statuses reachable from this one, in display order.

        Returns:
            Tuple of reachable statuses. Empty for archived.
        """
        return MEETING_TRANSITIONS.get(self, ())


# Adjacency table keyed by current status. Order is significant: it is the
# order in which readiness is reported to operators.
MEETING_TRANSITIONS: dict[MeetingStatus, tuple[MeetingStatus, ...]] = {
    MeetingStatus.DRAFT: (MeetingStatus.SCHEDULED,),
    MeetingStatus.SCHEDULED: (MeetingStatus.FROZEN, MeetingStatus.DRAFT),
    MeetingStatus.FROZEN: (MeetingStatus.LIVE, MeetingStatus.SCHEDULED),
    MeetingStatus.LIVE: (MeetingStatus.PAUSED, MeetingStatus.CLOSED),
    MeetingStatus.PAUSED: (MeetingStatus.LIVE, MeetingStatus.CLOSED),
    MeetingStatus.CLOSED: (MeetingStatus.VALIDATED,),
    MeetingStatus.VALIDATED: (MeetingStatus.ARCHIVED,),
    MeetingStatus.ARCHIVED: (),
}


@dataclass(frozen=True, eq=True)
class Meeting:
    """A formal deliberative meeting owned by a tenant.

    Attributes:
        id: Meeting identifier.
        tenant_id: Owning tenant.
        status: Current lifecycle status.
        title: Display title.
        convocation_no: 1 for the first call, 2 for a reconvened session.
        vote_policy_id: Meeting-level vote policy, inherited by motions.
        quorum_policy_id: Meeting-level quorum policy, inherited by motions.
        validated_at: Set once, when results are first validated.
        archived_at: Set when the meeting is archived.
    """

    id: str
    tenant_id: str
    status: MeetingStatus = MeetingStatus.DRAFT
    title: str = ""
    convocation_no: int = 1
    vote_policy_id: str | None = None
    quorum_policy_id: str | None = None
    validated_at: datetime | None = None
    archived_at: datetime | None = None

    @property
    def is_archived(self) -> bool:
        return self.status.is_terminal()

    @property
    def is_validated(self) -> bool:
        return self.validated_at is not None
