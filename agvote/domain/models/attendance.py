"""Attendance domain model.

Absence is represented by the absence of a row. The literal "absent" is
accepted by the attendance upsert only as a request to delete the row;
it is never stored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from agvote.domain.errors.validation import InvalidArgumentError

ABSENT = "absent"


class AttendanceMode(Enum):
    """How a member attends a meeting.

    Modes:
        PRESENT: Physically present
        REMOTE: Attending remotely
        PROXY: Represented by a proxy holder
        EXCUSED: Excused, not attending
    """

    PRESENT = "present"
    REMOTE = "remote"
    PROXY = "proxy"
    EXCUSED = "excused"

    @classmethod
    def parse_request(cls, raw: str | AttendanceMode) -> AttendanceMode | None:
        """Parse an upsert mode, where None stands for "absent".

        Args:
            raw: Requested mode, surrounding whitespace ignored.

        Returns:
            The AttendanceMode, or None when the request is "absent".

        Raises:
            InvalidArgumentError: If the mode is not one of the five values.
        """
        if isinstance(raw, cls):
            return raw
        value = str(raw or "").strip()
        if value == ABSENT:
            return None
        try:
            return cls(value)
        except ValueError:
            raise InvalidArgumentError(
                "mode invalide (present/remote/proxy/excused/absent)",
                field="mode",
                code="invalid_mode",
            ) from None

    def is_direct(self) -> bool:
        """Check if the member attends in person or remotely."""
        return self in DIRECT_MODES

    def is_attending(self) -> bool:
        """Check if the member counts as present, directly or via proxy."""
        return self in ATTENDING_MODES


DIRECT_MODES: frozenset[AttendanceMode] = frozenset(
    {AttendanceMode.PRESENT, AttendanceMode.REMOTE}
)

ATTENDING_MODES: frozenset[AttendanceMode] = frozenset(
    {AttendanceMode.PRESENT, AttendanceMode.REMOTE, AttendanceMode.PROXY}
)


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class Attendance:
    """A member's attendance record for one meeting.

    Attributes:
        meeting_id: The meeting.
        member_id: The member.
        tenant_id: Owning tenant.
        mode: Attendance mode.
        effective_power: Weight snapshot taken at write time.
        notes: Optional operator notes.
        checked_in_at: When the row was last written.
    """

    meeting_id: str
    member_id: str
    tenant_id: str
    mode: AttendanceMode
    effective_power: float = 1.0
    notes: str | None = None
    checked_in_at: datetime = field(default_factory=_utc_now)


@dataclass(frozen=True, eq=True)
class AttendanceDeletion:
    """Acknowledgement returned when an attendance row is removed."""

    meeting_id: str
    member_id: str
    deleted: bool = True


@dataclass(frozen=True, eq=True)
class AttendanceSummary:
    """Count and weight of members attending (present, remote or proxy)."""

    present_count: int = 0
    present_weight: float = 0.0
