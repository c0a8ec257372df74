"""Meeting-level quorum status."""

from __future__ import annotations

from dataclasses import dataclass

from agvote.domain.models.attendance import AttendanceMode


@dataclass(frozen=True, eq=True)
class QuorumStatus:
    """Whether the attendance roll satisfies the meeting's quorum policy.

    Attributes:
        applied: False when no quorum policy resolves for the meeting.
        met: None when not applied.
        ratio: Numerator over denominator (0.0 when the denominator is 0).
        threshold: Threshold in force for the meeting's convocation.
        numerator: Present members or present weight.
        denominator: Active members or active weight.
        modes: Attendance modes counted as present.
        justification: Human-readable summary.
    """

    applied: bool
    met: bool | None
    justification: str
    ratio: float = 0.0
    threshold: float | None = None
    numerator: float = 0.0
    denominator: float = 0.0
    modes: tuple[AttendanceMode, ...] = ()
