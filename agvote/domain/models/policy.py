"""Quorum and vote policy domain models.

Policies are resolved motion-level first, then meeting-level. When no vote
policy resolves, the implicit default is a simple majority of expressed
votes with abstentions excluded from the denominator.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from agvote.domain.models.attendance import AttendanceMode


class QuorumDenominator(Enum):
    """What the quorum threshold is a fraction of.

    Values:
        ELIGIBLE_MEMBERS: Count of active members of the tenant
        PRESENT: Sum of present members' effective power
    """

    ELIGIBLE_MEMBERS = "eligible_members"
    PRESENT = "present"


class MajorityBase(Enum):
    """What the majority threshold is a fraction of.

    Values:
        EXPRESSED: for + against (+ abstain when counted as against)
        PRESENT: Sum of directly present members' effective power
    """

    EXPRESSED = "expressed"
    PRESENT = "present"


@dataclass(frozen=True, eq=True)
class QuorumPolicy:
    """Minimum participation required for a result to be valid.

    Attributes:
        id: Policy identifier.
        name: Display name.
        denominator: Primary denominator.
        threshold: Primary threshold in [0, 1].
        call2_denominator: Denominator for a reconvened (second-call) session.
            Defaults to the primary denominator.
        call2_threshold: Threshold for a reconvened session, if any.
        include_proxies: Count members represented by proxy as present.
        count_remote: Count remote members as present.
    """

    id: str
    denominator: QuorumDenominator
    threshold: float
    name: str = "Quorum"
    call2_denominator: QuorumDenominator | None = None
    call2_threshold: float | None = None
    include_proxies: bool = True
    count_remote: bool = True

    def for_convocation(
        self, convocation_no: int
    ) -> tuple[QuorumDenominator, float]:
        """Get the denominator and threshold applying to a convocation.

        Args:
            convocation_no: 1 for the first call, >= 2 when reconvened.

        Returns:
            Tuple of (denominator, threshold).
        """
        if convocation_no >= 2 and self.call2_threshold is not None:
            return (
                self.call2_denominator or self.denominator,
                self.call2_threshold,
            )
        return self.denominator, self.threshold

    def attendance_modes(self) -> tuple[AttendanceMode, ...]:
        """Attendance modes counted as present under this policy."""
        modes = [AttendanceMode.PRESENT]
        if self.count_remote:
            modes.append(AttendanceMode.REMOTE)
        if self.include_proxies:
            modes.append(AttendanceMode.PROXY)
        return tuple(modes)


@dataclass(frozen=True, eq=True)
class VotePolicy:
    """Majority rule applied to a motion.

    Attributes:
        id: Policy identifier, None for the implicit default.
        base: Majority denominator.
        threshold: Fraction of the base that "for" must strictly exceed.
        abstention_as_against: Fold abstentions into "against".
        name: Display name.
    """

    id: str | None
    base: MajorityBase
    threshold: float
    abstention_as_against: bool = False
    name: str = ""

    @property
    def is_default(self) -> bool:
        return self.id is None


DEFAULT_VOTE_POLICY = VotePolicy(
    id=None,
    base=MajorityBase.EXPRESSED,
    threshold=0.5,
    abstention_as_against=False,
    name="Majorité simple",
)

# Modes whose weight makes up the "present" majority base.
MAJORITY_PRESENT_MODES: tuple[AttendanceMode, ...] = (
    AttendanceMode.PRESENT,
    AttendanceMode.REMOTE,
)
