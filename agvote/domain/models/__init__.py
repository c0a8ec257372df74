"""Domain models for the governance engine."""

from agvote.domain.models.attendance import (
    ABSENT,
    Attendance,
    AttendanceDeletion,
    AttendanceMode,
    AttendanceSummary,
)
from agvote.domain.models.ballot import Ballot, BallotTally, BallotValue
from agvote.domain.models.decision import (
    Decision,
    DecisionOutcome,
    ElectronicTally,
    ManualTally,
    OfficialResult,
    TallySource,
    TallySourceKind,
)
from agvote.domain.models.meeting import MEETING_TRANSITIONS, Meeting, MeetingStatus
from agvote.domain.models.member import Member
from agvote.domain.models.motion import MANUAL_TALLY_EPSILON, Motion, MotionContext
from agvote.domain.models.policy import (
    DEFAULT_VOTE_POLICY,
    MajorityBase,
    QuorumDenominator,
    QuorumPolicy,
    VotePolicy,
)
from agvote.domain.models.proxy import ProxyDelegation
from agvote.domain.models.quorum import QuorumStatus
from agvote.domain.models.tenant import TenantContext
from agvote.domain.models.transition import (
    TransitionCheck,
    TransitionIssue,
    TransitionOutcome,
    TransitionReadiness,
)

__all__: list[str] = [
    "ABSENT",
    "Attendance",
    "AttendanceDeletion",
    "AttendanceMode",
    "AttendanceSummary",
    "Ballot",
    "BallotTally",
    "BallotValue",
    "DEFAULT_VOTE_POLICY",
    "Decision",
    "DecisionOutcome",
    "ElectronicTally",
    "MANUAL_TALLY_EPSILON",
    "MEETING_TRANSITIONS",
    "MajorityBase",
    "ManualTally",
    "Meeting",
    "MeetingStatus",
    "Member",
    "Motion",
    "MotionContext",
    "OfficialResult",
    "ProxyDelegation",
    "QuorumDenominator",
    "QuorumPolicy",
    "QuorumStatus",
    "TallySource",
    "TallySourceKind",
    "TenantContext",
    "TransitionCheck",
    "TransitionIssue",
    "TransitionOutcome",
    "TransitionReadiness",
    "VotePolicy",
]
