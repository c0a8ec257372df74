"""In-memory stub adapters for development and testing.

Every stub shares one InMemoryGovernanceStore so that writes made through
one port are visible through the others.
"""

from agvote.infrastructure.stubs.attendance_repository_stub import (
    AttendanceRepositoryStub,
)
from agvote.infrastructure.stubs.ballot_repository_stub import BallotRepositoryStub
from agvote.infrastructure.stubs.governance_store import InMemoryGovernanceStore
from agvote.infrastructure.stubs.meeting_repository_stub import MeetingRepositoryStub
from agvote.infrastructure.stubs.member_repository_stub import MemberRepositoryStub
from agvote.infrastructure.stubs.motion_repository_stub import MotionRepositoryStub
from agvote.infrastructure.stubs.policy_repository_stub import (
    MeetingRoleRepositoryStub,
    PolicyRepositoryStub,
)
from agvote.infrastructure.stubs.proxy_repository_stub import ProxyRepositoryStub
from agvote.infrastructure.stubs.side_channel_stubs import (
    AuditEntry,
    InMemoryAuditSink,
    RecordingBroadcaster,
)
from agvote.infrastructure.stubs.transaction_manager_stub import (
    TransactionManagerStub,
)

__all__: list[str] = [
    "AttendanceRepositoryStub",
    "AuditEntry",
    "BallotRepositoryStub",
    "InMemoryAuditSink",
    "InMemoryGovernanceStore",
    "MeetingRepositoryStub",
    "MeetingRoleRepositoryStub",
    "MemberRepositoryStub",
    "MotionRepositoryStub",
    "PolicyRepositoryStub",
    "ProxyRepositoryStub",
    "RecordingBroadcaster",
    "TransactionManagerStub",
]
