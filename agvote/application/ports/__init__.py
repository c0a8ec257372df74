"""Application ports - Abstract interfaces for infrastructure adapters.

This module defines the contracts that infrastructure adapters must implement.
Ports enable dependency inversion and make the application layer testable.

Available ports:
- MeetingRepositoryProtocol, MotionRepositoryProtocol, MemberRepositoryProtocol
- AttendanceRepositoryProtocol, ProxyRepositoryProtocol, BallotRepositoryProtocol
- PolicyRepositoryProtocol, MeetingRoleRepositoryProtocol
- AuditSinkProtocol, GovernanceBroadcasterProtocol, TransactionManagerProtocol
"""

from agvote.application.ports.attendance_repository import (
    AttendanceRepositoryProtocol,
)
from agvote.application.ports.audit_sink import AuditSinkProtocol
from agvote.application.ports.ballot_repository import BallotRepositoryProtocol
from agvote.application.ports.governance_broadcaster import (
    GovernanceBroadcasterProtocol,
)
from agvote.application.ports.meeting_repository import MeetingRepositoryProtocol
from agvote.application.ports.meeting_role_repository import (
    MeetingRoleRepositoryProtocol,
)
from agvote.application.ports.member_repository import MemberRepositoryProtocol
from agvote.application.ports.motion_repository import MotionRepositoryProtocol
from agvote.application.ports.policy_repository import PolicyRepositoryProtocol
from agvote.application.ports.proxy_repository import ProxyRepositoryProtocol
from agvote.application.ports.transaction_manager import TransactionManagerProtocol

__all__: list[str] = [
    "AttendanceRepositoryProtocol",
    "AuditSinkProtocol",
    "BallotRepositoryProtocol",
    "GovernanceBroadcasterProtocol",
    "MeetingRepositoryProtocol",
    "MeetingRoleRepositoryProtocol",
    "MemberRepositoryProtocol",
    "MotionRepositoryProtocol",
    "PolicyRepositoryProtocol",
    "ProxyRepositoryProtocol",
    "TransactionManagerProtocol",
]
