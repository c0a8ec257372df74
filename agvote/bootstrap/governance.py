"""Bootstrap wiring for the governance engine.

Builds every engine service on top of one set of port implementations.
The default wiring uses the in-memory stubs; a deployment swaps in real
adapters through set_governance_engine().
"""

from __future__ import annotations

from dataclasses import dataclass

from agvote.application.services.attendance_service import AttendanceService
from agvote.application.services.ballot_service import BallotService
from agvote.application.services.meeting_workflow_service import (
    MeetingWorkflowService,
)
from agvote.application.services.official_results_service import (
    OfficialResultsService,
)
from agvote.application.services.proxy_service import ProxyService
from agvote.application.services.quorum_service import QuorumService
from agvote.config.governance_config import GovernanceConfig
from agvote.infrastructure.monitoring.governance_metrics import (
    GovernanceMetricsCollector,
    get_governance_metrics_collector,
)
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
    InMemoryAuditSink,
    RecordingBroadcaster,
)
from agvote.infrastructure.stubs.transaction_manager_stub import (
    TransactionManagerStub,
)


@dataclass(frozen=True)
class GovernanceEngine:
    """The engine services, wired on shared ports.

    Attributes:
        workflow: Meeting lifecycle controller.
        attendance: Attendance tracker.
        proxies: Proxy delegation service.
        ballots: Ballot casting engine.
        official_results: Official tally engine.
        quorum: Meeting-level quorum status.
        store: In-memory store behind the stubs, None for real adapters.
        audit_sink: Audit sink shared by the services.
        broadcaster: Broadcast channel shared by the services.
    """

    workflow: MeetingWorkflowService
    attendance: AttendanceService
    proxies: ProxyService
    ballots: BallotService
    official_results: OfficialResultsService
    quorum: QuorumService
    store: InMemoryGovernanceStore | None = None
    audit_sink: InMemoryAuditSink | None = None
    broadcaster: RecordingBroadcaster | None = None


def build_in_memory_engine(
    config: GovernanceConfig | None = None,
    metrics: GovernanceMetricsCollector | None = None,
    store: InMemoryGovernanceStore | None = None,
) -> GovernanceEngine:
    """Wire every engine service on the in-memory stubs.

    Args:
        config: Engine configuration, read from the environment if omitted.
        metrics: Metrics collector, the process-wide one if omitted.
        store: Store to share, a fresh one if omitted.

    Returns:
        A GovernanceEngine whose services all see the same store.
    """
    config = config or GovernanceConfig.from_environment()
    metrics = metrics or get_governance_metrics_collector()
    store = store or InMemoryGovernanceStore()

    meetings = MeetingRepositoryStub(store)
    motions = MotionRepositoryStub(store)
    members = MemberRepositoryStub(store)
    attendance = AttendanceRepositoryStub(store)
    proxies = ProxyRepositoryStub(store)
    ballots = BallotRepositoryStub(store)
    policies = PolicyRepositoryStub(store)
    roles = MeetingRoleRepositoryStub(store)
    tx = TransactionManagerStub()
    audit_sink = InMemoryAuditSink()
    broadcaster = RecordingBroadcaster()

    quorum = QuorumService(meetings, attendance, members, policies)
    return GovernanceEngine(
        workflow=MeetingWorkflowService(
            meetings,
            motions,
            attendance,
            roles,
            tx,
            quorum_service=quorum,
            broadcaster=broadcaster,
            audit_sink=audit_sink,
            metrics=metrics,
        ),
        attendance=AttendanceService(
            attendance,
            meetings,
            members,
            broadcaster=broadcaster,
            audit_sink=audit_sink,
        ),
        proxies=ProxyService(
            proxies, meetings, members, tx, config=config, audit_sink=audit_sink
        ),
        ballots=BallotService(
            motions,
            meetings,
            members,
            attendance,
            proxies,
            ballots,
            tx,
            broadcaster=broadcaster,
            audit_sink=audit_sink,
            metrics=metrics,
        ),
        official_results=OfficialResultsService(
            motions,
            ballots,
            members,
            attendance,
            policies,
            tx,
            config=config,
            metrics=metrics,
        ),
        quorum=quorum,
        store=store,
        audit_sink=audit_sink,
        broadcaster=broadcaster,
    )


_governance_engine: GovernanceEngine | None = None


def get_governance_engine() -> GovernanceEngine:
    """Get governance engine instance."""
    global _governance_engine
    if _governance_engine is None:
        _governance_engine = build_in_memory_engine()
    return _governance_engine


def set_governance_engine(engine: GovernanceEngine) -> None:
    """Set custom governance engine for testing."""
    global _governance_engine
    _governance_engine = engine


def reset_governance_engine() -> None:
    """Reset the singleton instance for testing."""
    global _governance_engine
    _governance_engine = None
