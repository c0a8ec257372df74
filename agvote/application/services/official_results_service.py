"""Official tally engine.

Single source of truth for the authoritative result of a motion.

Source Rule:
    manual_total > 0 and manual for + against + abstain == manual_total
    (within the configured epsilon) => source "manual"
    otherwise => source "evote" (weighted aggregate of the stored ballots)

Results are recomputable at will: computing twice over unchanged data
yields the same persisted fields, so consolidation may be re-run freely.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from structlog import get_logger

from agvote.config.governance_config import DEFAULT_GOVERNANCE_CONFIG
from agvote.domain.errors import InvalidArgumentError, MotionNotFoundError
from agvote.domain.models.decision import OfficialResult
from agvote.domain.models.policy import (
    MAJORITY_PRESENT_MODES,
    MajorityBase,
    QuorumPolicy,
    VotePolicy,
)
from agvote.domain.services.policy_evaluator import (
    DecisionDenominators,
    evaluate_decision,
    resolve_policy_id,
    select_tally_source,
)

if TYPE_CHECKING:
    from agvote.application.ports.attendance_repository import (
        AttendanceRepositoryProtocol,
    )
    from agvote.application.ports.ballot_repository import BallotRepositoryProtocol
    from agvote.application.ports.member_repository import MemberRepositoryProtocol
    from agvote.application.ports.motion_repository import MotionRepositoryProtocol
    from agvote.application.ports.policy_repository import PolicyRepositoryProtocol
    from agvote.application.ports.transaction_manager import (
        TransactionManagerProtocol,
    )
    from agvote.config.governance_config import GovernanceConfig
    from agvote.domain.models.motion import MotionContext
    from agvote.domain.models.tenant import TenantContext
    from agvote.infrastructure.monitoring.governance_metrics import (
        GovernanceMetricsCollector,
    )

logger = get_logger(__name__)


class OfficialResultsService:
    """Computes, persists and consolidates official motion results."""

    def __init__(
        self,
        motion_repo: MotionRepositoryProtocol,
        ballot_repo: BallotRepositoryProtocol,
        member_repo: MemberRepositoryProtocol,
        attendance_repo: AttendanceRepositoryProtocol,
        policy_repo: PolicyRepositoryProtocol,
        transaction_manager: TransactionManagerProtocol,
        config: GovernanceConfig = DEFAULT_GOVERNANCE_CONFIG,
        metrics: GovernanceMetricsCollector | None = None,
    ) -> None:
        """Initialize the official results service.

        Args:
            motion_repo: Motion context and official result storage.
            ballot_repo: Electronic tally source.
            member_repo: Eligible member count.
            attendance_repo: Present weight for quorum and majority bases.
            policy_repo: Quorum and vote policy lookups.
            transaction_manager: Wraps meeting consolidation.
            config: Manual tally epsilon.
            metrics: Optional Prometheus collector.
        """
        self._motion_repo = motion_repo
        self._ballot_repo = ballot_repo
        self._member_repo = member_repo
        self._attendance_repo = attendance_repo
        self._policy_repo = policy_repo
        self._tx = transaction_manager
        self._config = config
        self._metrics = metrics

    async def compute_official_tallies(self, motion_id: str) -> OfficialResult:
        """Compute the official result of a motion without persisting it.

        Args:
            motion_id: The motion.

        Returns:
            OfficialResult (source, for, against, abstain, total, decision,
            reason).

        Raises:
            InvalidArgumentError: Empty motion id.
            MotionNotFoundError: Motion context cannot be loaded.
        """
        context = await self._load_context(motion_id)
        return await self._compute(context)

    async def compute_and_persist_motion(
        self, motion_id: str, tenant: TenantContext
    ) -> OfficialResult:
        """Compute the official result of a motion and write it back.

        Idempotent: safe to call repeatedly.

        Raises:
            InvalidArgumentError: Empty motion id.
            MotionNotFoundError: Motion does not resolve under the tenant.
        """
        context = await self._load_context(motion_id)
        if context.tenant_id != tenant.tenant_id:
            raise MotionNotFoundError(context.motion.id, message="motion_not_found")
        result = await self._compute(context)
        await self._motion_repo.update_official_results(
            context.motion.id, tenant.tenant_id, result
        )
        self._record_decision(result)
        logger.info(
            "Official result persisted",
            motion_id=context.motion.id,
            source=result.source.value,
            decision=result.decision.value,
        )
        return result

    async def consolidate_meeting(
        self, meeting_id: str, tenant: TenantContext
    ) -> int:
        """Compute and persist the official result of every closed motion.

        Args:
            meeting_id: The meeting.
            tenant: Caller's tenant context.

        Returns:
            Number of motions updated (0 when none is closed).
        """
        meeting_id = (meeting_id or "").strip()
        if not meeting_id:
            raise InvalidArgumentError("meeting_id obligatoire", field="meeting_id")

        log = logger.bind(meeting_id=meeting_id)
        motions = await self._motion_repo.list_closed_for_meeting(
            meeting_id, tenant.tenant_id
        )
        persisted: list[OfficialResult] = []
        async with self._tx.transaction():
            for motion in motions:
                context = await self._load_context(motion.id)
                result = await self._compute(context)
                await self._motion_repo.update_official_results(
                    motion.id, tenant.tenant_id, result
                )
                persisted.append(result)

        for result in persisted:
            self._record_decision(result)
        updated = len(persisted)
        log.info("Meeting consolidated", updated=updated)
        return updated

    def _record_decision(self, result: OfficialResult) -> None:
        if self._metrics is not None:
            self._metrics.record_official_decision(
                result.source.value, result.decision.value
            )

    async def _load_context(self, motion_id: str) -> MotionContext:
        motion_id = (motion_id or "").strip()
        if not motion_id:
            raise InvalidArgumentError("motion_id obligatoire", field="motion_id")
        context = await self._motion_repo.find_with_official_context(motion_id)
        if context is None:
            raise MotionNotFoundError(motion_id, message="motion_not_found")
        return context

    async def _compute(self, context: MotionContext) -> OfficialResult:
        motion = context.motion
        meeting = context.meeting
        tenant_id = context.tenant_id
        log = logger.bind(motion_id=motion.id, meeting_id=meeting.id)

        electronic = await self._ballot_repo.tally(motion.id, tenant_id)
        tally = select_tally_source(
            motion, electronic, epsilon=self._config.manual_tally_epsilon
        )

        quorum_policy = await self._resolve_quorum_policy(
            resolve_policy_id(motion.quorum_policy_id, meeting.quorum_policy_id), log
        )
        vote_policy = await self._resolve_vote_policy(
            resolve_policy_id(motion.vote_policy_id, meeting.vote_policy_id), log
        )

        eligible_members = 0
        quorum_present_weight = 0.0
        if quorum_policy is not None:
            eligible_members = await self._member_repo.count_active(tenant_id)
            quorum_present_weight = await self._attendance_repo.sum_present_weight(
                meeting.id, tenant_id, quorum_policy.attendance_modes()
            )
        majority_present_weight = 0.0
        if vote_policy is not None and vote_policy.base is MajorityBase.PRESENT:
            majority_present_weight = await self._attendance_repo.sum_present_weight(
                meeting.id, tenant_id, MAJORITY_PRESENT_MODES
            )

        outcome = evaluate_decision(
            tally,
            quorum_policy,
            vote_policy,
            DecisionDenominators(
                eligible_members=eligible_members,
                quorum_present_weight=quorum_present_weight,
                majority_present_weight=majority_present_weight,
                convocation_no=meeting.convocation_no,
            ),
        )
        result = OfficialResult.from_tally(tally, outcome)

        log.debug(
            "Official result computed",
            source=result.source.value,
            decision=result.decision.value,
            reason=result.reason,
        )
        return result

    async def _resolve_quorum_policy(
        self, policy_id: str | None, log: Any
    ) -> QuorumPolicy | None:
        if policy_id is None:
            return None
        policy = await self._policy_repo.find_quorum_policy(policy_id)
        if policy is None:
            log.warning("Quorum policy not found, skipping quorum", policy_id=policy_id)
        return policy

    async def _resolve_vote_policy(
        self, policy_id: str | None, log: Any
    ) -> VotePolicy | None:
        if policy_id is None:
            return None
        policy = await self._policy_repo.find_vote_policy(policy_id)
        if policy is None:
            log.warning(
                "Vote policy not found, using simple majority", policy_id=policy_id
            )
        return policy
