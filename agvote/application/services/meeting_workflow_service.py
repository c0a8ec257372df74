"""Meeting lifecycle controller.

Evaluates whether a meeting may move between lifecycle statuses and applies
sanctioned transitions.

Transition Rules:
    draft -> scheduled: requires at least one motion (blocking)
    scheduled -> frozen: requires attendance (blocking), president (warning)
    frozen -> live: quorum check (warning only)
    live -> paused: no open motion (blocking)
    live|paused -> closed: no open motion (blocking)
    closed -> validated: no motion without usable result (blocking),
        consolidation (warning)
    from archived: always blocked, the audit record is immutable
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from structlog import get_logger

from agvote.application.services.best_effort import notify_best_effort
from agvote.domain.errors import (
    AlreadyInStatusError,
    ArchivedMeetingImmutableError,
    InvalidTransitionError,
    MeetingNotFoundError,
    PermissionDeniedError,
    TransitionBlockedError,
)
from agvote.domain.models.meeting import Meeting, MeetingStatus
from agvote.domain.models.transition import (
    TransitionCheck,
    TransitionIssue,
    TransitionOutcome,
    TransitionReadiness,
)

if TYPE_CHECKING:
    from agvote.application.ports.attendance_repository import (
        AttendanceRepositoryProtocol,
    )
    from agvote.application.ports.audit_sink import AuditSinkProtocol
    from agvote.application.ports.governance_broadcaster import (
        GovernanceBroadcasterProtocol,
    )
    from agvote.application.ports.meeting_repository import (
        MeetingRepositoryProtocol,
    )
    from agvote.application.ports.meeting_role_repository import (
        MeetingRoleRepositoryProtocol,
    )
    from agvote.application.ports.motion_repository import MotionRepositoryProtocol
    from agvote.application.ports.transaction_manager import (
        TransactionManagerProtocol,
    )
    from agvote.application.services.quorum_service import QuorumService
    from agvote.domain.models.tenant import TenantContext
    from agvote.infrastructure.monitoring.governance_metrics import (
        GovernanceMetricsCollector,
    )

logger = get_logger(__name__)

ARCHIVED_IMMUTABLE = TransitionIssue(
    "archived_immutable",
    "Séance archivée : toute modification est interdite pour garantir "
    "l'intégrité de l'audit.",
)


class MeetingWorkflowService:
    """Lifecycle controller for meetings."""

    def __init__(
        self,
        meeting_repo: MeetingRepositoryProtocol,
        motion_repo: MotionRepositoryProtocol,
        attendance_repo: AttendanceRepositoryProtocol,
        meeting_role_repo: MeetingRoleRepositoryProtocol,
        transaction_manager: TransactionManagerProtocol,
        quorum_service: QuorumService | None = None,
        broadcaster: GovernanceBroadcasterProtocol | None = None,
        audit_sink: AuditSinkProtocol | None = None,
        metrics: GovernanceMetricsCollector | None = None,
    ) -> None:
        """Initialize the workflow service.

        Args:
            meeting_repo: Meeting lookups, lock and status writes.
            motion_repo: Motion counting projections.
            attendance_repo: Attendance counting projections.
            meeting_role_repo: President lookup.
            transaction_manager: Opens the unit of work for status writes.
            quorum_service: Optional quorum computation for frozen -> live.
                If not provided, no quorum warning is ever emitted.
            broadcaster: Optional live channel for status changes.
            audit_sink: Optional audit trail.
            metrics: Optional Prometheus collector.
        """
        self._meeting_repo = meeting_repo
        self._motion_repo = motion_repo
        self._attendance_repo = attendance_repo
        self._meeting_role_repo = meeting_role_repo
        self._tx = transaction_manager
        self._quorum_service = quorum_service
        self._broadcaster = broadcaster
        self._audit_sink = audit_sink
        self._metrics = metrics

    async def issues_before_transition(
        self,
        meeting_id: str,
        tenant: TenantContext,
        to_status: str | MeetingStatus,
        from_status_override: str | MeetingStatus | None = None,
    ) -> TransitionCheck:
        """Check blocking issues and warnings before a transition.

        Args:
            meeting_id: The meeting.
            tenant: Caller's tenant context.
            to_status: Target status.
            from_status_override: Status to evaluate from instead of the
                stored one.

        Returns:
            TransitionCheck; can_proceed is True when there is no issue.

        Raises:
            InvalidArgumentError: Unknown status value.
            MeetingNotFoundError: Meeting does not resolve under the tenant.
        """
        target = MeetingStatus.parse(to_status)
        override = (
            MeetingStatus.parse(from_status_override)
            if from_status_override is not None
            else None
        )
        meeting = await self._get_meeting(meeting_id, tenant)
        return await self._check(meeting, override or meeting.status, target, tenant)

    async def get_transition_readiness(
        self, meeting_id: str, tenant: TenantContext
    ) -> TransitionReadiness:
        """Evaluate every transition reachable from the current status.

        Raises:
            MeetingNotFoundError: Meeting does not resolve under the tenant.
        """
        meeting = await self._get_meeting(meeting_id, tenant)
        transitions = {
            target: await self._check(meeting, meeting.status, target, tenant)
            for target in meeting.status.next_statuses()
        }
        return TransitionReadiness(
            current_status=meeting.status, transitions=transitions
        )

    async def apply_transition(
        self,
        meeting_id: str,
        tenant: TenantContext,
        to_status: str | MeetingStatus,
        force: bool = False,
    ) -> TransitionOutcome:
        """Move a meeting to a new lifecycle status.

        Args:
            meeting_id: The meeting.
            tenant: Caller's tenant context.
            to_status: Target status.
            force: Override blocking issues (admin only).

        Returns:
            TransitionOutcome with the written meeting and any warnings.

        Raises:
            InvalidArgumentError: Unknown status value.
            MeetingNotFoundError: Meeting does not resolve under the tenant.
            AlreadyInStatusError: Meeting already has the target status.
            ArchivedMeetingImmutableError: Meeting is archived.
            InvalidTransitionError: Target not reachable from current status.
            PermissionDeniedError: force without an admin context.
            TransitionBlockedError: Blocking issues and no force.
        """
        target = MeetingStatus.parse(to_status)
        meeting = await self._get_meeting(meeting_id, tenant)
        log = logger.bind(
            meeting_id=meeting.id,
            from_status=meeting.status.value,
            to_status=target.value,
            forced=force,
        )

        # Pre-flight without lock for fast-fail
        self._ensure_reachable(meeting, target)
        if force and not tenant.is_admin:
            log.warning("Transition rejected - force requires admin")
            raise PermissionDeniedError(
                "Seul un administrateur peut forcer une transition.",
                code="force_requires_admin",
            )
        check = await self._check(meeting, meeting.status, target, tenant)
        if not check.can_proceed and not force:
            log.warning(
                "Transition blocked",
                issues=[issue.code for issue in check.issues],
            )
            raise TransitionBlockedError(
                meeting.id,
                target.value,
                issues=[issue.to_dict() for issue in check.issues],
                warnings=[warning.to_dict() for warning in check.warnings],
            )

        now = datetime.now(timezone.utc)
        async with self._tx.transaction():
            locked = await self._meeting_repo.lock_for_update(
                meeting.id, tenant.tenant_id
            )
            if locked is None:
                raise MeetingNotFoundError(meeting.id)
            # Re-validate: status may have changed since the pre-flight check
            self._ensure_reachable(locked, target)
            from_status = locked.status
            updated = await self._meeting_repo.update_status(
                locked.id,
                tenant.tenant_id,
                target,
                validated_at=(
                    now
                    if target is MeetingStatus.VALIDATED and locked.validated_at is None
                    else None
                ),
                archived_at=now if target is MeetingStatus.ARCHIVED else None,
            )

        log.info("Meeting transitioned", warnings=[w.code for w in check.warnings])
        if self._metrics is not None:
            self._metrics.record_transition(from_status.value, target.value)
        await self._after_transition(updated, from_status, force, tenant, log)

        return TransitionOutcome(
            meeting=updated,
            from_status=from_status,
            warnings=check.warnings,
            forced=force and not check.can_proceed,
        )

    async def has_motions(self, meeting_id: str, tenant: TenantContext) -> bool:
        count = await self._motion_repo.count_for_meeting(meeting_id, tenant.tenant_id)
        return count > 0

    async def has_attendance(self, meeting_id: str, tenant: TenantContext) -> bool:
        """Check for at least one present or remote member."""
        count = await self._attendance_repo.count_present_or_remote(
            meeting_id, tenant.tenant_id
        )
        return count > 0

    async def has_president(self, meeting_id: str, tenant: TenantContext) -> bool:
        if not tenant.has_tenant:
            return False
        president = await self._meeting_role_repo.find_president(
            meeting_id, tenant.tenant_id
        )
        return president is not None

    async def count_open_motions(self, meeting_id: str, tenant: TenantContext) -> int:
        return await self._motion_repo.count_open_motions(meeting_id, tenant.tenant_id)

    async def all_motions_closed(self, meeting_id: str, tenant: TenantContext) -> bool:
        return await self.count_open_motions(meeting_id, tenant) == 0

    async def quorum_met(self, meeting_id: str, tenant: TenantContext) -> bool:
        """Check the meeting-level quorum; never blocks on failure.

        Returns:
            False only when a quorum policy applies and is not met.
        """
        if self._quorum_service is None:
            return True
        try:
            status = await self._quorum_service.compute_for_meeting(meeting_id, tenant)
        except Exception as e:
            logger.warning(
                "Quorum computation failed, not blocking transition",
                meeting_id=meeting_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return True
        return status.met is not False

    async def _get_meeting(self, meeting_id: str, tenant: TenantContext) -> Meeting:
        meeting_id = (meeting_id or "").strip()
        meeting = (
            await self._meeting_repo.find_by_id_for_tenant(meeting_id, tenant.tenant_id)
            if meeting_id
            else None
        )
        if meeting is None:
            raise MeetingNotFoundError(meeting_id)
        return meeting

    @staticmethod
    def _ensure_reachable(meeting: Meeting, target: MeetingStatus) -> None:
        if meeting.is_archived:
            raise ArchivedMeetingImmutableError(meeting.id)
        if meeting.status is target:
            raise AlreadyInStatusError(meeting.id, target.value)
        if target not in meeting.status.next_statuses():
            raise InvalidTransitionError(meeting.id, meeting.status.value, target.value)

    async def _check(
        self,
        meeting: Meeting,
        from_status: MeetingStatus,
        target: MeetingStatus,
        tenant: TenantContext,
    ) -> TransitionCheck:
        if from_status is MeetingStatus.ARCHIVED:
            return TransitionCheck(issues=(ARCHIVED_IMMUTABLE,))

        issues: list[TransitionIssue] = []
        warnings: list[TransitionIssue] = []
        pair = (from_status, target)

        if pair == (MeetingStatus.DRAFT, MeetingStatus.SCHEDULED):
            if not await self.has_motions(meeting.id, tenant):
                issues.append(
                    TransitionIssue("no_motions", "Aucune résolution créée")
                )

        elif pair == (MeetingStatus.SCHEDULED, MeetingStatus.FROZEN):
            if not await self.has_attendance(meeting.id, tenant):
                issues.append(
                    TransitionIssue("no_attendance", "Aucune présence pointée")
                )
            elif not await self.has_president(meeting.id, tenant):
                warnings.append(
                    TransitionIssue(
                        "no_president", "Aucun président assigné (optionnel)"
                    )
                )

        elif pair == (MeetingStatus.FROZEN, MeetingStatus.LIVE):
            if not await self.quorum_met(meeting.id, tenant):
                warnings.append(
                    TransitionIssue(
                        "quorum_not_met", "Quorum non atteint (vous pouvez continuer)"
                    )
                )

        elif pair == (MeetingStatus.LIVE, MeetingStatus.PAUSED):
            open_count = await self.count_open_motions(meeting.id, tenant)
            if open_count > 0:
                issues.append(
                    TransitionIssue(
                        "motion_open",
                        f"Impossible de mettre en pause : {open_count} vote(s) en "
                        "cours. Fermez le vote avant de mettre en pause.",
                    )
                )

        elif target is MeetingStatus.CLOSED and from_status in (
            MeetingStatus.LIVE,
            MeetingStatus.PAUSED,
        ):
            open_count = await self.count_open_motions(meeting.id, tenant)
            if open_count > 0:
                issues.append(
                    TransitionIssue(
                        "motion_open", f"{open_count} résolution(s) encore ouverte(s)"
                    )
                )

        elif pair == (MeetingStatus.CLOSED, MeetingStatus.VALIDATED):
            bad = await self._motion_repo.count_bad_closed_motions(
                meeting.id, tenant.tenant_id
            )
            if bad > 0:
                issues.append(
                    TransitionIssue(
                        "bad_results",
                        f"{bad} résolution(s) sans résultat exploitable",
                    )
                )
            else:
                closed = await self._motion_repo.count_closed_motions(
                    meeting.id, tenant.tenant_id
                )
                consolidated = await self._motion_repo.count_consolidated_motions(
                    meeting.id, tenant.tenant_id
                )
                if consolidated < closed:
                    warnings.append(
                        TransitionIssue(
                            "not_consolidated",
                            "Résultats non consolidés (officialisation recommandée)",
                        )
                    )

        return TransitionCheck(issues=tuple(issues), warnings=tuple(warnings))

    async def _after_transition(
        self,
        meeting: Meeting,
        from_status: MeetingStatus,
        forced: bool,
        tenant: TenantContext,
        log: Any,
    ) -> None:
        if self._audit_sink is not None:
            audit_sink = self._audit_sink
            payload: dict[str, Any] = {
                "from_status": from_status.value,
                "to_status": meeting.status.value,
                "title": meeting.title,
            }
            if forced:
                payload["forced"] = True
            await notify_best_effort(
                lambda: audit_sink.append(
                    "meeting.transition",
                    tenant.tenant_id,
                    "meeting",
                    meeting.id,
                    payload,
                    actor_id=tenant.user_id,
                ),
                "meeting_transition_audit",
                log,
            )

        if self._broadcaster is not None:
            broadcaster = self._broadcaster
            await notify_best_effort(
                lambda: broadcaster.meeting_status_changed(
                    meeting.id,
                    tenant.tenant_id,
                    meeting.status.value,
                    from_status.value,
                ),
                "meeting_status_changed",
                log,
            )
