"""Ballot casting engine.

Validates and records one member's vote on one motion.

Sequence:
    1. Normalize the request (trimmed strings, required fields, value)
    2. Load the motion with its meeting
    3. Meeting must be live and not yet validated; motion must be open
    4. Member must resolve in tenant, be active and carry a valid weight
    5. Direct vote: member must be present or remote
       Proxy vote: the proxy holder must resolve, be active, be present or
       remote, and hold an active delegation from the member
    6. Under the meeting row lock, re-check the status, then upsert
    7. Read the stored ballot back, then broadcast the tally best-effort

Proxy Convention:
    member_id is the represented member whose vote is counted.
    proxy_source_member_id is the proxy holder who casts it.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from structlog import get_logger

from agvote.application.dtos.ballot import CastBallotRequest
from agvote.application.services.best_effort import notify_best_effort
from agvote.domain.errors import (
    GovernanceError,
    InvalidArgumentError,
    InvalidVoteWeightError,
    MeetingNotLiveError,
    MeetingUnavailableError,
    MeetingValidatedError,
    MemberInactiveError,
    MemberNotFoundError,
    MemberNotPresentError,
    MotionNotFoundError,
    MotionNotOpenError,
    NoActiveProxyError,
)
from agvote.domain.models.ballot import Ballot, BallotValue
from agvote.domain.models.meeting import MeetingStatus

if TYPE_CHECKING:
    from agvote.application.ports.attendance_repository import (
        AttendanceRepositoryProtocol,
    )
    from agvote.application.ports.audit_sink import AuditSinkProtocol
    from agvote.application.ports.ballot_repository import BallotRepositoryProtocol
    from agvote.application.ports.governance_broadcaster import (
        GovernanceBroadcasterProtocol,
    )
    from agvote.application.ports.meeting_repository import (
        MeetingRepositoryProtocol,
    )
    from agvote.application.ports.member_repository import MemberRepositoryProtocol
    from agvote.application.ports.motion_repository import MotionRepositoryProtocol
    from agvote.application.ports.proxy_repository import ProxyRepositoryProtocol
    from agvote.application.ports.transaction_manager import (
        TransactionManagerProtocol,
    )
    from agvote.domain.models.member import Member
    from agvote.domain.models.tenant import TenantContext
    from agvote.infrastructure.monitoring.governance_metrics import (
        GovernanceMetricsCollector,
    )

logger = get_logger(__name__)

_UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def is_uuid(value: str) -> bool:
    """Check for a canonical RFC 4122 UUID (versions 1 to 5)."""
    return bool(_UUID_PATTERN.match(value))


class BallotService:
    """Service for casting ballots on open motions.

    Example:
        >>> service = BallotService(
        ...     motion_repo=motion_repo,
        ...     meeting_repo=meeting_repo,
        ...     member_repo=member_repo,
        ...     attendance_repo=attendance_repo,
        ...     proxy_repo=proxy_repo,
        ...     ballot_repo=ballot_repo,
        ...     transaction_manager=tx,
        ... )
        >>> ballot = await service.cast_ballot(
        ...     {"motion_id": motion_id, "member_id": member_id, "value": "for"},
        ...     tenant,
        ... )
    """

    def __init__(
        self,
        motion_repo: MotionRepositoryProtocol,
        meeting_repo: MeetingRepositoryProtocol,
        member_repo: MemberRepositoryProtocol,
        attendance_repo: AttendanceRepositoryProtocol,
        proxy_repo: ProxyRepositoryProtocol,
        ballot_repo: BallotRepositoryProtocol,
        transaction_manager: TransactionManagerProtocol,
        broadcaster: GovernanceBroadcasterProtocol | None = None,
        audit_sink: AuditSinkProtocol | None = None,
        metrics: GovernanceMetricsCollector | None = None,
    ) -> None:
        """Initialize the ballot service.

        Args:
            motion_repo: Motion lookups (ballot context).
            meeting_repo: Meeting row lock.
            member_repo: Member lookups.
            attendance_repo: Presence checks.
            proxy_repo: Delegation checks.
            ballot_repo: Ballot storage.
            transaction_manager: Opens the unit of work for the locked write.
            broadcaster: Optional live channel for tally updates.
            audit_sink: Optional audit trail.
            metrics: Optional Prometheus collector.
        """
        self._motion_repo = motion_repo
        self._meeting_repo = meeting_repo
        self._member_repo = member_repo
        self._attendance_repo = attendance_repo
        self._proxy_repo = proxy_repo
        self._ballot_repo = ballot_repo
        self._tx = transaction_manager
        self._broadcaster = broadcaster
        self._audit_sink = audit_sink
        self._metrics = metrics

    async def cast_ballot(
        self,
        data: Mapping[str, Any] | CastBallotRequest,
        tenant: TenantContext,
    ) -> Ballot:
        """Cast (or replace) a member's ballot on an open motion.

        Args:
            data: Request payload (motion_id, member_id, value, and optionally
                is_proxy_vote with proxy_source_member_id).
            tenant: Caller's tenant context.

        Returns:
            The stored ballot.

        Raises:
            InvalidArgumentError: Missing fields, unknown value, malformed
                proxy source.
            MotionNotFoundError: Motion does not resolve under the tenant.
            MemberNotFoundError: Member or proxy holder unknown.
            ConflictError: Meeting not live or validated, motion not open,
                inactive or absent actor, no delegation, or the meeting
                changed status before the write.
        """
        try:
            return await self._cast(data, tenant)
        except GovernanceError as e:
            if self._metrics is not None:
                self._metrics.record_ballot_rejected(e.code)
            raise

    async def _cast(
        self,
        data: Mapping[str, Any] | CastBallotRequest,
        tenant: TenantContext,
    ) -> Ballot:
        # Step 1: Normalize input
        request = CastBallotRequest.from_payload(data)
        if not request.has_required_fields:
            raise InvalidArgumentError(
                "motion_id, member_id et value sont obligatoires",
                code="missing_fields",
            )
        value = BallotValue.parse(request.value)

        log = logger.bind(
            motion_id=request.motion_id,
            member_id=request.member_id,
            is_proxy_vote=request.is_proxy_vote,
        )
        log.debug("Starting ballot cast")

        # Step 2: Load motion + meeting
        context = await self._motion_repo.find_with_ballot_context(request.motion_id)
        if context is None or context.tenant_id != tenant.tenant_id:
            log.warning("Ballot rejected - motion not found")
            raise MotionNotFoundError(request.motion_id)
        meeting = context.meeting
        motion = context.motion
        log = log.bind(meeting_id=meeting.id)

        # Step 3: Meeting and motion state
        if meeting.status is not MeetingStatus.LIVE:
            log.warning(
                "Ballot rejected - meeting not live", status=meeting.status.value
            )
            raise MeetingNotLiveError(meeting.id, meeting.status.value)
        if meeting.is_validated:
            log.warning("Ballot rejected - meeting validated")
            raise MeetingValidatedError(meeting.id)
        if not motion.is_open:
            log.warning("Ballot rejected - motion not open")
            raise MotionNotOpenError(motion.id)

        # Step 4: Member eligibility and weight
        member = await self._member_repo.find_by_id_for_tenant(
            request.member_id, tenant.tenant_id
        )
        if member is None:
            log.warning("Ballot rejected - member unknown")
            raise MemberNotFoundError(request.member_id)
        if not member.is_active:
            log.warning("Ballot rejected - member inactive")
            raise MemberInactiveError(member.id)
        weight = member.effective_weight
        if weight < 0:
            log.warning("Ballot rejected - negative weight", weight=weight)
            raise InvalidVoteWeightError(member.id, weight)

        # Step 5: Presence or delegation
        proxy_source_id: str | None = None
        if request.is_proxy_vote:
            proxy_holder = await self._check_proxy_holder(
                request, meeting.id, tenant, log
            )
            proxy_source_id = proxy_holder.id
        elif not await self._attendance_repo.is_present_direct(
            meeting.id, member.id, tenant.tenant_id
        ):
            log.warning("Ballot rejected - member not present")
            raise MemberNotPresentError(member.id)

        ballot = Ballot(
            tenant_id=tenant.tenant_id,
            meeting_id=meeting.id,
            motion_id=motion.id,
            member_id=member.id,
            value=value,
            weight=weight,
            is_proxy_vote=request.is_proxy_vote,
            proxy_source_member_id=proxy_source_id,
        )

        # Step 6: Locked re-check and write
        async with self._tx.transaction():
            locked = await self._meeting_repo.lock_for_update(
                meeting.id, tenant.tenant_id
            )
            if locked is None or locked.status is not meeting.status:
                actual = locked.status.value if locked is not None else None
                log.warning(
                    "Ballot rejected - meeting changed before write",
                    actual_status=actual,
                )
                raise MeetingUnavailableError(
                    meeting.id, meeting.status.value, actual
                )
            await self._ballot_repo.cast_ballot(ballot)

        log.info("Ballot cast", value=value.value, weight=weight)
        if self._metrics is not None:
            self._metrics.record_ballot_cast(value.value, request.is_proxy_vote)

        # Step 7: Side channels, then canonical read-back
        await self._after_write(ballot, tenant, log)
        stored = await self._ballot_repo.find_by_motion_and_member(
            motion.id, member.id, tenant.tenant_id
        )
        return stored or ballot

    async def _check_proxy_holder(
        self,
        request: CastBallotRequest,
        meeting_id: str,
        tenant: TenantContext,
        log: Any,
    ) -> Member:
        source_id = request.proxy_source_member_id
        if not source_id or not is_uuid(source_id):
            raise InvalidArgumentError(
                "proxy_source_member_id est obligatoire (UUID) pour un vote par "
                "procuration",
                field="proxy_source_member_id",
            )

        holder = await self._member_repo.find_by_id_for_tenant(
            source_id, tenant.tenant_id
        )
        if holder is None:
            log.warning("Proxy ballot rejected - proxy holder unknown")
            raise MemberNotFoundError(source_id, message="Mandataire inconnu")
        if not holder.is_active:
            log.warning("Proxy ballot rejected - proxy holder inactive")
            raise MemberInactiveError(
                source_id, message="Mandataire inactif, vote impossible"
            )
        # Holders attending by proxy themselves cannot act: no chains.
        if not await self._attendance_repo.is_present_direct(
            meeting_id, source_id, tenant.tenant_id
        ):
            log.warning("Proxy ballot rejected - proxy holder not present")
            raise MemberNotPresentError(
                source_id,
                message=(
                    "Mandataire non enregistré comme présent, "
                    "vote par procuration impossible"
                ),
            )
        if not await self._proxy_repo.has_active_proxy(
            meeting_id, request.member_id, source_id
        ):
            log.warning("Proxy ballot rejected - no active delegation")
            raise NoActiveProxyError(meeting_id, request.member_id, source_id)
        return holder

    async def _after_write(
        self, ballot: Ballot, tenant: TenantContext, log: Any
    ) -> None:
        if self._audit_sink is not None:
            audit_sink = self._audit_sink
            await notify_best_effort(
                lambda: audit_sink.append(
                    "ballot_cast",
                    tenant.tenant_id,
                    "motion",
                    ballot.motion_id,
                    {
                        "member_id": ballot.member_id,
                        "value": ballot.value.value,
                        "weight": ballot.weight,
                        "is_proxy_vote": ballot.is_proxy_vote,
                        "proxy_source_member_id": ballot.proxy_source_member_id,
                    },
                    actor_id=tenant.user_id,
                ),
                "ballot_audit",
                log,
            )

        if self._broadcaster is not None:
            broadcaster = self._broadcaster

            async def _broadcast_tally() -> None:
                tally = await self._ballot_repo.tally(
                    ballot.motion_id, tenant.tenant_id
                )
                await broadcaster.vote_cast(
                    ballot.meeting_id,
                    ballot.motion_id,
                    {
                        "total_ballots": tally.total_ballots,
                        "for": {"count": tally.count_for, "weight": tally.weight_for},
                        "against": {
                            "count": tally.count_against,
                            "weight": tally.weight_against,
                        },
                        "abstain": {
                            "count": tally.count_abstain,
                            "weight": tally.weight_abstain,
                        },
                        "nsp": {"count": tally.count_nsp},
                    },
                )

            await notify_best_effort(_broadcast_tally, "vote_cast", log)
