"""Meeting-level quorum status.

Answers "does the current attendance roll satisfy the meeting's quorum
policy?" for the lifecycle controller and operators. The numerator counts
attendance rows whose mode the policy admits (present, plus remote and
proxy according to its flags); the denominator is the tenant's active
membership, by head count or by weight.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from structlog import get_logger

from agvote.domain.errors import InvalidArgumentError, MeetingNotFoundError
from agvote.domain.models.policy import QuorumDenominator
from agvote.domain.models.quorum import QuorumStatus
from agvote.domain.services.policy_evaluator import format_number, format_percent

if TYPE_CHECKING:
    from agvote.application.ports.attendance_repository import (
        AttendanceRepositoryProtocol,
    )
    from agvote.application.ports.meeting_repository import (
        MeetingRepositoryProtocol,
    )
    from agvote.application.ports.member_repository import MemberRepositoryProtocol
    from agvote.application.ports.policy_repository import PolicyRepositoryProtocol
    from agvote.domain.models.tenant import TenantContext

logger = get_logger(__name__)

NO_POLICY_JUSTIFICATION = "Aucune politique de quorum appliquée."


class QuorumService:
    """Computes the quorum status of a meeting from its attendance roll."""

    def __init__(
        self,
        meeting_repo: MeetingRepositoryProtocol,
        attendance_repo: AttendanceRepositoryProtocol,
        member_repo: MemberRepositoryProtocol,
        policy_repo: PolicyRepositoryProtocol,
    ) -> None:
        self._meeting_repo = meeting_repo
        self._attendance_repo = attendance_repo
        self._member_repo = member_repo
        self._policy_repo = policy_repo

    async def compute_for_meeting(
        self, meeting_id: str, tenant: TenantContext
    ) -> QuorumStatus:
        """Compute the quorum status of a meeting.

        Args:
            meeting_id: The meeting.
            tenant: Caller's tenant context.

        Returns:
            QuorumStatus; applied=False when the meeting has no quorum policy.

        Raises:
            InvalidArgumentError: Empty meeting id.
            MeetingNotFoundError: Meeting does not resolve under the tenant.
        """
        meeting_id = (meeting_id or "").strip()
        if not meeting_id:
            raise InvalidArgumentError("meeting_id obligatoire", field="meeting_id")

        meeting = await self._meeting_repo.find_by_id_for_tenant(
            meeting_id, tenant.tenant_id
        )
        if meeting is None:
            raise MeetingNotFoundError(meeting_id)

        if not meeting.quorum_policy_id:
            return QuorumStatus(
                applied=False, met=None, justification=NO_POLICY_JUSTIFICATION
            )
        policy = await self._policy_repo.find_quorum_policy(meeting.quorum_policy_id)
        if policy is None:
            logger.warning(
                "Quorum policy not found, treating meeting as unconstrained",
                meeting_id=meeting_id,
                policy_id=meeting.quorum_policy_id,
            )
            return QuorumStatus(
                applied=False, met=None, justification=NO_POLICY_JUSTIFICATION
            )

        modes = policy.attendance_modes()
        basis, threshold = policy.for_convocation(meeting.convocation_no)
        if basis is QuorumDenominator.ELIGIBLE_MEMBERS:
            numerator = float(
                await self._attendance_repo.count_present_members(
                    meeting_id, meeting.tenant_id, modes
                )
            )
            denominator = float(await self._member_repo.count_active(meeting.tenant_id))
            unit = "membres"
        else:
            numerator = await self._attendance_repo.sum_present_weight(
                meeting_id, meeting.tenant_id, modes
            )
            denominator = await self._member_repo.sum_active_weight(meeting.tenant_id)
            unit = "voix"

        ratio = numerator / denominator if denominator > 0 else 0.0
        met = denominator > 0 and ratio >= threshold
        verdict = "Quorum atteint" if met else "Quorum non atteint"
        comparator = ">=" if met else "<"
        justification = (
            f"{verdict} : {format_number(numerator)} / {format_number(denominator)} "
            f"{unit} ({format_percent(ratio)} {comparator} {format_percent(threshold)})"
        )

        logger.debug(
            "Meeting quorum computed",
            meeting_id=meeting_id,
            met=met,
            ratio=ratio,
            threshold=threshold,
        )
        return QuorumStatus(
            applied=True,
            met=met,
            justification=justification,
            ratio=ratio,
            threshold=threshold,
            numerator=numerator,
            denominator=denominator,
            modes=modes,
        )
