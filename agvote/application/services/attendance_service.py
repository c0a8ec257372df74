"""Attendance tracker.

Records how each member attends a meeting and answers presence queries.
Absence is the absence of a row: an upsert with mode "absent" deletes it.

Presence Semantics:
    is_present: present, remote or proxy (attending directly or represented)
    is_present_direct: present or remote only (may act, including as proxy)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from structlog import get_logger

from agvote.application.services.best_effort import notify_best_effort
from agvote.domain.errors import (
    AttendanceWriteError,
    InvalidArgumentError,
    MeetingArchivedError,
    MeetingNotFoundError,
    MemberNotFoundError,
)
from agvote.domain.models.attendance import (
    Attendance,
    AttendanceDeletion,
    AttendanceMode,
    AttendanceSummary,
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
    from agvote.application.ports.member_repository import MemberRepositoryProtocol
    from agvote.domain.models.tenant import TenantContext

logger = get_logger(__name__)


class AttendanceService:
    """Service for recording and querying meeting attendance."""

    def __init__(
        self,
        attendance_repo: AttendanceRepositoryProtocol,
        meeting_repo: MeetingRepositoryProtocol,
        member_repo: MemberRepositoryProtocol,
        broadcaster: GovernanceBroadcasterProtocol | None = None,
        audit_sink: AuditSinkProtocol | None = None,
    ) -> None:
        """Initialize the attendance service.

        Args:
            attendance_repo: Attendance storage.
            meeting_repo: Meeting lookups.
            member_repo: Member lookups.
            broadcaster: Optional live channel for per-mode statistics.
            audit_sink: Optional audit trail.
        """
        self._attendance_repo = attendance_repo
        self._meeting_repo = meeting_repo
        self._member_repo = member_repo
        self._broadcaster = broadcaster
        self._audit_sink = audit_sink

    async def is_present(
        self, meeting_id: str, member_id: str, tenant: TenantContext
    ) -> bool:
        meeting_id = (meeting_id or "").strip()
        member_id = (member_id or "").strip()
        if not meeting_id or not member_id:
            return False
        return await self._attendance_repo.is_present(
            meeting_id, member_id, tenant.tenant_id
        )

    async def is_present_direct(
        self, meeting_id: str, member_id: str, tenant: TenantContext
    ) -> bool:
        meeting_id = (meeting_id or "").strip()
        member_id = (member_id or "").strip()
        if not meeting_id or not member_id:
            return False
        return await self._attendance_repo.is_present_direct(
            meeting_id, member_id, tenant.tenant_id
        )

    async def list_for_meeting(
        self, meeting_id: str, tenant: TenantContext
    ) -> list[Attendance]:
        meeting_id = (meeting_id or "").strip()
        if not meeting_id:
            raise InvalidArgumentError("meeting_id est obligatoire", field="meeting_id")
        return await self._attendance_repo.list_for_meeting(
            meeting_id, tenant.tenant_id
        )

    async def summary_for_meeting(
        self, meeting_id: str, tenant: TenantContext
    ) -> AttendanceSummary:
        meeting_id = (meeting_id or "").strip()
        if not meeting_id:
            raise InvalidArgumentError("meeting_id est obligatoire", field="meeting_id")
        return await self._attendance_repo.summary_for_meeting(
            meeting_id, tenant.tenant_id
        )

    async def upsert(
        self,
        meeting_id: str,
        member_id: str,
        mode: str | AttendanceMode,
        tenant: TenantContext,
        notes: str | None = None,
    ) -> Attendance | AttendanceDeletion:
        """Record a member's attendance mode, or delete it for "absent".

        Args:
            meeting_id: The meeting.
            member_id: The member.
            mode: present, remote, proxy, excused or absent.
            tenant: Caller's tenant context.
            notes: Optional operator notes.

        Returns:
            The canonical stored row, or a deletion acknowledgement.

        Raises:
            InvalidArgumentError: Empty ids or unknown mode.
            MeetingNotFoundError: Meeting does not resolve under the tenant.
            MeetingArchivedError: Meeting is archived.
            MemberNotFoundError: Member does not resolve under the tenant.
            AttendanceWriteError: Storage returned no row for the write.
        """
        meeting_id = (meeting_id or "").strip()
        member_id = (member_id or "").strip()
        if not meeting_id or not member_id:
            raise InvalidArgumentError("meeting_id et member_id sont obligatoires")
        requested = AttendanceMode.parse_request(mode)

        log = logger.bind(meeting_id=meeting_id, member_id=member_id)

        meeting = await self._meeting_repo.find_by_id_for_tenant(
            meeting_id, tenant.tenant_id
        )
        if meeting is None:
            log.warning("Attendance rejected - meeting not found")
            raise MeetingNotFoundError(meeting_id)
        if meeting.is_archived:
            log.warning("Attendance rejected - meeting archived")
            raise MeetingArchivedError(meeting_id)

        member = await self._member_repo.find_by_id_for_tenant(
            member_id, meeting.tenant_id
        )
        if member is None:
            log.warning("Attendance rejected - member outside tenant")
            raise MemberNotFoundError(member_id, message="Membre hors tenant")

        if requested is None:
            await self._attendance_repo.delete_by_meeting_and_member(
                meeting_id, member_id, meeting.tenant_id
            )
            log.info("Attendance removed")
            await self._after_write(meeting_id, member_id, "absent", tenant, log)
            return AttendanceDeletion(meeting_id=meeting_id, member_id=member_id)

        candidate = Attendance(
            meeting_id=meeting_id,
            member_id=member_id,
            tenant_id=meeting.tenant_id,
            mode=requested,
            effective_power=member.effective_weight,
            notes=notes,
        )
        written = await self._attendance_repo.upsert(candidate)
        if written is None:
            log.error("Attendance upsert returned no row")
            raise AttendanceWriteError(meeting_id, member_id)

        stored = await self._attendance_repo.find(
            meeting_id, member_id, meeting.tenant_id
        )
        log.info(
            "Attendance recorded",
            mode=requested.value,
            effective_power=candidate.effective_power,
        )
        await self._after_write(meeting_id, member_id, requested.value, tenant, log)
        return stored or written

    async def _after_write(
        self,
        meeting_id: str,
        member_id: str,
        mode: str,
        tenant: TenantContext,
        log: Any,
    ) -> None:
        if self._broadcaster is not None:
            broadcaster = self._broadcaster

            async def _broadcast_stats() -> None:
                stats = await self._attendance_repo.get_stats_by_mode(
                    meeting_id, tenant.tenant_id
                )
                await broadcaster.attendance_updated(
                    meeting_id, {m.value: count for m, count in stats.items()}
                )

            await notify_best_effort(_broadcast_stats, "attendance_updated", log)

        if self._audit_sink is not None:
            audit_sink = self._audit_sink
            await notify_best_effort(
                lambda: audit_sink.append(
                    "attendance.updated",
                    tenant.tenant_id,
                    "meeting",
                    meeting_id,
                    {"member_id": member_id, "mode": mode},
                    actor_id=tenant.user_id,
                ),
                "attendance_audit",
                log,
            )
