"""Unit tests for AttendanceService.

Tests:
- Presence queries short-circuit on blank ids
- Listing/summary require a meeting id
- upsert validation order (ids, mode, meeting, archive, member)
- "absent" deletes the row
- Effective power snapshot and canonical read-back
- Best-effort broadcast of per-mode statistics
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from agvote.application.services.attendance_service import AttendanceService
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
from agvote.domain.models.meeting import Meeting, MeetingStatus
from agvote.domain.models.member import Member
from agvote.domain.models.tenant import TenantContext
from tests.helpers.factories import make_meeting, make_member


@pytest.fixture
def meeting() -> Meeting:
    return make_meeting(status=MeetingStatus.SCHEDULED)


@pytest.fixture
def member() -> Member:
    return make_member(voting_power=2.0)


@pytest.fixture
def mock_attendance_repo() -> AsyncMock:
    mock = AsyncMock()
    mock.is_present.return_value = True
    mock.is_present_direct.return_value = True
    mock.upsert.side_effect = lambda attendance: attendance
    mock.find.return_value = None
    mock.delete_by_meeting_and_member.return_value = True
    mock.get_stats_by_mode.return_value = {
        AttendanceMode.PRESENT: 1,
        AttendanceMode.REMOTE: 0,
        AttendanceMode.PROXY: 0,
        AttendanceMode.EXCUSED: 0,
    }
    return mock


@pytest.fixture
def mock_meeting_repo(meeting: Meeting) -> AsyncMock:
    mock = AsyncMock()
    mock.find_by_id_for_tenant.return_value = meeting
    return mock


@pytest.fixture
def mock_member_repo(member: Member) -> AsyncMock:
    mock = AsyncMock()
    mock.find_by_id_for_tenant.return_value = member
    return mock


@pytest.fixture
def mock_broadcaster() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def mock_audit_sink() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(
    mock_attendance_repo: AsyncMock,
    mock_meeting_repo: AsyncMock,
    mock_member_repo: AsyncMock,
    mock_broadcaster: AsyncMock,
    mock_audit_sink: AsyncMock,
) -> AttendanceService:
    return AttendanceService(
        attendance_repo=mock_attendance_repo,
        meeting_repo=mock_meeting_repo,
        member_repo=mock_member_repo,
        broadcaster=mock_broadcaster,
        audit_sink=mock_audit_sink,
    )


class TestPresenceQueries:
    """Tests for is_present and is_present_direct."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("meeting_id", "member_id"), [("", "m"), ("x", "  ")])
    async def test_blank_ids_are_not_present_without_storage(
        self,
        service: AttendanceService,
        tenant: TenantContext,
        mock_attendance_repo: AsyncMock,
        meeting_id: str,
        member_id: str,
    ) -> None:
        assert not await service.is_present(meeting_id, member_id, tenant)
        assert not await service.is_present_direct(meeting_id, member_id, tenant)
        mock_attendance_repo.is_present.assert_not_called()
        mock_attendance_repo.is_present_direct.assert_not_called()

    @pytest.mark.asyncio
    async def test_delegates_with_trimmed_ids(
        self,
        service: AttendanceService,
        tenant: TenantContext,
        mock_attendance_repo: AsyncMock,
    ) -> None:
        assert await service.is_present(" meeting ", "member ", tenant)
        mock_attendance_repo.is_present.assert_awaited_once_with(
            "meeting", "member", tenant.tenant_id
        )


class TestProjections:
    """Tests for list_for_meeting and summary_for_meeting."""

    @pytest.mark.asyncio
    async def test_list_requires_meeting_id(
        self, service: AttendanceService, tenant: TenantContext
    ) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            await service.list_for_meeting("  ", tenant)

        assert exc_info.value.message == "meeting_id est obligatoire"

    @pytest.mark.asyncio
    async def test_summary_requires_meeting_id(
        self, service: AttendanceService, tenant: TenantContext
    ) -> None:
        with pytest.raises(InvalidArgumentError):
            await service.summary_for_meeting("", tenant)

    @pytest.mark.asyncio
    async def test_summary_reads_through(
        self,
        service: AttendanceService,
        tenant: TenantContext,
        mock_attendance_repo: AsyncMock,
    ) -> None:
        summary = AttendanceSummary(present_count=3, present_weight=4.5)
        mock_attendance_repo.summary_for_meeting.return_value = summary

        assert await service.summary_for_meeting("m1", tenant) is summary


class TestUpsertValidation:
    """Tests for upsert preconditions."""

    @pytest.mark.asyncio
    async def test_ids_are_required(
        self, service: AttendanceService, tenant: TenantContext
    ) -> None:
        with pytest.raises(InvalidArgumentError):
            await service.upsert("", "member", "present", tenant)

    @pytest.mark.asyncio
    async def test_unknown_mode(
        self,
        service: AttendanceService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
    ) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            await service.upsert("m1", "x1", "late", tenant)

        assert exc_info.value.code == "invalid_mode"
        mock_meeting_repo.find_by_id_for_tenant.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_meeting(
        self,
        service: AttendanceService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
    ) -> None:
        mock_meeting_repo.find_by_id_for_tenant.return_value = None

        with pytest.raises(MeetingNotFoundError):
            await service.upsert("m1", "x1", "present", tenant)

    @pytest.mark.asyncio
    async def test_archived_meeting(
        self,
        service: AttendanceService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
        mock_attendance_repo: AsyncMock,
    ) -> None:
        mock_meeting_repo.find_by_id_for_tenant.return_value = make_meeting(
            status=MeetingStatus.ARCHIVED
        )

        with pytest.raises(MeetingArchivedError) as exc_info:
            await service.upsert("m1", "x1", "present", tenant)

        assert "archivée" in exc_info.value.message
        mock_attendance_repo.upsert.assert_not_called()

    @pytest.mark.asyncio
    async def test_member_outside_tenant(
        self,
        service: AttendanceService,
        tenant: TenantContext,
        meeting: Meeting,
        mock_member_repo: AsyncMock,
    ) -> None:
        mock_member_repo.find_by_id_for_tenant.return_value = None

        with pytest.raises(MemberNotFoundError) as exc_info:
            await service.upsert(meeting.id, "x1", "present", tenant)

        assert "hors tenant" in exc_info.value.message


class TestUpsert:
    """Tests for successful upserts and deletions."""

    @pytest.mark.asyncio
    async def test_absent_deletes_the_row(
        self,
        service: AttendanceService,
        tenant: TenantContext,
        meeting: Meeting,
        member: Member,
        mock_attendance_repo: AsyncMock,
    ) -> None:
        result = await service.upsert(meeting.id, member.id, "absent", tenant)

        assert result == AttendanceDeletion(meeting_id=meeting.id, member_id=member.id)
        assert result.deleted
        mock_attendance_repo.delete_by_meeting_and_member.assert_awaited_once_with(
            meeting.id, member.id, meeting.tenant_id
        )
        mock_attendance_repo.upsert.assert_not_called()

    @pytest.mark.asyncio
    async def test_snapshots_member_power(
        self,
        service: AttendanceService,
        tenant: TenantContext,
        meeting: Meeting,
        member: Member,
    ) -> None:
        result = await service.upsert(
            meeting.id, member.id, "remote", tenant, notes="visio"
        )

        assert isinstance(result, Attendance)
        assert result.mode is AttendanceMode.REMOTE
        assert result.effective_power == 2.0
        assert result.notes == "visio"

    @pytest.mark.asyncio
    async def test_unset_power_defaults_to_one(
        self,
        service: AttendanceService,
        tenant: TenantContext,
        meeting: Meeting,
        mock_member_repo: AsyncMock,
    ) -> None:
        mock_member_repo.find_by_id_for_tenant.return_value = make_member(
            voting_power=None
        )

        result = await service.upsert(meeting.id, "x1", "present", tenant)

        assert isinstance(result, Attendance)
        assert result.effective_power == 1.0

    @pytest.mark.asyncio
    async def test_returns_canonical_row(
        self,
        service: AttendanceService,
        tenant: TenantContext,
        meeting: Meeting,
        member: Member,
        mock_attendance_repo: AsyncMock,
    ) -> None:
        canonical = Attendance(
            meeting_id=meeting.id,
            member_id=member.id,
            tenant_id=meeting.tenant_id,
            mode=AttendanceMode.PRESENT,
            effective_power=2.0,
        )
        mock_attendance_repo.find.return_value = canonical

        result = await service.upsert(meeting.id, member.id, "present", tenant)

        assert result is canonical

    @pytest.mark.asyncio
    async def test_empty_write_is_an_internal_error(
        self,
        service: AttendanceService,
        tenant: TenantContext,
        meeting: Meeting,
        member: Member,
        mock_attendance_repo: AsyncMock,
    ) -> None:
        mock_attendance_repo.upsert.side_effect = None
        mock_attendance_repo.upsert.return_value = None

        with pytest.raises(AttendanceWriteError):
            await service.upsert(meeting.id, member.id, "present", tenant)


class TestSideChannels:
    """Tests for per-mode statistics broadcast and audit."""

    @pytest.mark.asyncio
    async def test_broadcasts_stats_by_mode(
        self,
        service: AttendanceService,
        tenant: TenantContext,
        meeting: Meeting,
        member: Member,
        mock_broadcaster: AsyncMock,
        mock_audit_sink: AsyncMock,
    ) -> None:
        await service.upsert(meeting.id, member.id, "present", tenant)

        mock_broadcaster.attendance_updated.assert_awaited_once_with(
            meeting.id, {"present": 1, "remote": 0, "proxy": 0, "excused": 0}
        )
        assert mock_audit_sink.append.await_args.args[0] == "attendance.updated"

    @pytest.mark.asyncio
    async def test_broadcast_failure_is_swallowed(
        self,
        service: AttendanceService,
        tenant: TenantContext,
        meeting: Meeting,
        member: Member,
        mock_broadcaster: AsyncMock,
    ) -> None:
        mock_broadcaster.attendance_updated.side_effect = ConnectionError("down")

        result = await service.upsert(meeting.id, member.id, "present", tenant)

        assert isinstance(result, Attendance)
