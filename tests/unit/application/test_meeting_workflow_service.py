"""Unit tests for MeetingWorkflowService.

Tests:
- Transition pre-checks (blocking issues and warnings) per status pair
- Archived meetings report a single immutable issue
- Readiness map over reachable statuses
- apply_transition: reachability, admin-only force, blocked transitions,
  lifecycle timestamps, side channels
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from agvote.application.services.meeting_workflow_service import (
    MeetingWorkflowService,
)
from agvote.domain.errors import (
    AlreadyInStatusError,
    ArchivedMeetingImmutableError,
    InvalidArgumentError,
    InvalidTransitionError,
    MeetingNotFoundError,
    PermissionDeniedError,
    TransitionBlockedError,
)
from agvote.domain.models.meeting import Meeting, MeetingStatus
from agvote.domain.models.quorum import QuorumStatus
from agvote.domain.models.tenant import TenantContext
from agvote.infrastructure.stubs.transaction_manager_stub import (
    TransactionManagerStub,
)
from tests.helpers.factories import make_meeting


def _codes(issues: tuple) -> list[str]:
    return [issue.code for issue in issues]


@pytest.fixture
def mock_meeting_repo() -> AsyncMock:
    mock = AsyncMock()
    mock.update_status.side_effect = (
        lambda meeting_id, tenant_id, status, validated_at=None, archived_at=None: (
            make_meeting(
                meeting_id,
                status=status,
                validated_at=validated_at,
                archived_at=archived_at,
            )
        )
    )
    return mock


@pytest.fixture
def mock_motion_repo() -> AsyncMock:
    mock = AsyncMock()
    mock.count_for_meeting.return_value = 2
    mock.count_open_motions.return_value = 0
    mock.count_bad_closed_motions.return_value = 0
    mock.count_closed_motions.return_value = 2
    mock.count_consolidated_motions.return_value = 2
    return mock


@pytest.fixture
def mock_attendance_repo() -> AsyncMock:
    mock = AsyncMock()
    mock.count_present_or_remote.return_value = 5
    return mock


@pytest.fixture
def mock_role_repo() -> AsyncMock:
    mock = AsyncMock()
    mock.find_president.return_value = "president-1"
    return mock


@pytest.fixture
def mock_quorum_service() -> AsyncMock:
    mock = AsyncMock()
    mock.compute_for_meeting.return_value = QuorumStatus(
        applied=True, met=True, justification="Quorum atteint"
    )
    return mock


@pytest.fixture
def mock_broadcaster() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def mock_audit_sink() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(
    mock_meeting_repo: AsyncMock,
    mock_motion_repo: AsyncMock,
    mock_attendance_repo: AsyncMock,
    mock_role_repo: AsyncMock,
    mock_quorum_service: AsyncMock,
    mock_broadcaster: AsyncMock,
    mock_audit_sink: AsyncMock,
) -> MeetingWorkflowService:
    return MeetingWorkflowService(
        meeting_repo=mock_meeting_repo,
        motion_repo=mock_motion_repo,
        attendance_repo=mock_attendance_repo,
        meeting_role_repo=mock_role_repo,
        transaction_manager=TransactionManagerStub(),
        quorum_service=mock_quorum_service,
        broadcaster=mock_broadcaster,
        audit_sink=mock_audit_sink,
    )


def _store(mock_meeting_repo: AsyncMock, meeting: Meeting) -> None:
    mock_meeting_repo.find_by_id_for_tenant.return_value = meeting
    mock_meeting_repo.lock_for_update.return_value = meeting


class TestTransitionChecks:
    """Tests for issues_before_transition."""

    @pytest.mark.asyncio
    async def test_draft_requires_motions(
        self,
        service: MeetingWorkflowService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
        mock_motion_repo: AsyncMock,
    ) -> None:
        _store(mock_meeting_repo, make_meeting(status=MeetingStatus.DRAFT))
        mock_motion_repo.count_for_meeting.return_value = 0

        check = await service.issues_before_transition("m1", tenant, "scheduled")

        assert not check.can_proceed
        assert _codes(check.issues) == ["no_motions"]

    @pytest.mark.asyncio
    async def test_freeze_requires_attendance(
        self,
        service: MeetingWorkflowService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
        mock_attendance_repo: AsyncMock,
        mock_role_repo: AsyncMock,
    ) -> None:
        _store(mock_meeting_repo, make_meeting(status=MeetingStatus.SCHEDULED))
        mock_attendance_repo.count_present_or_remote.return_value = 0
        mock_role_repo.find_president.return_value = None

        check = await service.issues_before_transition("m1", tenant, "frozen")

        assert _codes(check.issues) == ["no_attendance"]
        assert check.warnings == ()

    @pytest.mark.asyncio
    async def test_freeze_warns_without_president(
        self,
        service: MeetingWorkflowService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
        mock_role_repo: AsyncMock,
    ) -> None:
        _store(mock_meeting_repo, make_meeting(status=MeetingStatus.SCHEDULED))
        mock_role_repo.find_president.return_value = None

        check = await service.issues_before_transition("m1", tenant, "frozen")

        assert check.can_proceed
        assert _codes(check.warnings) == ["no_president"]

    @pytest.mark.asyncio
    async def test_open_quorum_failure_only_warns(
        self,
        service: MeetingWorkflowService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
        mock_quorum_service: AsyncMock,
    ) -> None:
        _store(mock_meeting_repo, make_meeting(status=MeetingStatus.FROZEN))
        mock_quorum_service.compute_for_meeting.return_value = QuorumStatus(
            applied=True, met=False, justification="Quorum non atteint"
        )

        check = await service.issues_before_transition("m1", tenant, "live")

        assert check.can_proceed
        assert _codes(check.warnings) == ["quorum_not_met"]

    @pytest.mark.asyncio
    async def test_quorum_computation_error_does_not_warn(
        self,
        service: MeetingWorkflowService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
        mock_quorum_service: AsyncMock,
    ) -> None:
        _store(mock_meeting_repo, make_meeting(status=MeetingStatus.FROZEN))
        mock_quorum_service.compute_for_meeting.side_effect = RuntimeError("db")

        check = await service.issues_before_transition("m1", tenant, "live")

        assert check.can_proceed
        assert check.warnings == ()

    @pytest.mark.asyncio
    async def test_pause_blocked_by_open_motion(
        self,
        service: MeetingWorkflowService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
        mock_motion_repo: AsyncMock,
    ) -> None:
        _store(mock_meeting_repo, make_meeting(status=MeetingStatus.LIVE))
        mock_motion_repo.count_open_motions.return_value = 1

        check = await service.issues_before_transition("m1", tenant, "paused")

        assert _codes(check.issues) == ["motion_open"]
        assert "1 vote(s) en cours" in check.issues[0].message

    @pytest.mark.asyncio
    @pytest.mark.parametrize("from_status", ["live", "paused"])
    async def test_close_blocked_by_open_motion(
        self,
        service: MeetingWorkflowService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
        mock_motion_repo: AsyncMock,
        from_status: str,
    ) -> None:
        _store(mock_meeting_repo, make_meeting(status=MeetingStatus(from_status)))
        mock_motion_repo.count_open_motions.return_value = 2

        check = await service.issues_before_transition("m1", tenant, "closed")

        assert check.issues[0].message == "2 résolution(s) encore ouverte(s)"

    @pytest.mark.asyncio
    async def test_validate_blocked_by_unusable_results(
        self,
        service: MeetingWorkflowService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
        mock_motion_repo: AsyncMock,
    ) -> None:
        _store(mock_meeting_repo, make_meeting(status=MeetingStatus.CLOSED))
        mock_motion_repo.count_bad_closed_motions.return_value = 1
        mock_motion_repo.count_consolidated_motions.return_value = 0

        check = await service.issues_before_transition("m1", tenant, "validated")

        assert _codes(check.issues) == ["bad_results"]
        assert check.warnings == ()

    @pytest.mark.asyncio
    async def test_validate_warns_when_not_consolidated(
        self,
        service: MeetingWorkflowService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
        mock_motion_repo: AsyncMock,
    ) -> None:
        _store(mock_meeting_repo, make_meeting(status=MeetingStatus.CLOSED))
        mock_motion_repo.count_consolidated_motions.return_value = 1

        check = await service.issues_before_transition("m1", tenant, "validated")

        assert check.can_proceed
        assert _codes(check.warnings) == ["not_consolidated"]

    @pytest.mark.asyncio
    async def test_archived_reports_single_issue(
        self,
        service: MeetingWorkflowService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
        mock_motion_repo: AsyncMock,
    ) -> None:
        _store(mock_meeting_repo, make_meeting(status=MeetingStatus.ARCHIVED))

        check = await service.issues_before_transition("m1", tenant, "draft")

        assert _codes(check.issues) == ["archived_immutable"]
        mock_motion_repo.count_for_meeting.assert_not_called()

    @pytest.mark.asyncio
    async def test_from_status_override(
        self,
        service: MeetingWorkflowService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
        mock_motion_repo: AsyncMock,
    ) -> None:
        _store(mock_meeting_repo, make_meeting(status=MeetingStatus.DRAFT))
        mock_motion_repo.count_open_motions.return_value = 3

        check = await service.issues_before_transition(
            "m1", tenant, "closed", from_status_override="live"
        )

        assert _codes(check.issues) == ["motion_open"]

    @pytest.mark.asyncio
    async def test_unknown_status(
        self, service: MeetingWorkflowService, tenant: TenantContext
    ) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            await service.issues_before_transition("m1", tenant, "opened")

        assert exc_info.value.code == "invalid_status"

    @pytest.mark.asyncio
    async def test_unknown_meeting(
        self,
        service: MeetingWorkflowService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
    ) -> None:
        mock_meeting_repo.find_by_id_for_tenant.return_value = None

        with pytest.raises(MeetingNotFoundError):
            await service.issues_before_transition("m1", tenant, "scheduled")


class TestHelpers:
    """Tests for the individual predicates."""

    @pytest.mark.asyncio
    async def test_has_president_without_tenant(
        self, service: MeetingWorkflowService, mock_role_repo: AsyncMock
    ) -> None:
        assert not await service.has_president("m1", TenantContext(" "))
        mock_role_repo.find_president.assert_not_called()

    @pytest.mark.asyncio
    async def test_quorum_met_without_policy(
        self,
        service: MeetingWorkflowService,
        tenant: TenantContext,
        mock_quorum_service: AsyncMock,
    ) -> None:
        mock_quorum_service.compute_for_meeting.return_value = QuorumStatus(
            applied=False, met=None, justification=""
        )

        assert await service.quorum_met("m1", tenant)

    @pytest.mark.asyncio
    async def test_all_motions_closed(
        self,
        service: MeetingWorkflowService,
        tenant: TenantContext,
        mock_motion_repo: AsyncMock,
    ) -> None:
        assert await service.all_motions_closed("m1", tenant)
        mock_motion_repo.count_open_motions.return_value = 1
        assert not await service.all_motions_closed("m1", tenant)


class TestReadiness:
    """Tests for get_transition_readiness."""

    @pytest.mark.asyncio
    async def test_reports_each_reachable_status(
        self,
        service: MeetingWorkflowService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
        mock_motion_repo: AsyncMock,
    ) -> None:
        _store(mock_meeting_repo, make_meeting(status=MeetingStatus.LIVE))
        mock_motion_repo.count_open_motions.return_value = 1

        readiness = await service.get_transition_readiness("m1", tenant)

        assert readiness.current_status is MeetingStatus.LIVE
        assert list(readiness.transitions) == [
            MeetingStatus.PAUSED,
            MeetingStatus.CLOSED,
        ]
        assert not readiness.transitions[MeetingStatus.PAUSED].can_proceed
        assert readiness.to_dict()["transitions"]["closed"]["can_proceed"] is False

    @pytest.mark.asyncio
    async def test_archived_has_no_transitions(
        self,
        service: MeetingWorkflowService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
    ) -> None:
        _store(mock_meeting_repo, make_meeting(status=MeetingStatus.ARCHIVED))

        readiness = await service.get_transition_readiness("m1", tenant)

        assert readiness.transitions == {}


class TestApplyTransition:
    """Tests for apply_transition."""

    @pytest.mark.asyncio
    async def test_applies_transition(
        self,
        service: MeetingWorkflowService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
        mock_broadcaster: AsyncMock,
        mock_audit_sink: AsyncMock,
    ) -> None:
        meeting = make_meeting(status=MeetingStatus.DRAFT)
        _store(mock_meeting_repo, meeting)

        outcome = await service.apply_transition(meeting.id, tenant, "scheduled")

        assert outcome.meeting.status is MeetingStatus.SCHEDULED
        assert outcome.from_status is MeetingStatus.DRAFT
        assert not outcome.forced
        mock_broadcaster.meeting_status_changed.assert_awaited_once_with(
            meeting.id, tenant.tenant_id, "scheduled", "draft"
        )
        event_type, *_rest = mock_audit_sink.append.await_args.args
        assert event_type == "meeting.transition"

    @pytest.mark.asyncio
    async def test_already_in_status(
        self,
        service: MeetingWorkflowService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
    ) -> None:
        _store(mock_meeting_repo, make_meeting(status=MeetingStatus.LIVE))

        with pytest.raises(AlreadyInStatusError):
            await service.apply_transition("m1", tenant, "live")

    @pytest.mark.asyncio
    async def test_archived_is_immutable(
        self,
        service: MeetingWorkflowService,
        admin_tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
    ) -> None:
        _store(mock_meeting_repo, make_meeting(status=MeetingStatus.ARCHIVED))

        with pytest.raises(ArchivedMeetingImmutableError):
            await service.apply_transition("m1", admin_tenant, "draft", force=True)

    @pytest.mark.asyncio
    async def test_archived_to_archived_is_immutable(
        self,
        service: MeetingWorkflowService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
    ) -> None:
        _store(mock_meeting_repo, make_meeting(status=MeetingStatus.ARCHIVED))

        with pytest.raises(ArchivedMeetingImmutableError):
            await service.apply_transition("m1", tenant, "archived")

    @pytest.mark.asyncio
    async def test_unreachable_status(
        self,
        service: MeetingWorkflowService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
    ) -> None:
        _store(mock_meeting_repo, make_meeting(status=MeetingStatus.DRAFT))

        with pytest.raises(InvalidTransitionError) as exc_info:
            await service.apply_transition("m1", tenant, "live")

        assert exc_info.value.message == "Transition draft → live non autorisée."

    @pytest.mark.asyncio
    async def test_blocked_transition(
        self,
        service: MeetingWorkflowService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
        mock_motion_repo: AsyncMock,
    ) -> None:
        _store(mock_meeting_repo, make_meeting(status=MeetingStatus.DRAFT))
        mock_motion_repo.count_for_meeting.return_value = 0

        with pytest.raises(TransitionBlockedError) as exc_info:
            await service.apply_transition("m1", tenant, "scheduled")

        assert exc_info.value.issues[0]["code"] == "no_motions"
        assert exc_info.value.to_problem_dict()["issues"] == exc_info.value.issues
        mock_meeting_repo.update_status.assert_not_called()

    @pytest.mark.asyncio
    async def test_force_requires_admin(
        self,
        service: MeetingWorkflowService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
    ) -> None:
        _store(mock_meeting_repo, make_meeting(status=MeetingStatus.DRAFT))

        with pytest.raises(PermissionDeniedError):
            await service.apply_transition("m1", tenant, "scheduled", force=True)

    @pytest.mark.asyncio
    async def test_admin_force_overrides_issues(
        self,
        service: MeetingWorkflowService,
        admin_tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
        mock_motion_repo: AsyncMock,
        mock_audit_sink: AsyncMock,
    ) -> None:
        _store(mock_meeting_repo, make_meeting(status=MeetingStatus.DRAFT))
        mock_motion_repo.count_for_meeting.return_value = 0

        outcome = await service.apply_transition(
            "m1", admin_tenant, "scheduled", force=True
        )

        assert outcome.forced
        payload = mock_audit_sink.append.await_args.args[4]
        assert payload["forced"] is True

    @pytest.mark.asyncio
    async def test_status_changed_under_lock(
        self,
        service: MeetingWorkflowService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
    ) -> None:
        meeting = make_meeting(status=MeetingStatus.LIVE)
        mock_meeting_repo.find_by_id_for_tenant.return_value = meeting
        mock_meeting_repo.lock_for_update.return_value = replace(
            meeting, status=MeetingStatus.PAUSED
        )

        with pytest.raises(AlreadyInStatusError):
            await service.apply_transition(meeting.id, tenant, "paused")

        mock_meeting_repo.update_status.assert_not_called()

    @pytest.mark.asyncio
    async def test_validation_stamps_validated_at(
        self,
        service: MeetingWorkflowService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
    ) -> None:
        _store(mock_meeting_repo, make_meeting(status=MeetingStatus.CLOSED))

        outcome = await service.apply_transition("m1", tenant, "validated")

        assert outcome.meeting.validated_at is not None
        assert outcome.meeting.archived_at is None

    @pytest.mark.asyncio
    async def test_validated_at_is_set_once(
        self,
        service: MeetingWorkflowService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
    ) -> None:
        first = datetime(2026, 1, 1, tzinfo=timezone.utc)
        _store(
            mock_meeting_repo,
            make_meeting(status=MeetingStatus.CLOSED, validated_at=first),
        )

        await service.apply_transition("m1", tenant, "validated")

        kwargs = mock_meeting_repo.update_status.await_args.kwargs
        assert kwargs["validated_at"] is None

    @pytest.mark.asyncio
    async def test_archive_stamps_archived_at(
        self,
        service: MeetingWorkflowService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
    ) -> None:
        _store(mock_meeting_repo, make_meeting(status=MeetingStatus.VALIDATED))

        outcome = await service.apply_transition("m1", tenant, "archived")

        assert outcome.meeting.archived_at is not None

    @pytest.mark.asyncio
    async def test_side_channel_failure_is_swallowed(
        self,
        service: MeetingWorkflowService,
        tenant: TenantContext,
        mock_meeting_repo: AsyncMock,
        mock_broadcaster: AsyncMock,
        mock_audit_sink: AsyncMock,
    ) -> None:
        _store(mock_meeting_repo, make_meeting(status=MeetingStatus.LIVE))
        mock_broadcaster.meeting_status_changed.side_effect = OSError("socket")
        mock_audit_sink.append.side_effect = RuntimeError("audit")

        outcome = await service.apply_transition("m1", tenant, "paused")

        assert outcome.meeting.status is MeetingStatus.PAUSED
