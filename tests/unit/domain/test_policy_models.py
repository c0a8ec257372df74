"""Unit tests for quorum/vote policies, motions and the tenant context."""

from __future__ import annotations

from agvote.domain.models.attendance import AttendanceMode
from agvote.domain.models.meeting import Meeting
from agvote.domain.models.motion import Motion, MotionContext
from agvote.domain.models.policy import (
    DEFAULT_VOTE_POLICY,
    MajorityBase,
    QuorumDenominator,
    QuorumPolicy,
    VotePolicy,
)
from agvote.domain.models.tenant import TenantContext


class TestQuorumPolicy:
    """Tests for QuorumPolicy."""

    def test_first_call_uses_primary_rule(self) -> None:
        policy = QuorumPolicy(
            id="q",
            denominator=QuorumDenominator.ELIGIBLE_MEMBERS,
            threshold=0.5,
            call2_denominator=QuorumDenominator.PRESENT,
            call2_threshold=0.25,
        )
        assert policy.for_convocation(1) == (QuorumDenominator.ELIGIBLE_MEMBERS, 0.5)

    def test_second_call_uses_second_rule(self) -> None:
        policy = QuorumPolicy(
            id="q",
            denominator=QuorumDenominator.ELIGIBLE_MEMBERS,
            threshold=0.5,
            call2_denominator=QuorumDenominator.PRESENT,
            call2_threshold=0.25,
        )
        assert policy.for_convocation(2) == (QuorumDenominator.PRESENT, 0.25)

    def test_second_call_defaults_to_primary_denominator(self) -> None:
        policy = QuorumPolicy(
            id="q",
            denominator=QuorumDenominator.ELIGIBLE_MEMBERS,
            threshold=0.5,
            call2_threshold=0.2,
        )
        assert policy.for_convocation(3) == (QuorumDenominator.ELIGIBLE_MEMBERS, 0.2)

    def test_second_call_without_threshold_keeps_primary(self) -> None:
        policy = QuorumPolicy(
            id="q", denominator=QuorumDenominator.PRESENT, threshold=0.5
        )
        assert policy.for_convocation(2) == (QuorumDenominator.PRESENT, 0.5)

    def test_attendance_modes_follow_flags(self) -> None:
        full = QuorumPolicy(id="q", denominator=QuorumDenominator.PRESENT, threshold=0)
        assert full.attendance_modes() == (
            AttendanceMode.PRESENT,
            AttendanceMode.REMOTE,
            AttendanceMode.PROXY,
        )
        strict = QuorumPolicy(
            id="q",
            denominator=QuorumDenominator.PRESENT,
            threshold=0,
            include_proxies=False,
            count_remote=False,
        )
        assert strict.attendance_modes() == (AttendanceMode.PRESENT,)


class TestVotePolicy:
    """Tests for VotePolicy."""

    def test_default_policy_is_simple_majority_of_expressed(self) -> None:
        assert DEFAULT_VOTE_POLICY.is_default
        assert DEFAULT_VOTE_POLICY.base is MajorityBase.EXPRESSED
        assert DEFAULT_VOTE_POLICY.threshold == 0.5
        assert not DEFAULT_VOTE_POLICY.abstention_as_against

    def test_stored_policy_is_not_default(self) -> None:
        policy = VotePolicy(id="v", base=MajorityBase.PRESENT, threshold=0.5)
        assert not policy.is_default


class TestMotion:
    """Tests for Motion state and the manual tally check."""

    def test_open_means_opened_and_not_closed(self) -> None:
        from datetime import datetime, timezone

        now = datetime.now(timezone.utc)
        assert not Motion(id="x", meeting_id="m", tenant_id="t").is_open
        assert Motion(id="x", meeting_id="m", tenant_id="t", opened_at=now).is_open
        closed = Motion(
            id="x", meeting_id="m", tenant_id="t", opened_at=now, closed_at=now
        )
        assert not closed.is_open
        assert closed.is_closed

    def test_manual_tally_requires_positive_total(self) -> None:
        motion = Motion(id="x", meeting_id="m", tenant_id="t")
        assert not motion.has_consistent_manual_tally()

    def test_manual_tally_must_add_up(self) -> None:
        consistent = Motion(
            id="x",
            meeting_id="m",
            tenant_id="t",
            manual_total=100,
            manual_for=60,
            manual_against=30,
            manual_abstain=10,
        )
        inconsistent = Motion(
            id="x",
            meeting_id="m",
            tenant_id="t",
            manual_total=100,
            manual_for=60,
            manual_against=30,
            manual_abstain=9,
        )
        assert consistent.has_consistent_manual_tally()
        assert not inconsistent.has_consistent_manual_tally()

    def test_context_exposes_meeting_scope(self) -> None:
        meeting = Meeting(id="m", tenant_id="t")
        context = MotionContext(
            motion=Motion(id="x", meeting_id="m", tenant_id="t"), meeting=meeting
        )
        assert context.tenant_id == "t"
        assert context.meeting_id == "m"


class TestTenantContext:
    """Tests for TenantContext."""

    def test_tenant_id_is_trimmed(self) -> None:
        assert TenantContext(tenant_id="  t1 ").tenant_id == "t1"

    def test_empty_tenant(self) -> None:
        assert not TenantContext(tenant_id="   ").has_tenant

    def test_admin_role(self) -> None:
        assert TenantContext(tenant_id="t", role="admin").is_admin
        assert not TenantContext(tenant_id="t", role="operator").is_admin
