"""Unit tests for attendance modes, ballot values and the ballot tally."""

from __future__ import annotations

import pytest

from agvote.domain.errors import InvalidArgumentError
from agvote.domain.models.attendance import AttendanceMode
from agvote.domain.models.ballot import Ballot, BallotTally, BallotValue
from agvote.domain.models.member import Member


def _ballot(value: BallotValue, weight: float, member_id: str) -> Ballot:
    return Ballot(
        tenant_id="t",
        meeting_id="meeting",
        motion_id="motion",
        member_id=member_id,
        value=value,
        weight=weight,
    )


class TestAttendanceMode:
    """Tests for AttendanceMode.parse_request."""

    @pytest.mark.parametrize("mode", list(AttendanceMode))
    def test_parses_stored_modes(self, mode: AttendanceMode) -> None:
        assert AttendanceMode.parse_request(mode.value) is mode

    def test_absent_means_delete(self) -> None:
        assert AttendanceMode.parse_request(" absent ") is None

    @pytest.mark.parametrize("raw", ["", "late", "Present", "yes"])
    def test_unknown_mode_raises(self, raw: str) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            AttendanceMode.parse_request(raw)

        assert exc_info.value.code == "invalid_mode"

    def test_direct_modes(self) -> None:
        assert AttendanceMode.PRESENT.is_direct()
        assert AttendanceMode.REMOTE.is_direct()
        assert not AttendanceMode.PROXY.is_direct()
        assert not AttendanceMode.EXCUSED.is_direct()

    def test_attending_modes_include_proxy_not_excused(self) -> None:
        assert AttendanceMode.PROXY.is_attending()
        assert not AttendanceMode.EXCUSED.is_attending()


class TestBallotValue:
    """Tests for BallotValue.parse."""

    @pytest.mark.parametrize("raw", ["for", "against", "abstain", "nsp", " for "])
    def test_accepts_known_values(self, raw: str) -> None:
        assert BallotValue.parse(raw).value == raw.strip()

    @pytest.mark.parametrize("raw", ["maybe", "yes", "no", "", "FOR"])
    def test_rejects_unknown_and_legacy_values(self, raw: str) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            BallotValue.parse(raw)

        assert exc_info.value.code == "invalid_vote_value"
        assert "invalide" in exc_info.value.message


class TestBallotTally:
    """Tests for BallotTally aggregation."""

    def test_empty_tally(self) -> None:
        tally = BallotTally.from_ballots([])
        assert tally.total_ballots == 0
        assert tally.expressed_weight == 0.0

    def test_aggregates_counts_and_weights(self) -> None:
        tally = BallotTally.from_ballots(
            [
                _ballot(BallotValue.FOR, 3.5, "a"),
                _ballot(BallotValue.FOR, 1.0, "b"),
                _ballot(BallotValue.AGAINST, 2.0, "c"),
                _ballot(BallotValue.ABSTAIN, 1.0, "d"),
                _ballot(BallotValue.NSP, 4.0, "e"),
            ]
        )

        assert tally.count_for == 2
        assert tally.weight_for == 4.5
        assert tally.count_against == 1
        assert tally.count_abstain == 1
        assert tally.count_nsp == 1
        assert tally.total_ballots == 5
        assert tally.weight_total == 12.5

    def test_nsp_never_counts_as_expressed(self) -> None:
        tally = BallotTally.from_ballots([_ballot(BallotValue.NSP, 4.0, "e")])
        assert tally.expressed_weight == 0.0
        assert tally.weight_total == 4.0


class TestMemberWeight:
    """Tests for Member.effective_weight."""

    def test_defaults_to_one_when_unset(self) -> None:
        assert Member(id="m", tenant_id="t").effective_weight == 1.0

    def test_uses_configured_power(self) -> None:
        member = Member(id="m", tenant_id="t", voting_power=3.5)
        assert member.effective_weight == 3.5
