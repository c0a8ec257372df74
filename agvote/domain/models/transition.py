"""Lifecycle transition check results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from agvote.domain.models.meeting import Meeting, MeetingStatus


@dataclass(frozen=True, eq=True)
class TransitionIssue:
    """A blocking issue or non-blocking warning with a stable code."""

    code: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


@dataclass(frozen=True, eq=True)
class TransitionCheck:
    """Outcome of evaluating one transition.

    can_proceed is True exactly when there are no blocking issues.
    """

    issues: tuple[TransitionIssue, ...] = ()
    warnings: tuple[TransitionIssue, ...] = ()

    @property
    def can_proceed(self) -> bool:
        return len(self.issues) == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "can_proceed": self.can_proceed,
            "issues": [issue.to_dict() for issue in self.issues],
            "warnings": [warning.to_dict() for warning in self.warnings],
        }


@dataclass(frozen=True, eq=True)
class TransitionReadiness:
    """Readiness of every transition reachable from the current status."""

    current_status: MeetingStatus
    transitions: dict[MeetingStatus, TransitionCheck] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_status": self.current_status.value,
            "transitions": {
                status.value: check.to_dict()
                for status, check in self.transitions.items()
            },
        }


@dataclass(frozen=True, eq=True)
class TransitionOutcome:
    """Result of an applied transition.

    Attributes:
        meeting: The meeting as written.
        from_status: Status before the transition.
        warnings: Non-blocking warnings raised by the pre-checks.
        forced: True when blocking issues were overridden by an admin.
    """

    meeting: Meeting
    from_status: MeetingStatus
    warnings: tuple[TransitionIssue, ...] = ()
    forced: bool = False
