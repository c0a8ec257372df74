"""Business-rule (conflict) errors.

These cover wrong lifecycle state, inactive actors, missing delegations
and any other precondition the request cannot satisfy as-is. They are
never retried by the engine.
"""

from __future__ import annotations

from typing import Any

from agvote.domain.exceptions import GovernanceError


class ConflictError(GovernanceError):
    """Base error for business-rule violations.

    HTTP Status: 409 Conflict
    """

    code = "business_rule_violation"
    http_status = 409
    title = "Business Rule Violation"


class MeetingNotLiveError(ConflictError):
    """Raised when a ballot targets a meeting that is not in session."""

    code = "meeting_not_live"

    def __init__(self, meeting_id: str, status: str) -> None:
        self.meeting_id = meeting_id
        self.status = status
        super().__init__(
            "Impossible de voter sur une motion dont la séance n'est pas en cours"
        )


class MeetingValidatedError(ConflictError):
    """Raised when a ballot targets a meeting whose results were validated."""

    code = "meeting_validated"

    def __init__(self, meeting_id: str) -> None:
        self.meeting_id = meeting_id
        super().__init__("Séance validée : vote interdit")


class MotionNotOpenError(ConflictError):
    """Raised when a ballot targets a motion that is not open for voting."""

    code = "motion_not_open"

    def __init__(self, motion_id: str) -> None:
        self.motion_id = motion_id
        super().__init__("Cette motion n'est pas ouverte au vote")


class MemberInactiveError(ConflictError):
    """Raised when an inactive member tries to vote or act as proxy."""

    code = "member_inactive"

    def __init__(
        self, member_id: str, message: str = "Membre inactif, vote impossible"
    ) -> None:
        self.member_id = member_id
        super().__init__(message)


class MemberNotPresentError(ConflictError):
    """Raised when the acting member is not directly present at the meeting."""

    code = "member_not_present"

    def __init__(
        self,
        member_id: str,
        message: str = "Membre non enregistré comme présent, vote impossible",
    ) -> None:
        self.member_id = member_id
        super().__init__(message)


class NoActiveProxyError(ConflictError):
    """Raised when no active delegation links the giver to the proxy holder."""

    code = "no_active_proxy"

    def __init__(self, meeting_id: str, giver_id: str, receiver_id: str) -> None:
        self.meeting_id = meeting_id
        self.giver_id = giver_id
        self.receiver_id = receiver_id
        super().__init__(
            "Aucune procuration active ne permet à ce mandataire "
            "de voter pour ce membre"
        )


class ProxyChainError(ConflictError):
    """Raised when a receiver who already delegates would receive a proxy."""

    code = "proxy_chain_forbidden"

    def __init__(self, receiver_id: str) -> None:
        self.receiver_id = receiver_id
        super().__init__(
            "Chaîne de procuration interdite (le mandataire délègue déjà)."
        )


class ProxyCapReachedError(ConflictError):
    """Raised when a receiver already holds the maximum number of proxies."""

    code = "proxy_cap_reached"

    def __init__(self, receiver_id: str, cap: int) -> None:
        self.receiver_id = receiver_id
        self.cap = cap
        super().__init__(f"Plafond procurations atteint (max {cap}).")


class AlreadyInStatusError(ConflictError):
    """Raised when a transition targets the meeting's current status."""

    code = "already_in_status"
    http_status = 422

    def __init__(self, meeting_id: str, status: str) -> None:
        self.meeting_id = meeting_id
        self.status = status
        super().__init__(f"La séance est déjà au statut '{status}'.")


class ArchivedMeetingImmutableError(ConflictError):
    """Raised when any transition is attempted from an archived meeting."""

    code = "archived_immutable"
    http_status = 403

    def __init__(self, meeting_id: str) -> None:
        self.meeting_id = meeting_id
        super().__init__("Séance archivée : aucune transition autorisée.")


class InvalidTransitionError(ConflictError):
    """Raised when the target status is not reachable from the current one."""

    code = "invalid_transition"
    http_status = 422

    def __init__(self, meeting_id: str, from_status: str, to_status: str) -> None:
        self.meeting_id = meeting_id
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(f"Transition {from_status} → {to_status} non autorisée.")


class TransitionBlockedError(ConflictError):
    """Raised when blocking issues prevent a lifecycle transition.

    Attributes:
        issues: Blocking issues as (code, message) dictionaries.
        warnings: Non-blocking warnings as (code, message) dictionaries.
    """

    code = "workflow_issues"
    http_status = 422

    def __init__(
        self,
        meeting_id: str,
        to_status: str,
        issues: list[dict[str, str]],
        warnings: list[dict[str, str]],
    ) -> None:
        self.meeting_id = meeting_id
        self.to_status = to_status
        self.issues = issues
        self.warnings = warnings
        super().__init__("Transition bloquée par des pré-requis")

    def to_problem_dict(self) -> dict[str, Any]:
        result = super().to_problem_dict()
        result["issues"] = self.issues
        result["warnings"] = self.warnings
        return result
