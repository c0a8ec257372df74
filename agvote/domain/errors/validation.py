"""Input validation errors.

These represent field-shape problems the caller can fix immediately:
missing identifiers, unknown enumeration values, malformed UUIDs.
They are raised before any storage access where possible.
"""

from __future__ import annotations

from agvote.domain.exceptions import GovernanceError


class InvalidArgumentError(GovernanceError):
    """Raised when an operation receives malformed or missing input.

    HTTP Status: 400 Bad Request

    Attributes:
        field: Name of the offending field, when a single field is at fault.
    """

    code = "invalid_argument"
    http_status = 400
    title = "Invalid Argument"

    def __init__(
        self, message: str, field: str | None = None, code: str | None = None
    ) -> None:
        """Initialize the error.

        Args:
            message: Human-readable description of the problem.
            field: Optional name of the offending field.
            code: Optional specific error code.
        """
        self.field = field
        super().__init__(message, code=code)


class InvalidVoteWeightError(InvalidArgumentError):
    """Raised when a member's configured voting power is negative."""

    def __init__(self, member_id: str, weight: float) -> None:
        self.member_id = member_id
        self.weight = weight
        super().__init__(
            f"Poids de vote invalide ({weight}) pour le membre {member_id}",
            field="voting_power",
            code="invalid_vote_weight",
        )
