"""Base exception classes for the governance domain layer."""

from __future__ import annotations

from typing import Any


class GovernanceError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from this class.
    This enables consistent error handling across the engine and lets the
    thin HTTP layer map every failure to a problem document.

    Attributes:
        code: Stable machine-readable error code.
        http_status: Status the HTTP layer should answer with.
        title: Short human-readable summary of the error kind.
    """

    code: str = "governance_error"
    http_status: int = 500
    title: str = "Governance Error"

    def __init__(self, message: str = "", code: str | None = None) -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
            code: Optional override of the class-level error code.
        """
        if code is not None:
            self.code = code
        self.message = message
        super().__init__(message)

    def to_problem_dict(self) -> dict[str, Any]:
        """Serialize to an RFC 7807 problem details dictionary.

        Returns:
            Dictionary with type, title, status, detail and code.
        """
        return {
            "type": f"urn:agvote:governance:{self.code.replace('_', '-')}",
            "title": self.title,
            "status": self.http_status,
            "detail": self.message,
            "code": self.code,
        }
