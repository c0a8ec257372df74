"""Concurrent modification error for the ballot casting lock.

Ballot casting validates the meeting status lock-free, then re-reads the
meeting row under an exclusive lock right before the write. If the status
changed in between, the cast is refused with this error.
"""

from __future__ import annotations

from agvote.domain.errors.business_rule import ConflictError


class MeetingUnavailableError(ConflictError):
    """Raised when the locked meeting row no longer matches the validated status.

    This is a recoverable error - the caller should re-read the meeting and
    decide whether to retry. The engine itself never retries.

    Attributes:
        meeting_id: The meeting that was locked.
        expected_status: The status validated before acquiring the lock.
        actual_status: The status found under the lock, or None if the row
            disappeared.
    """

    code = "meeting_unavailable"

    def __init__(
        self,
        meeting_id: str,
        expected_status: str,
        actual_status: str | None,
    ) -> None:
        """Initialize concurrent modification error.

        Args:
            meeting_id: The meeting that was locked.
            expected_status: Status validated before the lock.
            actual_status: Status observed under the lock.
        """
        self.meeting_id = meeting_id
        self.expected_status = expected_status
        self.actual_status = actual_status
        super().__init__("Séance non disponible pour le vote")
