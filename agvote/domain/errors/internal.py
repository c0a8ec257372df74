"""Internal errors: storage returned nothing where a row was expected."""

from __future__ import annotations

from agvote.domain.exceptions import GovernanceError


class InternalError(GovernanceError):
    """Raised when a storage write unexpectedly yields no row.

    HTTP Status: 500 Internal Server Error
    """

    code = "internal_error"
    http_status = 500
    title = "Internal Error"


class AttendanceWriteError(InternalError):
    """Raised when an attendance upsert returns no stored row."""

    code = "attendance_write_failed"

    def __init__(self, meeting_id: str, member_id: str) -> None:
        self.meeting_id = meeting_id
        self.member_id = member_id
        super().__init__("Erreur upsert présence")
