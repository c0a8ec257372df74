"""Not-found errors.

Raised when a referenced entity is absent or lives outside the caller's
tenant scope. The two cases are deliberately indistinguishable to callers.
"""

from __future__ import annotations

from agvote.domain.exceptions import GovernanceError


class NotFoundError(GovernanceError):
    """Base error for entities that do not resolve.

    HTTP Status: 404 Not Found
    """

    code = "not_found"
    http_status = 404
    title = "Not Found"


class MeetingNotFoundError(NotFoundError):
    """Raised when a meeting does not resolve under the tenant."""

    code = "meeting_not_found"

    def __init__(self, meeting_id: str, message: str = "Séance introuvable") -> None:
        self.meeting_id = meeting_id
        super().__init__(message)


class MeetingArchivedError(MeetingNotFoundError):
    """Raised when a write targets an archived meeting.

    Archived meetings are reported as not found for writes: they are frozen
    for audit and no longer accept attendance or delegation changes.
    """

    code = "meeting_archived"

    def __init__(
        self,
        meeting_id: str,
        message: str = "Séance archivée : présence non modifiable",
    ) -> None:
        super().__init__(meeting_id, message)


class MotionNotFoundError(NotFoundError):
    """Raised when a motion (with its meeting context) cannot be loaded."""

    code = "motion_not_found"

    def __init__(self, motion_id: str, message: str = "Motion introuvable") -> None:
        self.motion_id = motion_id
        super().__init__(message)


class MemberNotFoundError(NotFoundError):
    """Raised when a member does not resolve under the tenant."""

    code = "member_not_found"

    def __init__(self, member_id: str, message: str = "Membre inconnu") -> None:
        self.member_id = member_id
        super().__init__(message)
