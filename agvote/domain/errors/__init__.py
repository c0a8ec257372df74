"""Domain errors for the governance engine.

Error kinds:
- InvalidArgumentError: malformed or missing input
- NotFoundError: entity absent or outside tenant scope
- ConflictError: business-rule violation, including the ballot lock race
- PermissionDeniedError: missing privilege in the tenant context
- InternalError: storage returned no row where one was expected

All exceptions inherit from GovernanceError.
"""

from agvote.domain.errors.business_rule import (
    AlreadyInStatusError,
    ArchivedMeetingImmutableError,
    ConflictError,
    InvalidTransitionError,
    MeetingNotLiveError,
    MeetingValidatedError,
    MemberInactiveError,
    MemberNotPresentError,
    MotionNotOpenError,
    NoActiveProxyError,
    ProxyCapReachedError,
    ProxyChainError,
    TransitionBlockedError,
)
from agvote.domain.errors.concurrent_modification import MeetingUnavailableError
from agvote.domain.errors.internal import AttendanceWriteError, InternalError
from agvote.domain.errors.not_found import (
    MeetingArchivedError,
    MeetingNotFoundError,
    MemberNotFoundError,
    MotionNotFoundError,
    NotFoundError,
)
from agvote.domain.errors.permission import PermissionDeniedError
from agvote.domain.errors.validation import (
    InvalidArgumentError,
    InvalidVoteWeightError,
)
from agvote.domain.exceptions import GovernanceError

__all__: list[str] = [
    "AlreadyInStatusError",
    "ArchivedMeetingImmutableError",
    "AttendanceWriteError",
    "ConflictError",
    "GovernanceError",
    "InternalError",
    "InvalidArgumentError",
    "InvalidTransitionError",
    "InvalidVoteWeightError",
    "MeetingArchivedError",
    "MeetingNotFoundError",
    "MeetingNotLiveError",
    "MeetingUnavailableError",
    "MeetingValidatedError",
    "MemberInactiveError",
    "MemberNotFoundError",
    "MemberNotPresentError",
    "MotionNotFoundError",
    "MotionNotOpenError",
    "NoActiveProxyError",
    "NotFoundError",
    "PermissionDeniedError",
    "ProxyCapReachedError",
    "ProxyChainError",
    "TransitionBlockedError",
]
