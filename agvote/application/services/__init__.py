"""Application services - governance engine use cases.

Services:
- MeetingWorkflowService: lifecycle readiness checks and transitions
- AttendanceService: attendance roll and presence queries
- ProxyService: proxy delegations
- BallotService: ballot casting
- OfficialResultsService: official tally, persistence and consolidation
- QuorumService: meeting-level quorum status
"""

from agvote.application.services.attendance_service import AttendanceService
from agvote.application.services.ballot_service import BallotService
from agvote.application.services.best_effort import notify_best_effort
from agvote.application.services.meeting_workflow_service import (
    MeetingWorkflowService,
)
from agvote.application.services.official_results_service import (
    OfficialResultsService,
)
from agvote.application.services.proxy_service import ProxyService
from agvote.application.services.quorum_service import QuorumService

__all__: list[str] = [
    "AttendanceService",
    "BallotService",
    "MeetingWorkflowService",
    "OfficialResultsService",
    "ProxyService",
    "QuorumService",
    "notify_best_effort",
]
