"""Permission errors raised by the engine itself.

Authentication and role resolution are upstream concerns; the engine only
checks the few privileges it needs from the explicit tenant context.
"""

from __future__ import annotations

from agvote.domain.exceptions import GovernanceError


class PermissionDeniedError(GovernanceError):
    """Raised when the tenant context lacks a required privilege.

    HTTP Status: 403 Forbidden
    """

    code = "permission_denied"
    http_status = 403
    title = "Permission Denied"
