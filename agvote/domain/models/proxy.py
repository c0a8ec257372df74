"""Proxy delegation domain model."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class ProxyDelegation:
    """A grant letting the receiver vote on behalf of the giver.

    Attributes:
        meeting_id: The meeting the delegation applies to.
        tenant_id: Owning tenant.
        giver_member_id: The represented member.
        receiver_member_id: The proxy holder who casts the vote.
        is_active: False once revoked.
        created_at: When the delegation was recorded.
        revoked_at: When the delegation was revoked, if ever.
    """

    meeting_id: str
    tenant_id: str
    giver_member_id: str
    receiver_member_id: str
    is_active: bool = True
    created_at: datetime = field(default_factory=_utc_now)
    revoked_at: datetime | None = None
