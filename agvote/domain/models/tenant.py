"""Explicit tenant context passed into every engine call."""

from __future__ import annotations

from dataclasses import dataclass

ADMIN_ROLE = "admin"


@dataclass(frozen=True, eq=True)
class TenantContext:
    """Caller identity and tenant scope for one unit of work.

    The engine never reads an ambient "current tenant"; each operation
    receives this value explicitly so that concurrent requests cannot leak
    scope into one another.

    Attributes:
        tenant_id: Tenant owning every entity touched by the call.
        user_id: Authenticated operator, if any (used for audit events).
        role: Operator role resolved upstream (e.g. "admin", "operator").
    """

    tenant_id: str
    user_id: str | None = None
    role: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "tenant_id", (self.tenant_id or "").strip())

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    @property
    def has_tenant(self) -> bool:
        return self.tenant_id != ""
