"""Member domain model."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_VOTING_POWER = 1.0


@dataclass(frozen=True, eq=True)
class Member:
    """A voting member of a tenant.

    Attributes:
        id: Member identifier.
        tenant_id: Owning tenant.
        full_name: Display name.
        voting_power: Configured weight; None means the default of 1.0.
        is_active: Inactive members can neither vote nor act as proxy.
    """

    id: str
    tenant_id: str
    full_name: str = ""
    voting_power: float | None = None
    is_active: bool = True

    @property
    def effective_weight(self) -> float:
        """Voting weight to snapshot on attendance rows and ballots."""
        if self.voting_power is None:
            return DEFAULT_VOTING_POWER
        return float(self.voting_power)
