"""Proxy delegation service.

A giver lets a receiver vote on their behalf for one meeting.

Rules:
    - A giver holds at most one active delegation per meeting; a new one
      replaces it. An empty receiver revokes it.
    - No self-delegation.
    - No chains: a receiver who already delegates cannot receive.
    - A receiver holds at most proxy_max_per_receiver active delegations.

Chain and cap checks run in one transaction with the write, guarded by
the meeting row lock, so concurrent grants cannot both pass the cap.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from structlog import get_logger

from agvote.application.services.best_effort import notify_best_effort
from agvote.config.governance_config import DEFAULT_GOVERNANCE_CONFIG
from agvote.domain.errors import (
    InvalidArgumentError,
    MeetingArchivedError,
    MeetingNotFoundError,
    MemberInactiveError,
    ProxyCapReachedError,
    ProxyChainError,
)
from agvote.domain.models.proxy import ProxyDelegation

if TYPE_CHECKING:
    from agvote.application.ports.audit_sink import AuditSinkProtocol
    from agvote.application.ports.meeting_repository import (
        MeetingRepositoryProtocol,
    )
    from agvote.application.ports.member_repository import MemberRepositoryProtocol
    from agvote.application.ports.proxy_repository import ProxyRepositoryProtocol
    from agvote.application.ports.transaction_manager import (
        TransactionManagerProtocol,
    )
    from agvote.config.governance_config import GovernanceConfig
    from agvote.domain.models.meeting import Meeting
    from agvote.domain.models.tenant import TenantContext

logger = get_logger(__name__)


class ProxyService:
    """Service for granting, revoking and querying proxy delegations."""

    def __init__(
        self,
        proxy_repo: ProxyRepositoryProtocol,
        meeting_repo: MeetingRepositoryProtocol,
        member_repo: MemberRepositoryProtocol,
        transaction_manager: TransactionManagerProtocol,
        config: GovernanceConfig = DEFAULT_GOVERNANCE_CONFIG,
        audit_sink: AuditSinkProtocol | None = None,
    ) -> None:
        self._proxy_repo = proxy_repo
        self._meeting_repo = meeting_repo
        self._member_repo = member_repo
        self._tx = transaction_manager
        self._config = config
        self._audit_sink = audit_sink

    async def upsert(
        self,
        meeting_id: str,
        giver_id: str,
        receiver_id: str | None,
        tenant: TenantContext,
    ) -> ProxyDelegation | None:
        """Grant a delegation from giver to receiver, or revoke it.

        Args:
            meeting_id: The meeting.
            giver_id: Represented member.
            receiver_id: Proxy holder; empty or None revokes the giver's
                active delegation.
            tenant: Caller's tenant context.

        Returns:
            The active delegation, or None when revoked.

        Raises:
            InvalidArgumentError: Missing giver, self-delegation, or an id
                that does not resolve under the tenant.
            MeetingNotFoundError: Meeting does not resolve under the tenant.
            MeetingArchivedError: Meeting is archived.
            MemberInactiveError: Giver or receiver is inactive.
            ProxyChainError: Receiver already delegates.
            ProxyCapReachedError: Receiver holds the maximum of delegations.
        """
        meeting_id = (meeting_id or "").strip()
        giver_id = (giver_id or "").strip()
        receiver_id = (receiver_id or "").strip()

        if not giver_id:
            raise InvalidArgumentError(
                "giver_member_id manquant", field="giver_member_id"
            )
        if giver_id == receiver_id:
            raise InvalidArgumentError(
                "giver != receiver", code="proxy_self_delegation"
            )

        log = logger.bind(
            meeting_id=meeting_id, giver_id=giver_id, receiver_id=receiver_id or None
        )

        meeting = await self._load_writable_meeting(meeting_id, tenant)
        giver = await self._member_repo.find_by_id_for_tenant(
            giver_id, tenant.tenant_id
        )
        if giver is None:
            raise InvalidArgumentError(
                "meeting_id/giver_member_id invalide pour ce tenant",
                field="giver_member_id",
            )

        if not receiver_id:
            revoked = await self._proxy_repo.revoke_for_giver(
                meeting.id, giver_id, tenant.tenant_id
            )
            log.info("Proxy revoked", revoked=revoked)
            await self._audit("proxy.revoked", meeting.id, giver_id, None, tenant)
            return None

        if not giver.is_active:
            raise MemberInactiveError(
                giver_id, message="Membre inactif, délégation impossible"
            )

        receiver = await self._member_repo.find_by_id_for_tenant(
            receiver_id, tenant.tenant_id
        )
        if receiver is None:
            raise InvalidArgumentError(
                "receiver_member_id invalide pour ce tenant",
                field="receiver_member_id",
            )
        if not receiver.is_active:
            raise MemberInactiveError(
                receiver_id, message="Mandataire inactif, délégation impossible"
            )

        cap = self._config.proxy_max_per_receiver
        async with self._tx.transaction():
            await self._meeting_repo.lock_for_update(meeting.id, tenant.tenant_id)

            if (
                await self._proxy_repo.count_active_as_giver(
                    meeting.id, receiver_id, tenant.tenant_id
                )
                > 0
            ):
                log.warning("Proxy rejected - receiver already delegates")
                raise ProxyChainError(receiver_id)

            held = await self._proxy_repo.count_active_as_receiver(
                meeting.id, receiver_id, tenant.tenant_id
            )
            if held >= cap:
                log.warning("Proxy rejected - receiver cap reached", held=held, cap=cap)
                raise ProxyCapReachedError(receiver_id, cap)

            delegation = await self._proxy_repo.upsert(
                ProxyDelegation(
                    meeting_id=meeting.id,
                    tenant_id=tenant.tenant_id,
                    giver_member_id=giver_id,
                    receiver_member_id=receiver_id,
                )
            )

        log.info("Proxy granted")
        await self._audit("proxy.granted", meeting.id, giver_id, receiver_id, tenant)
        return delegation

    async def revoke(
        self, meeting_id: str, giver_id: str, tenant: TenantContext
    ) -> int:
        """Revoke the giver's active delegation for a meeting.

        Returns:
            Number of delegations revoked.
        """
        meeting_id = (meeting_id or "").strip()
        giver_id = (giver_id or "").strip()
        if not giver_id:
            raise InvalidArgumentError(
                "giver_member_id manquant", field="giver_member_id"
            )
        meeting = await self._load_writable_meeting(meeting_id, tenant)
        revoked = await self._proxy_repo.revoke_for_giver(
            meeting.id, giver_id, tenant.tenant_id
        )
        logger.info(
            "Proxy revoked", meeting_id=meeting.id, giver_id=giver_id, revoked=revoked
        )
        await self._audit("proxy.revoked", meeting.id, giver_id, None, tenant)
        return revoked

    async def list_for_meeting(
        self, meeting_id: str, tenant: TenantContext
    ) -> list[ProxyDelegation]:
        meeting_id = (meeting_id or "").strip()
        if not meeting_id:
            raise InvalidArgumentError("meeting_id est obligatoire", field="meeting_id")
        return await self._proxy_repo.list_for_meeting(meeting_id, tenant.tenant_id)

    async def has_active_proxy(
        self, meeting_id: str, giver_id: str, receiver_id: str
    ) -> bool:
        """Check for an active delegation from giver to receiver."""
        return await self._proxy_repo.has_active_proxy(
            (meeting_id or "").strip(),
            (giver_id or "").strip(),
            (receiver_id or "").strip(),
        )

    async def _load_writable_meeting(
        self, meeting_id: str, tenant: TenantContext
    ) -> Meeting:
        if not meeting_id:
            raise InvalidArgumentError("meeting_id est obligatoire", field="meeting_id")
        meeting = await self._meeting_repo.find_by_id_for_tenant(
            meeting_id, tenant.tenant_id
        )
        if meeting is None:
            raise MeetingNotFoundError(meeting_id)
        if meeting.is_archived:
            raise MeetingArchivedError(
                meeting_id, message="Séance archivée : procurations non modifiables"
            )
        return meeting

    async def _audit(
        self,
        event_type: str,
        meeting_id: str,
        giver_id: str,
        receiver_id: str | None,
        tenant: TenantContext,
    ) -> None:
        if self._audit_sink is None:
            return
        audit_sink = self._audit_sink
        await notify_best_effort(
            lambda: audit_sink.append(
                event_type,
                tenant.tenant_id,
                "meeting",
                meeting_id,
                {"giver_member_id": giver_id, "receiver_member_id": receiver_id},
                actor_id=tenant.user_id,
            ),
            event_type,
        )
