"""Ballot casting request DTO.

Inbound payloads arrive as loosely typed mappings from the HTTP layer. The
model normalizes them (strings trimmed, missing fields empty) without
trusting any upstream validation; business validation stays in the
ballot service.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from agvote.domain.errors.validation import InvalidArgumentError


class CastBallotRequest(BaseModel):
    """Command to cast one ballot.

    member_id is the member whose vote is counted. For a proxy vote,
    proxy_source_member_id is the proxy holder casting it.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    motion_id: Annotated[str, Field(description="Motion voted on")] = ""
    member_id: Annotated[str, Field(description="Member whose vote counts")] = ""
    value: Annotated[str, Field(description="for, against, abstain or nsp")] = ""
    is_proxy_vote: Annotated[
        bool, Field(description="Cast by a proxy holder on the member's behalf")
    ] = False
    proxy_source_member_id: Annotated[
        str, Field(description="Proxy holder casting the ballot")
    ] = ""

    @field_validator(
        "motion_id", "member_id", "value", "proxy_source_member_id", mode="before"
    )
    @classmethod
    def _coerce_text(cls, raw: Any) -> str:
        if raw is None:
            return ""
        return str(raw)

    @field_validator("is_proxy_vote", mode="before")
    @classmethod
    def _null_flag_is_false(cls, raw: Any) -> Any:
        return False if raw is None else raw

    @classmethod
    def from_payload(
        cls, payload: Mapping[str, Any] | CastBallotRequest
    ) -> CastBallotRequest:
        """Build a request from a raw mapping.

        Raises:
            InvalidArgumentError: If the payload cannot be normalized.
        """
        if isinstance(payload, cls):
            return payload
        try:
            return cls.model_validate(dict(payload))
        except ValidationError as e:
            raise InvalidArgumentError(
                f"Requête de vote invalide ({e.error_count()} erreur(s))",
                code="invalid_ballot_request",
            ) from e

    @property
    def has_required_fields(self) -> bool:
        return bool(self.motion_id and self.member_id and self.value)
