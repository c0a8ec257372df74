"""Application-layer DTOs."""

from agvote.application.dtos.ballot import CastBallotRequest

__all__: list[str] = ["CastBallotRequest"]
