from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from domain.errors import EmptyFieldError


@dataclass(frozen=True)
class Quote:
    """USD-BRL bid as returned by the provider.

    The bid is an opaque decimal string: it is transported and stored verbatim
    and never parsed as a number.
    """

    bid: str

    def __post_init__(self) -> None:
        if not self.bid:
            raise EmptyFieldError("bid field is empty")


class UpstreamBid(BaseModel):
    model_config = ConfigDict(extra="ignore")

    bid: str = ""


class UpstreamPayload(BaseModel):
    """Provider body, e.g. ``{"USDBRL": {"bid": "5.43", "ask": ...}}``.

    Only the bid is kept. A missing object or field decodes to an empty bid.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    usdbrl: UpstreamBid = Field(default_factory=UpstreamBid, alias="USDBRL")


class QuotePayload(BaseModel):
    """Body served by ``GET /cotacao`` and decoded by the client."""

    model_config = ConfigDict(extra="ignore")

    bid: str = ""


__all__ = ["Quote", "QuotePayload", "UpstreamBid", "UpstreamPayload"]
