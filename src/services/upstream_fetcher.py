from __future__ import annotations

from typing import Protocol

import requests
from pydantic import ValidationError

from config import UPSTREAM_URL
from domain.deadline import Deadline
from domain.errors import (
    DecodeError,
    DeadlineExceededError,
    EmptyFieldError,
    QuoteError,
    StatusError,
    TransportError,
)
from domain.quote import Quote, UpstreamPayload


# API docs: https://docs.awesomeapi.com.br/api-de-moedas
class UpstreamError(QuoteError):
    pass


class UpstreamTransportError(UpstreamError, TransportError):
    pass


class UpstreamTimeoutError(UpstreamTransportError, DeadlineExceededError):
    pass


class UpstreamStatusError(UpstreamError, StatusError):
    pass


class UpstreamDecodeError(UpstreamError, DecodeError):
    pass


class UpstreamEmptyFieldError(UpstreamError, EmptyFieldError):
    pass


class QuoteFetcher(Protocol):
    def fetch(self, parent: Deadline) -> Quote: ...


class UpstreamFetcher(QuoteFetcher):
    def __init__(
        self,
        *,
        url: str = UPSTREAM_URL,
        timeout: float = 0.2,
        session: requests.Session | None = None,
    ) -> None:
        if timeout <= 0:
            msg = "timeout must be positive"
            raise ValueError(msg)

        self.url = url
        self.timeout = timeout
        self._session = session or requests.Session()

    def fetch(self, parent: Deadline) -> Quote:
        with parent.child(self.timeout) as deadline:
            body = self._get(deadline)

        try:
            payload = UpstreamPayload.model_validate_json(body)
        except ValidationError as exc:
            raise UpstreamDecodeError("Quote provider returned an undecodable body", payload=body) from exc

        try:
            return Quote(bid=payload.usdbrl.bid)
        except EmptyFieldError as exc:
            raise UpstreamEmptyFieldError("Quote provider returned an empty bid") from exc

    def _get(self, deadline: Deadline) -> bytes:
        # One reading feeds both the check and the socket timeout, which must stay positive.
        remaining = deadline.remaining()
        if remaining <= 0 or deadline.cancelled:
            raise UpstreamTimeoutError("Deadline exceeded before calling the quote provider")

        try:
            with self._session.get(self.url, timeout=remaining, stream=True) as response:
                if not 200 <= response.status_code < 300:
                    raise UpstreamStatusError(
                        f"Quote provider returned status {response.status_code}",
                        status_code=response.status_code,
                    )
                body = response.content
        except requests.Timeout as exc:
            raise UpstreamTimeoutError(f"Quote provider did not answer within {self.timeout:.3f}s") from exc
        except requests.RequestException as exc:
            if deadline.done:
                raise UpstreamTimeoutError("Deadline exceeded while calling the quote provider") from exc
            raise UpstreamTransportError("Quote provider request failed") from exc

        # requests bounds each socket operation, not the whole exchange
        if deadline.done:
            raise UpstreamTimeoutError("Deadline exceeded while reading the quote provider response")
        return body


__all__ = [
    "QuoteFetcher",
    "UpstreamDecodeError",
    "UpstreamEmptyFieldError",
    "UpstreamError",
    "UpstreamFetcher",
    "UpstreamStatusError",
    "UpstreamTimeoutError",
    "UpstreamTransportError",
]
