from __future__ import annotations

import logging
import time
from pathlib import Path

import requests
from pydantic import ValidationError

from config import OUTPUT_FILE, SERVER_URL
from domain.deadline import Clock, Deadline
from domain.errors import (
    DecodeError,
    DeadlineExceededError,
    EmptyFieldError,
    QuoteError,
    StatusError,
    TransportError,
)
from domain.quote import Quote, QuotePayload

logger = logging.getLogger(__name__)

class ClientError(QuoteError):
    pass


class ClientTransportError(ClientError, TransportError):
    pass


class ClientTimeoutError(ClientTransportError, DeadlineExceededError):
    pass


class ClientStatusError(ClientError, StatusError):
    pass


class ClientDecodeError(ClientError, DecodeError):
    pass


class ClientEmptyFieldError(ClientError, EmptyFieldError):
    pass


def format_quote(quote: Quote) -> str:
    return f"Dólar: {quote.bid}\n"


class QuoteClient:
    """One-shot consumer of ``GET /cotacao``.

    The whole call runs under a single flat budget. On success the output file
    is overwritten with the formatted quote; on any failure it is left alone.
    """

    def __init__(
        self,
        *,
        url: str = SERVER_URL,
        output_path: Path = OUTPUT_FILE,
        timeout: float = 0.3,
        session: requests.Session | None = None,
        clock: Clock = time.monotonic,
    ) -> None:
        if timeout <= 0:
            msg = "timeout must be positive"
            raise ValueError(msg)

        self.url = url
        self.output_path = output_path
        self.timeout = timeout
        self._session = session or requests.Session()
        self._clock = clock

    def run(self) -> int:
        try:
            quote = self.fetch(self._new_deadline())
        except ClientError as exc:
            logger.error("Failed to fetch quote: %s", exc)
            return 1

        try:
            self.write(quote)
        except OSError as exc:
            logger.error("Failed to write quote to %s: %s", self.output_path, exc)
            return 1

        logger.info("Dollar quote saved: %s", quote.bid)
        return 0

    def fetch(self, deadline: Deadline) -> Quote:
        with deadline:
            body = self._get(deadline)

        try:
            payload = QuotePayload.model_validate_json(body)
        except ValidationError as exc:
            raise ClientDecodeError("Quote server returned an undecodable body", payload=body) from exc

        try:
            return Quote(bid=payload.bid)
        except EmptyFieldError as exc:
            raise ClientEmptyFieldError("Quote server returned an empty bid") from exc

    def write(self, quote: Quote) -> None:
        self.output_path.write_text(format_quote(quote), encoding="utf-8", newline="\n")
        logger.info("Quote written to %s", self.output_path)

    def _new_deadline(self) -> Deadline:
        return Deadline.after(self.timeout, clock=self._clock)

    def _timeout_error(self) -> ClientTimeoutError:
        return ClientTimeoutError(f"timeout of {self.timeout * 1000:.0f}ms exceeded calling quote server")

    def _get(self, deadline: Deadline) -> bytes:
        remaining = deadline.remaining()
        if remaining <= 0 or deadline.cancelled:
            raise self._timeout_error()

        try:
            with self._session.get(self.url, timeout=remaining, stream=True) as response:
                if not 200 <= response.status_code < 300:
                    raise ClientStatusError(
                        f"Quote server returned status {response.status_code}", status_code=response.status_code
                    )
                body = response.content
        except requests.Timeout as exc:
            raise self._timeout_error() from exc
        except requests.RequestException as exc:
            if deadline.done:
                raise self._timeout_error() from exc
            raise ClientTransportError(f"Quote server request failed: {exc}") from exc

        if deadline.done:
            raise self._timeout_error()
        return body


__all__ = [
    "ClientDecodeError",
    "ClientEmptyFieldError",
    "ClientError",
    "ClientStatusError",
    "ClientTimeoutError",
    "ClientTransportError",
    "QuoteClient",
    "format_quote",
]
