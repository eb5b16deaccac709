from __future__ import annotations

import logging
from dataclasses import dataclass

from pydantic import ValidationError
from sqlalchemy.orm import Session, sessionmaker

from config import AppSettings
from domain.deadline import Deadline
from domain.errors import DeadlineExceededError, QuoteError
from domain.quote import QuotePayload

from .quote_persister import QuotePersister, QuoteSink
from .upstream_fetcher import QuoteFetcher, UpstreamFetcher

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"
TEXT_MEDIA_TYPE = "text/plain; charset=utf-8"


@dataclass(frozen=True)
class QuoteReply:
    status_code: int
    body: str
    media_type: str

    @classmethod
    def text(cls, status_code: int, message: str) -> QuoteReply:
        return cls(status_code=status_code, body=message + "\n", media_type=TEXT_MEDIA_TYPE)


class QuoteServer:
    """Serves one quote request: fetch, persist on the side, reply.

    Each stage gets its own budget derived from the request deadline. The
    persist budget is fresh, not what the fetch left over, and its outcome
    never changes the reply.
    """

    def __init__(
        self,
        fetcher: QuoteFetcher,
        persister: QuoteSink,
        *,
        fetch_timeout: float = 0.2,
        persist_timeout: float = 0.01,
    ) -> None:
        self.fetcher = fetcher
        self.persister = persister
        self.fetch_timeout = fetch_timeout
        self.persist_timeout = persist_timeout

    def handle(self, request_deadline: Deadline) -> QuoteReply:
        with request_deadline.child(self.fetch_timeout) as fetch_deadline:
            try:
                quote = self.fetcher.fetch(fetch_deadline)
            except DeadlineExceededError as exc:
                logger.warning("Timed out fetching quote: %s", exc)
                return QuoteReply.text(408, "Timeout querying the quote provider")
            except QuoteError as exc:
                logger.error("Failed to fetch quote: %s", exc)
                return QuoteReply.text(500, "Internal server error")

        if request_deadline.cancelled:
            logger.info("Request cancelled, not saving quote %s", quote.bid)
        else:
            with request_deadline.child(self.persist_timeout) as persist_deadline:
                outcome = self.persister.persist(persist_deadline, quote)
            if not outcome.ok:
                logger.warning("Failed to save quote %s: %s", quote.bid, outcome.error)

        # Serialize before anything is sent so a failure can still become a 500.
        try:
            body = QuotePayload(bid=quote.bid).model_dump_json()
        except (ValidationError, ValueError) as exc:
            logger.error("Failed to serialize quote response: %s", exc)
            return QuoteReply.text(500, "Error processing response")

        return QuoteReply(status_code=200, body=body, media_type=JSON_MEDIA_TYPE)


def build_quote_server(session_factory: sessionmaker[Session], settings: AppSettings) -> QuoteServer:
    fetch_timeout = settings.fetch_timeout_ms / 1000
    persist_timeout = settings.persist_timeout_ms / 1000
    fetcher = UpstreamFetcher(url=settings.upstream_url, timeout=fetch_timeout)
    persister = QuotePersister(session_factory, timeout=persist_timeout)
    return QuoteServer(fetcher, persister, fetch_timeout=fetch_timeout, persist_timeout=persist_timeout)


__all__ = ["QuoteReply", "QuoteServer", "build_quote_server"]
