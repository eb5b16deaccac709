from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from db.repositories import QuoteRecordRepository
from domain.deadline import Deadline
from domain.errors import PersistError, PersistTimeoutError
from domain.quote import Quote

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PersistOutcome:
    record_id: int | None = None
    error: PersistError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class QuoteSink(Protocol):
    def persist(self, parent: Deadline, quote: Quote) -> PersistOutcome: ...


class QuotePersister(QuoteSink):
    """Best-effort, time-boxed insert of fetched quotes.

    Failures come back inside the returned outcome; ``persist`` does not raise
    for storage problems.
    """

    def __init__(self, session_factory: sessionmaker[Session], *, timeout: float = 0.01) -> None:
        if timeout <= 0:
            msg = "timeout must be positive"
            raise ValueError(msg)

        self._session_factory = session_factory
        self.timeout = timeout

    def persist(self, parent: Deadline, quote: Quote) -> PersistOutcome:
        with parent.child(self.timeout) as deadline:
            if deadline.done:
                return PersistOutcome(error=PersistTimeoutError("Deadline exceeded before saving quote"))

            try:
                with self._session_factory() as session:
                    repository = QuoteRecordRepository(session)
                    repository.set_busy_timeout(int(deadline.remaining() * 1000))
                    record_id = repository.add(quote)
                    if deadline.done:
                        session.rollback()
                        return PersistOutcome(
                            error=PersistTimeoutError(f"Saving quote exceeded {self.timeout * 1000:.0f}ms")
                        )
                    session.commit()
            except SQLAlchemyError as exc:
                if deadline.done:
                    return PersistOutcome(error=PersistTimeoutError("Deadline exceeded while saving quote", cause=exc))
                return PersistOutcome(error=PersistError(f"Failed to save quote: {exc}", cause=exc))

        logger.info("Quote saved to database: %s", quote.bid)
        return PersistOutcome(record_id=record_id)


__all__ = ["PersistOutcome", "QuotePersister", "QuoteSink"]
