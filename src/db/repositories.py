from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.orm import Session

from db import models
from domain.quote import Quote


class QuoteRecordRepository:
    """Insert-only access to the ``cotacoes`` table.

    The repository flushes but never commits; the caller owns the transaction
    and decides whether the write is still within its budget.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def set_busy_timeout(self, milliseconds: int) -> None:
        self._session.execute(text(f"PRAGMA busy_timeout = {max(0, int(milliseconds))}"))

    def add(self, quote: Quote) -> int:
        record = models.QuoteRecordOrm(bid=quote.bid)
        self._session.add(record)
        self._session.flush()
        return record.id


__all__ = ["QuoteRecordRepository"]
