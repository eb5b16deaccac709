from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from db.models import QuoteRecordOrm


def stored_bids(session_factory: sessionmaker[Session]) -> list[str]:
    with session_factory() as session:
        return list(session.scalars(select(QuoteRecordOrm.bid).order_by(QuoteRecordOrm.id)))
