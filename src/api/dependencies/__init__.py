import logging
from typing import Generator

from fastapi import Request

from domain.deadline import Deadline
from services.quote_server import QuoteServer

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_HEADER = "X-Request-Timeout-Ms"


def get_quote_server(request: Request) -> QuoteServer:
    server: QuoteServer = request.app.state.quote_server
    return server


def get_request_deadline(request: Request) -> Generator[Deadline, None, None]:
    with _deadline_from_headers(request) as deadline:
        yield deadline


def _deadline_from_headers(request: Request) -> Deadline:
    raw = request.headers.get(REQUEST_TIMEOUT_HEADER)
    if raw is None:
        return Deadline.unbounded()
    try:
        milliseconds = int(raw)
    except ValueError:
        milliseconds = 0
    if milliseconds <= 0:
        logger.warning("Ignoring invalid %s header: %r", REQUEST_TIMEOUT_HEADER, raw)
        return Deadline.unbounded()
    return Deadline.after(milliseconds / 1000)
