from __future__ import annotations

from typing import Any


class QuoteError(RuntimeError):
    """Base class for every failure of the quote pipeline."""


class TransportError(QuoteError):
    pass


class DeadlineExceededError(TransportError):
    """Transport failure caused by an expired or cancelled deadline."""


class StatusError(QuoteError):
    def __init__(self, message: str, *, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodeError(QuoteError):
    def __init__(self, message: str, *, payload: Any | None = None) -> None:
        super().__init__(message)
        self.payload = payload


class EmptyFieldError(QuoteError):
    """Payload was structurally valid but the bid is empty."""


class PersistError(QuoteError):
    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class PersistTimeoutError(PersistError):
    pass


__all__ = [
    "DecodeError",
    "DeadlineExceededError",
    "EmptyFieldError",
    "PersistError",
    "PersistTimeoutError",
    "QuoteError",
    "StatusError",
    "TransportError",
]
