from __future__ import annotations

import json
from typing import Any, Callable

from tests.helpers.clock import FakeClock


class StubResponse:
    def __init__(
        self,
        *,
        status_code: int = 200,
        body: bytes | dict[str, Any] = b"",
        clock: FakeClock | None = None,
        read_seconds: float = 0.0,
    ) -> None:
        self.status_code = status_code
        self._body = json.dumps(body).encode() if isinstance(body, dict) else body
        self._clock = clock
        self._read_seconds = read_seconds
        self.closed = False

    @property
    def content(self) -> bytes:
        if self._clock is not None:
            self._clock.advance(self._read_seconds)
        return self._body

    def __enter__(self) -> StubResponse:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.closed = True


class StubSession:
    """Stands in for ``requests.Session``; answers every GET the same way."""

    def __init__(
        self,
        response: StubResponse | None = None,
        *,
        error: Exception | None = None,
        clock: FakeClock | None = None,
        latency: float = 0.0,
        on_get: Callable[[], StubResponse] | None = None,
    ) -> None:
        self._response = response
        self._error = error
        self._clock = clock
        self._latency = latency
        self._on_get = on_get
        self.requests: list[dict[str, Any]] = []

    def get(self, url: str, timeout: float | None = None, stream: bool = False) -> StubResponse:
        self.requests.append({"url": url, "timeout": timeout, "stream": stream})
        if timeout is not None and timeout <= 0:
            # urllib3 refuses non-positive timeouts with a plain ValueError
            raise ValueError(f"Attempted to set timeout to {timeout}, but the timeout cannot be <= 0")
        if self._clock is not None:
            self._clock.advance(self._latency)
        if self._error is not None:
            raise self._error
        if self._on_get is not None:
            return self._on_get()
        assert self._response is not None
        return self._response
