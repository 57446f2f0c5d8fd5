"""Request counting for the static file server."""

from __future__ import annotations

import threading

from starlette.types import ASGIApp, Receive, Scope, Send


class HitCounter:
    """Thread-safe integer counter shared between requests."""

    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    def reset(self) -> None:
        with self._lock:
            self._value = 0


class MetricsMiddleware:
    """ASGI middleware that counts every HTTP request before delegating to ``app``."""

    def __init__(self, app: ASGIApp, counter: HitCounter) -> None:
        self.app = app
        self.counter = counter

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            self.counter.increment()
        await self.app(scope, receive, send)


__all__ = ["HitCounter", "MetricsMiddleware"]
