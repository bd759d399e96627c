from __future__ import annotations

from collections import defaultdict, deque
from threading import Lock
import time
from typing import Deque

from fastapi import HTTPException, Request, status


class SlidingWindowLimiter:
    def __init__(self) -> None:
        self._attempts: dict[str, Deque[float]] = defaultdict(deque)
        self._lock = Lock()

    def hit(self, key: str, *, limit: int, window_seconds: int) -> int | None:
        """Record one attempt; return seconds to wait when over ``limit``."""
        now = time.monotonic()
        cutoff = now - window_seconds
        with self._lock:
            attempts = self._attempts[key]
            while attempts and attempts[0] < cutoff:
                attempts.popleft()
            if len(attempts) >= limit:
                return max(1, int(attempts[0] + window_seconds - now))
            attempts.append(now)
        return None

    def forget(self, key: str) -> None:
        with self._lock:
            self._attempts.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._attempts.clear()


_limiter = SlidingWindowLimiter()


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def login_key(request: Request, username: str) -> str:
    return f"auth.login|{_client_ip(request)}|{username.strip().lower()}"


def enforce_rate_limit(request: Request, *, username: str, limit: int, window_seconds: int) -> None:
    retry_after = _limiter.hit(login_key(request, username), limit=limit, window_seconds=window_seconds)
    if retry_after is None:
        return
    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail=f"Too many login attempts. Try again in {retry_after} second(s).",
        headers={"Retry-After": str(retry_after)},
    )


def reset_rate_limit(request: Request, *, username: str) -> None:
    _limiter.forget(login_key(request, username))


def clear_rate_limiter() -> None:
    _limiter.clear()
