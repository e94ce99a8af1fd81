"""Per-client fixed-window limits for the sign-in/sign-up endpoints."""
from __future__ import annotations

import threading
import time
from typing import Callable, Dict, Tuple

from fastapi import HTTPException, Request


class RateLimiter:
    """Counts hits per key inside fixed windows; expired windows are swept out."""

    def __init__(self, *, trust_proxy_headers: bool = False, clock: Callable[[], float] = time.monotonic) -> None:
        self.trust_proxy_headers = trust_proxy_headers
        self._clock = clock
        # key -> (hits in window, window end)
        self._windows: Dict[str, Tuple[int, float]] = {}
        self._next_sweep = 0.0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._windows)

    def _sweep(self, now: float) -> None:
        expired = [key for key, (_, ends) in self._windows.items() if ends <= now]
        for key in expired:
            del self._windows[key]

    def hit(self, key: str, limit: int, window_seconds: int) -> bool:
        """Record one hit; False once ``key`` is over ``limit`` in the current window."""
        now = self._clock()
        with self._lock:
            if now >= self._next_sweep:
                self._sweep(now)
                self._next_sweep = now + window_seconds
            count, ends = self._windows.get(key, (0, now + window_seconds))
            if now >= ends:
                count, ends = 0, now + window_seconds
            count += 1
            self._windows[key] = (count, ends)
            return count <= limit

    def client_ip(self, request: Request) -> str:
        if self.trust_proxy_headers:
            forwarded = request.headers.get("x-forwarded-for")
            if forwarded:
                return forwarded.split(",")[0].strip()
        if request.client and request.client.host:
            return request.client.host
        return "unknown"

    def check_request(self, request: Request, scope: str, *, limit: int, window_seconds: int) -> None:
        if limit <= 0:
            return
        if not self.hit(f"{scope}:{self.client_ip(request)}", limit, window_seconds):
            raise HTTPException(429, "Too many requests. Please try again shortly.")
