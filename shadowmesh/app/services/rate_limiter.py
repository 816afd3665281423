"""
In-process fixed-window rate limiter.

Windows are aligned to multiples of the window length, so a client can burst
up to twice the limit across a window boundary. This is an abuse deterrent,
not a security boundary: state lives in memory only and is lost on restart.
Persistent protection (admin lockout) lives in the credential store.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Dict, Optional, Tuple

from .clock import Clock, SystemClock

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL_SECONDS = 300


@dataclass(frozen=True)
class RateLimitPolicy:
    """Named limit: at most max_requests per window_seconds per identifier"""

    name: str
    max_requests: int
    window_seconds: int

    @property
    def window_ms(self) -> int:
        return self.window_seconds * 1000


OTP_REQUEST = RateLimitPolicy("otp_request", max_requests=5, window_seconds=3600)
PASSWORD_RESET_REQUEST = RateLimitPolicy("password_reset_request", max_requests=3, window_seconds=3600)
PASSWORD_RESET_VERIFY = RateLimitPolicy("password_reset_verify", max_requests=5, window_seconds=600)
TWO_FACTOR_VERIFY = RateLimitPolicy("two_factor_verify", max_requests=5, window_seconds=300)
MEMBER_LOGIN = RateLimitPolicy("member_login", max_requests=5, window_seconds=900)


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    reset_at: datetime


@dataclass
class _Window:
    reset_at_ms: int
    count: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock)


class RateLimiter:
    """
    Fixed-window counter keyed by identifier.

    Owned by the application (one instance per process) and passed to use
    cases explicitly. Each window carries its own lock so unrelated
    identifiers never contend.
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        sweep_interval_seconds: int = DEFAULT_SWEEP_INTERVAL_SECONDS,
    ):
        self.clock = clock or SystemClock()
        self.sweep_interval_ms = sweep_interval_seconds * 1000
        self._windows: Dict[Tuple[str, int], _Window] = {}
        self._last_sweep_ms = self._now_ms()

    def _now_ms(self) -> int:
        return int(self.clock.timestamp() * 1000)

    def check_and_consume(
        self, identifier: str, max_requests: int, window_ms: int
    ) -> RateLimitDecision:
        """
        Count one request for identifier in the current window.

        Returns:
            RateLimitDecision(allowed, remaining, reset_at)
        """
        now_ms = self._now_ms()
        self._maybe_sweep(now_ms)

        bucket = now_ms // window_ms
        key = (identifier, bucket)
        # dict.setdefault is atomic, so two racing first requests share one window
        window = self._windows.setdefault(key, _Window(reset_at_ms=(bucket + 1) * window_ms))

        with window.lock:
            if window.count >= max_requests:
                return RateLimitDecision(
                    allowed=False,
                    remaining=0,
                    reset_at=_to_datetime(window.reset_at_ms),
                )
            window.count += 1
            return RateLimitDecision(
                allowed=True,
                remaining=max_requests - window.count,
                reset_at=_to_datetime(window.reset_at_ms),
            )

    def consume(self, policy: RateLimitPolicy, identifier: str) -> RateLimitDecision:
        """Apply a named policy; identifiers are namespaced by policy name"""
        decision = self.check_and_consume(
            f"{policy.name}:{identifier}", policy.max_requests, policy.window_ms
        )
        if not decision.allowed:
            logger.info(f"Rate limit exceeded for policy {policy.name}")
        return decision

    def sweep(self) -> int:
        """Drop expired windows. Returns number of windows removed."""
        now_ms = self._now_ms()
        self._last_sweep_ms = now_ms
        removed = 0
        for key, window in list(self._windows.items()):
            if now_ms >= window.reset_at_ms:
                if self._windows.pop(key, None) is not None:
                    removed += 1
        return removed

    def _maybe_sweep(self, now_ms: int) -> None:
        if now_ms - self._last_sweep_ms >= self.sweep_interval_ms:
            self.sweep()

    def __len__(self) -> int:
        return len(self._windows)


def _to_datetime(ms: int) -> datetime:
    return datetime.fromtimestamp(ms / 1000, UTC).replace(tzinfo=None)
