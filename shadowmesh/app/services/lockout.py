"""
Account lockout state machine.

States per credential record:
- Unlocked(failed_attempts) with 0 <= failed_attempts < max_attempts
- Locked(until)

A lock whose time has passed is read as Unlocked(0) (lazy expiry); the record
is rewritten on the next transition rather than cleaned up eagerly.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

MAX_LOGIN_ATTEMPTS = 5
LOCKOUT_DURATION = timedelta(minutes=15)


@dataclass(frozen=True)
class LockoutState:
    failed_attempts: int = 0
    locked_until: Optional[datetime] = None

    def is_locked(self, now: datetime) -> bool:
        return self.locked_until is not None and now < self.locked_until

    def minutes_remaining(self, now: datetime) -> int:
        if not self.is_locked(now):
            return 0
        return math.ceil((self.locked_until - now).total_seconds() / 60)


@dataclass(frozen=True)
class LockoutPolicy:
    max_attempts: int = MAX_LOGIN_ATTEMPTS
    lockout_duration: timedelta = LOCKOUT_DURATION

    def current(self, failed_attempts: int, locked_until: Optional[datetime], now: datetime) -> LockoutState:
        """Read stored fields, applying lazy expiry"""
        if locked_until is not None and now >= locked_until:
            return LockoutState()
        return LockoutState(failed_attempts=failed_attempts, locked_until=locked_until)

    def on_failure(self, state: LockoutState, now: datetime) -> LockoutState:
        attempts = state.failed_attempts + 1
        if attempts >= self.max_attempts:
            return LockoutState(failed_attempts=attempts, locked_until=now + self.lockout_duration)
        return LockoutState(failed_attempts=attempts, locked_until=None)

    def on_success(self) -> LockoutState:
        return LockoutState()
