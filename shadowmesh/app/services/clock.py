import time
from abc import ABC, abstractmethod
from datetime import UTC, datetime


class Clock(ABC):
    """Time source injected into everything time-dependent"""

    @abstractmethod
    def timestamp(self) -> float:
        """Unix time in seconds"""
        pass

    def now(self) -> datetime:
        """Naive UTC datetime, comparable with stored DateTime columns"""
        return datetime.fromtimestamp(self.timestamp(), UTC).replace(tzinfo=None)


class SystemClock(Clock):
    def timestamp(self) -> float:
        return time.time()
