from shadowmesh.app.services.clock import Clock


class FixedClock(Clock):
    """Manually advanced clock for deterministic tests"""

    def __init__(self, timestamp: float = 1_700_000_000.0):
        self.current = timestamp

    def timestamp(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds
