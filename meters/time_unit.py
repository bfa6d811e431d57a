"""Time units used by timers, time gauges and long task timers"""
from enum import Enum


class TimeUnit(Enum):
    """Time units with their length in nanoseconds"""
    NANOSECONDS = 1
    MICROSECONDS = 1_000
    MILLISECONDS = 1_000_000
    SECONDS = 1_000_000_000
    MINUTES = 60_000_000_000
    HOURS = 3_600_000_000_000
    DAYS = 86_400_000_000_000

    @property
    def label(self) -> str:
        """Lowercase name used in exported payloads"""
        return self.name.lower()

    def convert(self, amount: float, target: "TimeUnit") -> float:
        """Convert an amount expressed in this unit to the target unit"""
        if self is target:
            return amount
        return amount * self.value / target.value

    @classmethod
    def parse(cls, value) -> "TimeUnit":
        """Parse a unit from its name, case-insensitive"""
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown time unit: {value}") from None
