"""Meter snapshot models handed to exporters at publish time"""
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, List, Optional, Sequence, Tuple

from .time_unit import TimeUnit


class MeterKind(Enum):
    """Closed set of meter kinds an exporter has to handle"""
    GAUGE = "gauge"
    COUNTER = "counter"
    TIMER = "timer"
    DISTRIBUTION_SUMMARY = "distribution_summary"
    LONG_TASK_TIMER = "long_task_timer"
    TIME_GAUGE = "time_gauge"
    FUNCTION_COUNTER = "function_counter"
    FUNCTION_TIMER = "function_timer"
    OTHER = "other"


class MeterType(Enum):
    """Coarse meter type reported to vendors"""
    COUNTER = "COUNTER"
    GAUGE = "GAUGE"
    LONG_TASK_TIMER = "LONG_TASK_TIMER"
    TIMER = "TIMER"
    DISTRIBUTION_SUMMARY = "DISTRIBUTION_SUMMARY"
    OTHER = "OTHER"

    def __str__(self) -> str:
        return self.value


class Statistic(Enum):
    """Measured statistic with its tag representation"""
    TOTAL = ("TOTAL", "total")
    TOTAL_TIME = ("TOTAL_TIME", "total")
    COUNT = ("COUNT", "count")
    MAX = ("MAX", "max")
    VALUE = ("VALUE", "value")
    UNKNOWN = ("UNKNOWN", "unknown")
    ACTIVE_TASKS = ("ACTIVE_TASKS", "active")
    DURATION = ("DURATION", "duration")

    @property
    def tag_value_representation(self) -> str:
        return self.value[1]


@dataclass(frozen=True)
class Tag:
    """Key/value dimension attached to a meter"""
    key: str
    value: str


@dataclass(frozen=True)
class Measurement:
    """Single statistic reading of a meter"""
    statistic: Statistic
    value: float


@dataclass(frozen=True)
class MeterId:
    """Identity of a meter: name, type, tags and base unit"""
    name: str
    meter_type: MeterType
    tags: Tuple[Tag, ...] = ()
    base_unit: Optional[str] = None

    def __post_init__(self):
        # Tags are kept sorted by key so ids compare independently of insertion order
        object.__setattr__(self, "tags", tuple(sorted(self.tags or (), key=lambda t: t.key)))

    def with_tags(self, tags: Sequence[Tag]) -> "MeterId":
        """Return a copy with extra tags; existing keys are not overridden"""
        existing = {tag.key for tag in self.tags}
        merged = list(self.tags) + [tag for tag in tags if tag.key not in existing]
        return MeterId(self.name, self.meter_type, tuple(merged), self.base_unit)

    def get_convention_name(self, naming_convention) -> str:
        return naming_convention.name(self.name, self.meter_type, self.base_unit)

    def get_convention_tags(self, naming_convention) -> List[Tag]:
        return [
            Tag(naming_convention.tag_key(tag.key), naming_convention.tag_value(tag.value))
            for tag in self.tags
        ]


@dataclass
class Meter:
    """Snapshot of a meter with arbitrary measurements"""
    id: MeterId
    measurements: List[Measurement] = field(default_factory=list)

    kind: ClassVar[MeterKind] = MeterKind.OTHER

    def measure(self) -> List[Measurement]:
        return list(self.measurements)


@dataclass
class Counter:
    """Monotonic counter snapshot"""
    id: MeterId
    count: float

    kind: ClassVar[MeterKind] = MeterKind.COUNTER

    def measure(self) -> List[Measurement]:
        return [Measurement(Statistic.COUNT, self.count)]


@dataclass
class FunctionCounter(Counter):
    """Counter whose value is read from a function at publish time"""

    kind: ClassVar[MeterKind] = MeterKind.FUNCTION_COUNTER


@dataclass
class Gauge:
    """Instantaneous value snapshot"""
    id: MeterId
    value: float

    kind: ClassVar[MeterKind] = MeterKind.GAUGE

    def measure(self) -> List[Measurement]:
        return [Measurement(Statistic.VALUE, self.value)]


@dataclass
class TimeGauge:
    """Gauge tracking a time value expressed in base_time_unit"""
    id: MeterId
    amount: float
    base_time_unit: TimeUnit = TimeUnit.SECONDS

    kind: ClassVar[MeterKind] = MeterKind.TIME_GAUGE

    def value(self, unit: Optional[TimeUnit] = None) -> float:
        return self.base_time_unit.convert(self.amount, unit or self.base_time_unit)

    def measure(self) -> List[Measurement]:
        return [Measurement(Statistic.VALUE, self.amount)]


@dataclass
class Timer:
    """Timer snapshot; total and maximum are expressed in base_time_unit"""
    id: MeterId
    count: int
    total: float
    maximum: float
    base_time_unit: TimeUnit = TimeUnit.SECONDS

    kind: ClassVar[MeterKind] = MeterKind.TIMER

    def total_time(self, unit: TimeUnit) -> float:
        return self.base_time_unit.convert(self.total, unit)

    def max(self, unit: TimeUnit) -> float:
        return self.base_time_unit.convert(self.maximum, unit)

    def mean(self, unit: TimeUnit) -> float:
        return self.total_time(unit) / self.count if self.count else 0.0

    def measure(self) -> List[Measurement]:
        return [
            Measurement(Statistic.COUNT, self.count),
            Measurement(Statistic.TOTAL_TIME, self.total),
            Measurement(Statistic.MAX, self.maximum),
        ]


@dataclass
class FunctionTimer:
    """Timer backed by count and total-time functions; has no maximum"""
    id: MeterId
    count: float
    total: float
    base_time_unit: TimeUnit = TimeUnit.SECONDS

    kind: ClassVar[MeterKind] = MeterKind.FUNCTION_TIMER

    def total_time(self, unit: TimeUnit) -> float:
        return self.base_time_unit.convert(self.total, unit)

    def mean(self, unit: TimeUnit) -> float:
        return self.total_time(unit) / self.count if self.count else 0.0

    def measure(self) -> List[Measurement]:
        return [
            Measurement(Statistic.COUNT, self.count),
            Measurement(Statistic.TOTAL_TIME, self.total),
        ]


@dataclass
class DistributionSummary:
    """Distribution of recorded amounts"""
    id: MeterId
    count: int
    total: float
    maximum: float

    kind: ClassVar[MeterKind] = MeterKind.DISTRIBUTION_SUMMARY

    @property
    def mean(self) -> float:
        return self.total / self.count if self.count else 0.0

    def measure(self) -> List[Measurement]:
        return [
            Measurement(Statistic.COUNT, self.count),
            Measurement(Statistic.TOTAL, self.total),
            Measurement(Statistic.MAX, self.maximum),
        ]


@dataclass
class LongTaskTimer:
    """In-flight task timer; duration is expressed in base_time_unit"""
    id: MeterId
    active_tasks: int
    total_duration: float
    base_time_unit: TimeUnit = TimeUnit.SECONDS

    kind: ClassVar[MeterKind] = MeterKind.LONG_TASK_TIMER

    def duration(self, unit: TimeUnit) -> float:
        return self.base_time_unit.convert(self.total_duration, unit)

    def measure(self) -> List[Measurement]:
        return [
            Measurement(Statistic.ACTIVE_TASKS, self.active_tasks),
            Measurement(Statistic.DURATION, self.total_duration),
        ]


def is_finite(value) -> bool:
    """True for real numbers that are neither NaN nor infinite"""
    try:
        return math.isfinite(value)
    except TypeError:
        return False
