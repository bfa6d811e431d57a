"""Translation of meter snapshots into vendor attribute maps"""
import math
from typing import Dict, Iterable, Union

from .models import Measurement, MeterId, MeterKind, is_finite
from .naming import NamingConvention
from .time_unit import TimeUnit


AttributeValue = Union[int, float, str]
AttributeMap = Dict[str, AttributeValue]

THROUGHPUT = "throughput"
VALUE = "value"
COUNT = "count"
AVG = "avg"
TOTAL = "total"
TOTAL_TIME = "totalTime"
MAX = "max"
ACTIVE_TASKS = "activeTasks"
DURATION = "duration"
TIME_UNIT = "timeUnit"
METRIC_NAME = "metricName"
METRIC_TYPE = "metricType"


def whole_or_decimal(value: float) -> Union[int, float]:
    """Whole numbers become int, everything else (including NaN/inf) stays float"""
    value = float(value)
    if math.isfinite(value) and math.floor(value) == value:
        return int(value)
    return value


class MeterAttributeTranslator:
    """Builds one attribute map per meter.

    Every ``translate_*`` method is pure: it allocates a fresh map, fills the
    statistics of its meter kind and then appends the contextual attributes
    (metric name, metric type and convention tags). A map left empty because
    all its values were non-finite must not be sent.
    """

    def __init__(self, naming_convention: NamingConvention,
                 per_meter_event_type: bool = False,
                 base_time_unit: TimeUnit = TimeUnit.SECONDS):
        self.naming_convention = naming_convention
        self.per_meter_event_type = per_meter_event_type
        self.base_time_unit = base_time_unit

    def translate(self, meter) -> AttributeMap:
        """Dispatch a meter snapshot to the translator for its kind"""
        kind = meter.kind
        unit = self.base_time_unit

        if kind in (MeterKind.COUNTER, MeterKind.FUNCTION_COUNTER):
            return self.translate_counter(meter.id, meter.count)
        if kind is MeterKind.GAUGE:
            return self.translate_gauge(meter.id, meter.value)
        if kind is MeterKind.TIME_GAUGE:
            return self.translate_time_gauge(meter.id, meter.value(meter.base_time_unit), meter.base_time_unit)
        if kind is MeterKind.DISTRIBUTION_SUMMARY:
            return self.translate_summary(meter.id, meter.count, meter.mean, meter.total, meter.maximum)
        if kind is MeterKind.TIMER:
            return self.translate_timer(
                meter.id, meter.count, meter.mean(unit), meter.total_time(unit), meter.max(unit), unit
            )
        if kind is MeterKind.FUNCTION_TIMER:
            return self.translate_function_timer(
                meter.id, meter.count, meter.mean(unit), meter.total_time(unit), unit
            )
        if kind is MeterKind.LONG_TASK_TIMER:
            return self.translate_long_task_timer(meter.id, meter.active_tasks, meter.duration(unit), unit)
        if kind is MeterKind.OTHER:
            return self.translate_generic_measurements(meter.id, meter.measure())

        raise TypeError(f"Unsupported meter kind: {kind!r}")

    def translate_counter(self, meter_id: MeterId, count: float) -> AttributeMap:
        attributes: AttributeMap = {}
        if is_finite(count):
            self.add_attribute(THROUGHPUT, count, attributes)
            self.add_meter_as_attributes(meter_id, attributes)
        return attributes

    def translate_gauge(self, meter_id: MeterId, value: float) -> AttributeMap:
        attributes: AttributeMap = {}
        if is_finite(value):
            self.add_attribute(VALUE, value, attributes)
            self.add_meter_as_attributes(meter_id, attributes)
        return attributes

    def translate_time_gauge(self, meter_id: MeterId, value: float, time_unit: TimeUnit) -> AttributeMap:
        attributes: AttributeMap = {}
        if is_finite(value):
            self.add_attribute(VALUE, value, attributes)
            self.add_attribute(TIME_UNIT, time_unit.label, attributes)
            self.add_meter_as_attributes(meter_id, attributes)
        return attributes

    def translate_summary(self, meter_id: MeterId, count: float, mean: float,
                          total: float, max_value: float) -> AttributeMap:
        # No finiteness gate here: summaries are always emitted
        attributes: AttributeMap = {}
        self.add_attribute(COUNT, count, attributes)
        self.add_attribute(AVG, mean, attributes)
        self.add_attribute(TOTAL, total, attributes)
        self.add_attribute(MAX, max_value, attributes)
        self.add_meter_as_attributes(meter_id, attributes)
        return attributes

    def translate_timer(self, meter_id: MeterId, count: float, mean: float, total: float,
                        max_value: float, time_unit: TimeUnit) -> AttributeMap:
        attributes: AttributeMap = {}
        self.add_attribute(COUNT, self._whole_count(count), attributes)
        self.add_attribute(AVG, mean, attributes)
        self.add_attribute(TOTAL_TIME, total, attributes)
        self.add_attribute(MAX, max_value, attributes)
        self.add_attribute(TIME_UNIT, time_unit.label, attributes)
        self.add_meter_as_attributes(meter_id, attributes)
        return attributes

    def translate_function_timer(self, meter_id: MeterId, count: float, mean: float,
                                 total: float, time_unit: TimeUnit) -> AttributeMap:
        attributes: AttributeMap = {}
        self.add_attribute(COUNT, self._whole_count(count), attributes)
        self.add_attribute(AVG, mean, attributes)
        self.add_attribute(TOTAL_TIME, total, attributes)
        self.add_attribute(TIME_UNIT, time_unit.label, attributes)
        self.add_meter_as_attributes(meter_id, attributes)
        return attributes

    def translate_long_task_timer(self, meter_id: MeterId, active_tasks: int,
                                  duration: float, time_unit: TimeUnit) -> AttributeMap:
        attributes: AttributeMap = {}
        self.add_attribute(ACTIVE_TASKS, active_tasks, attributes)
        self.add_attribute(DURATION, duration, attributes)
        self.add_attribute(TIME_UNIT, time_unit.label, attributes)
        self.add_meter_as_attributes(meter_id, attributes)
        return attributes

    def translate_generic_measurements(self, meter_id: MeterId,
                                       measurements: Iterable[Measurement]) -> AttributeMap:
        attributes: AttributeMap = {}
        for measurement in measurements:
            if not is_finite(measurement.value):
                continue
            self.add_attribute(measurement.statistic.tag_value_representation, measurement.value, attributes)

        if not attributes:
            return attributes

        self.add_meter_as_attributes(meter_id, attributes)
        return attributes

    def add_meter_as_attributes(self, meter_id: MeterId, attributes: AttributeMap) -> None:
        """Append metric name, metric type and tags to a map"""
        if not self.per_meter_event_type:
            # Only needed when every meter shares one event type
            attributes[METRIC_NAME] = meter_id.get_convention_name(self.naming_convention)
            attributes[METRIC_TYPE] = str(meter_id.meter_type)

        for tag in meter_id.get_convention_tags(self.naming_convention):
            attributes[tag.key] = tag.value

    def add_attribute(self, key: str, value: AttributeValue, attributes: AttributeMap) -> None:
        """Set one attribute; numbers are formatted, strings go through the naming convention"""
        if isinstance(value, str):
            attributes[self.naming_convention.tag_key(key)] = self.naming_convention.tag_value(value)
        else:
            attributes[self.naming_convention.tag_key(key)] = whole_or_decimal(value)

    @staticmethod
    def _whole_count(count: float) -> Union[int, float]:
        # Counts are integral; non-finite counts are passed through as floats
        return int(count) if is_finite(count) else count
