"""CloudWatch exporter writing embedded metric format (EMF) documents as log lines"""
import json
import sys
import time
from typing import Any, Callable, Dict, Optional
from .base import BaseExporter, ConfigurationError
from config import Config
from logging_config import get_logger
from ..models import MeterId, is_finite
from ..naming import IdentityNamingConvention, NamingConvention
from ..translator import (
    ACTIVE_TASKS, AVG, COUNT, DURATION, MAX, METRIC_NAME, METRIC_TYPE, THROUGHPUT,
    TIME_UNIT, TOTAL_TIME, VALUE, AttributeMap, MeterAttributeTranslator,
)


logger = get_logger(__name__)

MAX_DIMENSIONS = 30

COUNT_KEYS = {COUNT, THROUGHPUT, ACTIVE_TASKS}
TIME_KEYS = {AVG, TOTAL_TIME, MAX, DURATION, VALUE}
CONTEXT_KEYS = {METRIC_NAME, METRIC_TYPE, TIME_UNIT}

CLOUDWATCH_TIME_UNITS = {
    "seconds": "Seconds",
    "milliseconds": "Milliseconds",
    "microseconds": "Microseconds",
}


def write_to_stdout(line: str) -> None:
    sys.stdout.write(line + "\n")
    sys.stdout.flush()


class EmbeddedMetricsEncoder:
    """Turns one attribute map into one EMF document.

    Numeric attributes become metrics named ``<meter name>.<attribute>``,
    string attributes (the meter's tags) become dimensions. NaN and infinite
    values cannot be represented in EMF and are dropped.
    """

    def encode(self, namespace: str, attributes: AttributeMap, timestamp_ms: int) -> Optional[Dict[str, Any]]:
        """Build the document, or None when no metric is left to report"""
        meter_name = attributes.get(METRIC_NAME, "")
        time_unit = attributes.get(TIME_UNIT)

        document: Dict[str, Any] = {}
        metric_definitions = []
        dimension_keys = []

        for key, value in attributes.items():
            if key in CONTEXT_KEYS:
                continue

            if isinstance(value, str):
                if len(dimension_keys) >= MAX_DIMENSIONS:
                    logger.warning("Dropping dimension over EMF limit", meter=meter_name,
                                   dimension=key, limit=MAX_DIMENSIONS)
                    continue
                dimension_keys.append(key)
                document[key] = value
                continue

            if not is_finite(value):
                logger.debug("Skipping non-finite value", meter=meter_name, statistic=key)
                continue

            metric_name = f"{meter_name}.{key}" if meter_name else key
            metric_definitions.append({"Name": metric_name, "Unit": self._unit_for(key, time_unit)})
            document[metric_name] = value

        if not metric_definitions:
            return None

        document["_aws"] = {
            "Timestamp": timestamp_ms,
            "CloudWatchMetrics": [{
                "Namespace": namespace,
                "Dimensions": [dimension_keys],
                "Metrics": metric_definitions,
            }],
        }
        return document

    @staticmethod
    def _unit_for(key: str, time_unit: Optional[str]) -> str:
        if key in COUNT_KEYS:
            return "Count"
        if time_unit and key in TIME_KEYS:
            return CLOUDWATCH_TIME_UNITS.get(time_unit, "None")
        return "None"


class CloudWatchEmbeddedMetricsExporter(BaseExporter):
    """Publishes meters as EMF JSON lines picked up by the CloudWatch agent or Lambda runtime"""

    def __init__(self, config: Config, sink: Optional[Callable[[str], None]] = None,
                 naming_convention: Optional[NamingConvention] = None,
                 clock: Callable[[], float] = time.time):
        if not config.cloudwatch_namespace:
            raise ConfigurationError("namespace must be set to report metrics to CloudWatch")

        self.naming_convention = naming_convention or IdentityNamingConvention()
        super().__init__(
            config,
            MeterAttributeTranslator(
                self.naming_convention,
                per_meter_event_type=False,
                base_time_unit=config.base_time_unit,
            ),
        )
        self.sink = sink or write_to_stdout
        self.clock = clock
        self.encoder = EmbeddedMetricsEncoder()

    def event_label(self, meter_id: MeterId) -> str:
        return self.config.cloudwatch_namespace

    def send(self, label: str, attributes: AttributeMap) -> bool:
        document = self.encoder.encode(label, attributes, int(self.clock() * 1000))
        if document is None:
            return False
        self.sink(json.dumps(document, allow_nan=False))
        return True
