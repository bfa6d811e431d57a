"""Base exporter interface and factory"""
import abc
import time
from dataclasses import dataclass
from enum import Enum
from config import Config
from logging_config import get_logger
from ..models import MeterId
from ..registry import MeterRegistry
from ..translator import AttributeMap, MeterAttributeTranslator


logger = get_logger(__name__)


class ConfigurationError(ValueError):
    """Required exporter configuration is missing"""


class SendOutcome(Enum):
    """What happened to one meter during a publish cycle"""
    SENT = "sent"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class PublishResult:
    """Outcome of one publish cycle"""
    meters: int = 0
    sent: int = 0
    skipped: int = 0
    failed: int = 0
    publish_time: float = 0.0


class BaseExporter(abc.ABC):
    """Publishes every meter of a registry as one vendor record"""

    def __init__(self, config: Config, translator: MeterAttributeTranslator):
        self.config = config
        self.translator = translator
        self._healthy = True

    @abc.abstractmethod
    def event_label(self, meter_id: MeterId) -> str:
        """Event type or namespace the meter is sent under"""

    @abc.abstractmethod
    def send(self, label: str, attributes: AttributeMap) -> bool:
        """Hand one attribute map to the vendor client; False when nothing was written"""

    async def start(self) -> None:
        """Initialize the exporter"""
        logger.info("Exporter started", exporter=type(self).__name__)

    async def shutdown(self) -> None:
        """Cleanup the exporter"""
        logger.info("Exporter shutdown", exporter=type(self).__name__)

    def is_healthy(self) -> bool:
        """False once the last publish cycle had send failures"""
        return self._healthy

    def publish(self, registry: MeterRegistry) -> PublishResult:
        """Translate and send every meter; one failing meter never stops the others"""
        result = PublishResult()
        start_time = time.time()

        for meter in registry.get_meters():
            result.meters += 1
            outcome = self.send_attributes(meter.id, self.translator.translate(meter))
            if outcome is SendOutcome.SENT:
                result.sent += 1
            elif outcome is SendOutcome.SKIPPED:
                result.skipped += 1
            else:
                result.failed += 1

        result.publish_time = time.time() - start_time
        self._healthy = result.failed == 0
        return result

    def send_attributes(self, meter_id: MeterId, attributes: AttributeMap) -> SendOutcome:
        """Send a non-empty map; failures are logged, never raised"""
        if not attributes:
            return SendOutcome.SKIPPED

        label = self.event_label(meter_id)
        try:
            written = self.send(label, attributes)
        except Exception as e:
            logger.warning(
                "Failed to send meter",
                exporter=type(self).__name__,
                meter=meter_id.name,
                label=label,
                error=str(e),
                event_type="send_failure",
                exc_info=True
            )
            return SendOutcome.FAILED

        if not written:
            logger.debug("Nothing written for meter", meter=meter_id.name, label=label)
            return SendOutcome.SKIPPED
        return SendOutcome.SENT


class ExporterFactory:
    """Factory for creating exporters based on configuration"""

    @staticmethod
    def create_exporter(config: Config, **kwargs) -> BaseExporter:
        """Create an exporter for the configured export format"""
        if config.is_newrelic_format():
            from .newrelic import NewRelicAgentExporter
            return NewRelicAgentExporter(config, **kwargs)
        elif config.is_cloudwatch_format():
            from .cloudwatch import CloudWatchEmbeddedMetricsExporter
            return CloudWatchEmbeddedMetricsExporter(config, **kwargs)
        else:
            raise ConfigurationError(f"Unsupported export format: {config.export_format}")
