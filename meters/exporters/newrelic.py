"""New Relic exporter recording one custom event per meter through the agent API"""
from typing import Optional
from .base import BaseExporter, ConfigurationError
from config import Config
from logging_config import get_logger
from ..models import MeterId
from ..naming import NamingConvention, NewRelicNamingConvention
from ..translator import AttributeMap, MeterAttributeTranslator


logger = get_logger(__name__)


class NewRelicAgentClient:
    """Thin wrapper over the newrelic.agent module"""

    def __init__(self, app_name: Optional[str] = None):
        import newrelic.agent

        self._agent = newrelic.agent
        # Outside a transaction the agent drops events not bound to an application
        self._application = newrelic.agent.application(app_name)

    def record_custom_event(self, event_type: str, attributes: AttributeMap) -> None:
        # The agent buffers events in a reservoir and ships them on its own harvest cycle
        self._agent.record_custom_event(event_type, attributes, application=self._application)


class NewRelicAgentExporter(BaseExporter):
    """Publishes meters as New Relic custom events, one event per meter"""

    def __init__(self, config: Config, agent=None, naming_convention: Optional[NamingConvention] = None):
        if not config.newrelic_meter_name_event_type_enabled and not config.newrelic_event_type:
            raise ConfigurationError("eventType must be set to report metrics to New Relic")

        self.naming_convention = naming_convention or NewRelicNamingConvention()
        super().__init__(
            config,
            MeterAttributeTranslator(
                self.naming_convention,
                per_meter_event_type=config.newrelic_meter_name_event_type_enabled,
                base_time_unit=config.base_time_unit,
            ),
        )
        self.agent = agent if agent is not None else NewRelicAgentClient(config.newrelic_app_name)

    def event_label(self, meter_id: MeterId) -> str:
        if self.config.newrelic_meter_name_event_type_enabled:
            return meter_id.get_convention_name(self.naming_convention)
        return self.config.newrelic_event_type

    def send(self, label: str, attributes: AttributeMap) -> bool:
        self.agent.record_custom_event(label, attributes)
        return True
