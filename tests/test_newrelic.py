"""Tests for the New Relic agent exporter"""
import sys
from unittest.mock import Mock, call, patch
import pytest

from config import Config
from meters.exporters.base import ConfigurationError, ExporterFactory
from meters.exporters.newrelic import NewRelicAgentClient, NewRelicAgentExporter
from meters.models import Counter, Gauge, MeterId, MeterType, Tag, Timer
from meters.registry import InMemoryMeterRegistry


class TestNewRelicAgentExporter:
    """Test event type selection, payloads and failure isolation"""

    def setup_method(self):
        """Setup test fixtures"""
        self.config = Config(export_format="newrelic", newrelic_event_type="MeterSample")
        self.agent = Mock()
        self.exporter = NewRelicAgentExporter(self.config, agent=self.agent)
        self.registry = InMemoryMeterRegistry()

    def test_requires_event_type(self):
        """Test construction fails without an event type"""
        for event_type in ("", None):
            config = Config(newrelic_event_type=event_type, newrelic_meter_name_event_type_enabled=False)

            with pytest.raises(ConfigurationError):
                NewRelicAgentExporter(config, agent=Mock())

    def test_event_type_optional_with_meter_name_event_types(self):
        config = Config(newrelic_event_type="", newrelic_meter_name_event_type_enabled=True)

        exporter = NewRelicAgentExporter(config, agent=Mock())

        assert exporter.event_label(MeterId("http.requests", MeterType.COUNTER)) == "httpRequests"

    def test_publish_shared_event_type(self):
        """Test every meter is recorded under the configured event type with context attributes"""
        self.registry.register(Counter(MeterId("http.requests", MeterType.COUNTER, (Tag("uri", "/a"),)), 3.0))

        result = self.exporter.publish(self.registry)

        assert result.sent == 1
        self.agent.record_custom_event.assert_called_once_with("MeterSample", {
            "throughput": 3,
            "metricName": "httpRequests",
            "metricType": "COUNTER",
            "uri": "/a",
        })

    def test_publish_event_type_per_meter(self):
        """Test meter names become event types and are left out of the attributes"""
        config = Config(newrelic_meter_name_event_type_enabled=True)
        exporter = NewRelicAgentExporter(config, agent=self.agent)
        self.registry.register(Timer(MeterId("http.server.requests", MeterType.TIMER), 2, 1.0, 0.75))

        exporter.publish(self.registry)

        event_type, attributes = self.agent.record_custom_event.call_args[0]
        assert event_type == "httpServerRequests"
        assert attributes == {"count": 2, "avg": 0.5, "totalTime": 1, "max": 0.75, "timeUnit": "seconds"}

    def test_empty_attributes_not_sent(self):
        """Test meters without data never reach the agent"""
        self.registry.register(Gauge(MeterId("queue", MeterType.GAUGE), float("nan")))

        result = self.exporter.publish(self.registry)

        assert result.skipped == 1
        assert result.sent == 0
        self.agent.record_custom_event.assert_not_called()

    def test_send_failure_does_not_stop_other_meters(self):
        """Test one failing meter is logged and the next one is still sent"""
        self.registry.register(Counter(MeterId("a", MeterType.COUNTER), 1.0))
        self.registry.register(Counter(MeterId("b", MeterType.COUNTER), 2.0))
        self.agent.record_custom_event.side_effect = [RuntimeError("agent down"), None]

        result = self.exporter.publish(self.registry)

        assert result.meters == 2
        assert result.failed == 1
        assert result.sent == 1
        assert self.agent.record_custom_event.call_count == 2
        assert self.agent.record_custom_event.call_args[0][1]["metricName"] == "b"
        assert self.exporter.is_healthy() is False

    def test_healthy_after_clean_cycle(self):
        self.registry.register(Counter(MeterId("a", MeterType.COUNTER), 1.0))

        self.exporter.publish(self.registry)

        assert self.exporter.is_healthy() is True

    def test_factory_creates_new_relic_exporter(self):
        exporter = ExporterFactory.create_exporter(self.config, agent=self.agent)

        assert isinstance(exporter, NewRelicAgentExporter)


class TestNewRelicAgentClient:
    """Test the wrapper over the newrelic.agent module"""

    def test_records_against_application(self):
        agent_module = Mock()
        package = Mock(agent=agent_module)

        with patch.dict(sys.modules, {"newrelic": package, "newrelic.agent": agent_module}):
            client = NewRelicAgentClient("orders-service")
            client.record_custom_event("MeterSample", {"value": 1})

        agent_module.application.assert_called_once_with("orders-service")
        assert agent_module.record_custom_event.call_args == call(
            "MeterSample", {"value": 1}, application=agent_module.application.return_value
        )

    def test_default_application_is_bound(self):
        """Test events are recorded against the default app when no app name is configured"""
        agent_module = Mock()
        package = Mock(agent=agent_module)

        with patch.dict(sys.modules, {"newrelic": package, "newrelic.agent": agent_module}):
            client = NewRelicAgentClient()
            client.record_custom_event("MeterSample", {"value": 1})

        agent_module.application.assert_called_once_with(None)
        application = agent_module.record_custom_event.call_args.kwargs["application"]
        assert application is agent_module.application.return_value
        assert application is not None

    def test_default_config_binds_application(self):
        """Test the exporter built from default settings never records outside an application"""
        agent_module = Mock()
        package = Mock(agent=agent_module)
        registry = InMemoryMeterRegistry()
        registry.register(Counter(MeterId("requests", MeterType.COUNTER), 1.0))

        with patch.dict(sys.modules, {"newrelic": package, "newrelic.agent": agent_module}):
            exporter = NewRelicAgentExporter(Config())
            result = exporter.publish(registry)

        assert result.sent == 1
        assert agent_module.record_custom_event.call_args.kwargs["application"] is agent_module.application.return_value
