"""Tests for configuration module"""
import os
from unittest.mock import patch
import pytest
from pydantic import ValidationError

from config import Config, ExportFormat
from meters.time_unit import TimeUnit


class TestConfig:
    """Test configuration validation and parsing"""

    def test_default_config(self):
        """Test default configuration values"""
        config = Config()

        assert config.export_format == ExportFormat.NEWRELIC
        assert config.enabled is True
        assert config.step == 60
        assert config.base_time_unit == TimeUnit.SECONDS
        assert config.newrelic_event_type == "MeterSample"
        assert config.newrelic_meter_name_event_type_enabled is False
        assert config.cloudwatch_namespace is None
        assert config.log_level == "INFO"
        assert config.common_tags == {}

    def test_environment_override(self):
        """Test configuration override from environment variables"""
        env_vars = {
            "EXPORT_FORMAT": "cloudwatch",
            "STEP": "10",
            "BASE_TIME_UNIT": "milliseconds",
            "CLOUDWATCH_NAMESPACE": "MyApp",
            "NEWRELIC_METER_NAME_EVENT_TYPE_ENABLED": "true",
            "LOG_LEVEL": "debug",
        }

        with patch.dict(os.environ, env_vars):
            config = Config()

            assert config.export_format == ExportFormat.CLOUDWATCH
            assert config.is_cloudwatch_format() is True
            assert config.is_newrelic_format() is False
            assert config.step == 10
            assert config.base_time_unit == TimeUnit.MILLISECONDS
            assert config.cloudwatch_namespace == "MyApp"
            assert config.newrelic_meter_name_event_type_enabled is True
            assert config.log_level == "DEBUG"

    def test_validation_step(self):
        """Test validation of publish step"""
        with patch.dict(os.environ, {"STEP": "0"}):
            with pytest.raises(ValidationError):
                Config()

    def test_validation_base_time_unit(self):
        """Test rejection of unknown time units"""
        with patch.dict(os.environ, {"BASE_TIME_UNIT": "fortnights"}):
            with pytest.raises(ValidationError):
                Config()

    def test_validation_log_level(self):
        """Test rejection of unknown log levels"""
        with patch.dict(os.environ, {"LOG_LEVEL": "chatty"}):
            with pytest.raises(ValidationError):
                Config()

    def test_validation_export_format(self):
        """Test rejection of unsupported export formats"""
        with patch.dict(os.environ, {"EXPORT_FORMAT": "statsd"}):
            with pytest.raises(ValidationError):
                Config()

    def test_common_tags_parsing(self):
        """Test common tags parsing"""
        with patch.dict(os.environ, {"COMMON_TAGS_STR": "env=prod, region = eu-west-1,broken,=x"}):
            config = Config()

            assert config.common_tags == {"env": "prod", "region": "eu-west-1"}

