"""Configuration for the meter exporters"""
from enum import Enum
from pathlib import Path
from typing import Dict, Optional
from pydantic import Field, validator
from pydantic_settings import BaseSettings

from meters.time_unit import TimeUnit


class ExportFormat(Enum):
    """Supported vendor backends"""
    NEWRELIC = "newrelic"
    CLOUDWATCH = "cloudwatch"


class Config(BaseSettings):
    """Environment-based settings validated with pydantic"""

    # Publishing
    export_format: ExportFormat = Field(default=ExportFormat.NEWRELIC, description="Vendor backend (newrelic or cloudwatch)")
    enabled: bool = Field(default=True, description="Publish meters at all")
    step: int = Field(default=60, ge=1, description="Publish interval in seconds")
    base_time_unit: TimeUnit = Field(default=TimeUnit.SECONDS, description="Time unit for timer statistics")
    common_tags_str: str = Field(default="", description="Tags applied to every meter (comma-separated key=value)")

    # New Relic
    newrelic_event_type: Optional[str] = Field(default="MeterSample", description="Event type shared by all meters")
    newrelic_meter_name_event_type_enabled: bool = Field(default=False, description="Use each meter's name as its event type")
    newrelic_app_name: Optional[str] = Field(default=None, description="New Relic application to record events against")

    # CloudWatch embedded metric format
    cloudwatch_namespace: Optional[str] = Field(default=None, description="CloudWatch namespace")

    # Service identification
    service_name: str = Field(default="meter-exporters", description="Service name")
    service_version: str = Field(default="1.0.0", description="Service version")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_file: Path = Field(default=Path("/opt/meter-exporters/logs/app.log"), description="Log file")

    class Config:
        env_prefix = ""
        case_sensitive = False

    @validator('base_time_unit', pre=True)
    def parse_base_time_unit(cls, v):
        return TimeUnit.parse(v)

    @validator('log_level')
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return level

    @property
    def common_tags(self) -> Dict[str, str]:
        """Get common tags as a dict"""
        tags = {}
        for pair in self.common_tags_str.split(','):
            if '=' in pair:
                key, value = pair.split('=', 1)
                if key.strip():
                    tags[key.strip()] = value.strip()
        return tags

    def is_newrelic_format(self) -> bool:
        return self.export_format == ExportFormat.NEWRELIC

    def is_cloudwatch_format(self) -> bool:
        return self.export_format == ExportFormat.CLOUDWATCH
