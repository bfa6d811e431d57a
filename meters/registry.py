"""Meter registry capability consumed by exporters"""
import dataclasses
import threading
from typing import Dict, List, Optional, Protocol, Sequence

from .models import MeterId, Tag
from logging_config import get_logger


logger = get_logger(__name__)


class MeterRegistry(Protocol):
    """Anything that can hand out the meters to publish"""

    def get_meters(self) -> Sequence:
        ...


class InMemoryMeterRegistry:
    """Holds the latest snapshot of each meter, keyed by meter id"""

    def __init__(self, common_tags: Optional[Dict[str, str]] = None):
        self.common_tags = [Tag(key, value) for key, value in (common_tags or {}).items()]
        self._meters: Dict[MeterId, object] = {}
        self._lock = threading.Lock()

    def register(self, meter):
        """Register a meter snapshot, replacing any previous snapshot with the same id"""
        if not hasattr(meter, "id") or not hasattr(meter, "kind"):
            raise ValueError("Meter must expose an id and a kind")

        if self.common_tags:
            meter = dataclasses.replace(meter, id=meter.id.with_tags(self.common_tags))

        with self._lock:
            replaced = meter.id in self._meters
            self._meters[meter.id] = meter

        logger.debug("Registered meter", meter=meter.id.name, kind=meter.kind.value, replaced=replaced)
        return meter

    def get_meters(self) -> List:
        with self._lock:
            return list(self._meters.values())
