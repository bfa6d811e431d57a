"""Naming conventions turning dotted meter names and tags into vendor-safe strings"""
import re
from abc import ABC, abstractmethod
from typing import Optional

from .models import MeterType


class NamingConvention(ABC):
    """Stateless policy for meter names, tag keys and tag values"""

    @abstractmethod
    def name(self, name: str, meter_type: MeterType, base_unit: Optional[str] = None) -> str:
        pass

    def tag_key(self, key: str) -> str:
        return key

    def tag_value(self, value: str) -> str:
        return value


class IdentityNamingConvention(NamingConvention):
    """Leaves names and tags untouched"""

    def name(self, name: str, meter_type: MeterType, base_unit: Optional[str] = None) -> str:
        return name


class CamelCaseNamingConvention(NamingConvention):
    """http.server.requests -> httpServerRequests"""

    def name(self, name: str, meter_type: MeterType, base_unit: Optional[str] = None) -> str:
        return self._to_camel_case(name)

    def tag_key(self, key: str) -> str:
        return self._to_camel_case(key)

    @staticmethod
    def _to_camel_case(value: str) -> str:
        parts = value.split(".")
        converted = []
        for index, part in enumerate(parts):
            if not part:
                continue
            if index == 0 or part[0].isupper():
                converted.append(part)
            else:
                converted.append(part[0].upper() + part[1:])
        return "".join(converted)


class NewRelicNamingConvention(NamingConvention):
    """camelCase names and keys with characters New Relic rejects replaced by '_'"""

    INVALID_CHARACTERS = re.compile(r"[^\w:]", re.ASCII)

    def __init__(self, delegate: Optional[NamingConvention] = None):
        self.delegate = delegate or CamelCaseNamingConvention()

    def name(self, name: str, meter_type: MeterType, base_unit: Optional[str] = None) -> str:
        return self._to_valid_string(self.delegate.name(name, meter_type, base_unit))

    def tag_key(self, key: str) -> str:
        return self._to_valid_string(self.delegate.tag_key(key))

    def tag_value(self, value: str) -> str:
        return self.delegate.tag_value(value)

    @classmethod
    def _to_valid_string(cls, value: str) -> str:
        return cls.INVALID_CHARACTERS.sub("_", value)
