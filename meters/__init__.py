"""Meter snapshots, naming conventions and their translation into vendor attribute maps"""
from .models import (
    Counter, DistributionSummary, FunctionCounter, FunctionTimer, Gauge, LongTaskTimer,
    Measurement, Meter, MeterId, MeterKind, MeterType, Statistic, Tag, TimeGauge, Timer,
)
from .naming import (
    CamelCaseNamingConvention, IdentityNamingConvention, NamingConvention,
    NewRelicNamingConvention,
)
from .time_unit import TimeUnit
from .translator import MeterAttributeTranslator

__all__ = [
    'Counter',
    'DistributionSummary',
    'FunctionCounter',
    'FunctionTimer',
    'Gauge',
    'LongTaskTimer',
    'Measurement',
    'Meter',
    'MeterId',
    'MeterKind',
    'MeterType',
    'Statistic',
    'Tag',
    'TimeGauge',
    'Timer',
    'NamingConvention',
    'IdentityNamingConvention',
    'CamelCaseNamingConvention',
    'NewRelicNamingConvention',
    'TimeUnit',
    'MeterAttributeTranslator',
]
