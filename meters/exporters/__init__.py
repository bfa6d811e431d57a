"""Vendor exporters"""
from .base import BaseExporter, ConfigurationError, ExporterFactory, PublishResult

__all__ = [
    'BaseExporter',
    'ConfigurationError',
    'ExporterFactory',
    'PublishResult',
]
