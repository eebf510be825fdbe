"""Shared abstract base classes for exporter plugins."""

from .base import BaseExporterFactory, BaseMetricsExporter, BaseMetricsSink

__all__ = [
    "BaseExporterFactory",
    "BaseMetricsExporter",
    "BaseMetricsSink",
]
