"""SignalFx metrics exporter plugin."""

from .config import DEFAULT_TIMEOUT, TYPE_STR, Config, decode_config
from .datapoint import Datapoint, MetricType
from .errors import (
    ConfigDecodeError,
    ExporterConfigError,
    ExporterShutdownError,
    InvalidTimeoutError,
    MissingEndpointError,
    SinkError,
    UnsupportedSignalError,
)
from .exporter import SignalFxMetricsExporter
from .factory import Factory
from .validation import check_config_structure, validate_config

__all__ = [
    "Config",
    "ConfigDecodeError",
    "DEFAULT_TIMEOUT",
    "Datapoint",
    "ExporterConfigError",
    "ExporterShutdownError",
    "Factory",
    "InvalidTimeoutError",
    "MetricType",
    "MissingEndpointError",
    "SignalFxMetricsExporter",
    "SinkError",
    "TYPE_STR",
    "UnsupportedSignalError",
    "check_config_structure",
    "decode_config",
    "validate_config",
]
