"""Exceptions raised by the SignalFx exporter factory and runtime."""

from __future__ import annotations

from typing import Optional


class ExporterConfigError(ValueError):
    """Base class for configuration problems detected before an exporter exists.

    ``kind`` is a stable identifier operators and hosts can branch on, while
    the string form of the exception is the human readable diagnostic.
    """

    kind: str = "ConfigError"

    def __init__(self, message: str, *, exporter_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.exporter_name = exporter_name


class InvalidTimeoutError(ExporterConfigError):
    """Raised when a config carries a negative request timeout."""

    kind = "InvalidTimeout"


class MissingEndpointError(ExporterConfigError):
    """Raised when neither a realm nor an explicit URL is configured."""

    kind = "MissingEndpoint"


class UnsupportedSignalError(ExporterConfigError):
    """Raised when a host asks for a signal the backend cannot ingest."""

    kind = "UnsupportedSignal"

    def __init__(self, signal: str, *, exporter_name: Optional[str] = None) -> None:
        super().__init__(
            f"telemetry type {signal!r} is not supported by this exporter",
            exporter_name=exporter_name,
        )
        self.signal = signal


class ConfigDecodeError(ExporterConfigError):
    """Raised when a host configuration block does not match the schema."""

    kind = "ConfigDecode"


class ExporterShutdownError(RuntimeError):
    """Raised when metrics are pushed to an exporter that was shut down."""


class SinkError(RuntimeError):
    """Raised when a batch cannot be delivered or the ingest endpoint rejects it."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


__all__ = [
    "ConfigDecodeError",
    "ExporterConfigError",
    "ExporterShutdownError",
    "InvalidTimeoutError",
    "MissingEndpointError",
    "SinkError",
    "UnsupportedSignalError",
]
