"""Abstract base classes for the exporter plugin contract."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence


class BaseMetricsSink(ABC):
    """Contract for collaborators that ship encoded datapoints to a backend."""

    @abstractmethod
    async def send(self, datapoints: Sequence[Any]) -> None:
        """Transmit one batch of datapoints."""

    @abstractmethod
    async def aclose(self) -> None:
        """Release any transport resources held by the sink."""


class BaseMetricsExporter(ABC):
    """Contract for runtime objects that push metrics until shut down."""

    @abstractmethod
    async def push_metrics(self, batch: Any) -> int:
        """Push a batch of metrics and return the number of datapoints sent."""

    @abstractmethod
    async def shutdown(self) -> None:
        """Stop the exporter and release everything it owns."""


class BaseExporterFactory(ABC):
    """Contract a pipeline host uses to build exporters for one backend type.

    Implementations must not keep mutable state between calls; the host may
    create several exporters from one factory with unrelated configs.
    """

    @abstractmethod
    def type(self) -> str:
        """Return the identifier used to route config blocks to this factory."""

    @abstractmethod
    def create_default_config(self) -> Any:
        """Return a fresh configuration object populated with defaults."""

    @abstractmethod
    def create_metrics_exporter(
        self, logger: logging.Logger | None, config: Any | Mapping[str, Any]
    ) -> BaseMetricsExporter:
        """Validate ``config`` and build a metrics exporter bound to it."""

    @abstractmethod
    def create_trace_exporter(
        self, logger: logging.Logger | None, config: Any | Mapping[str, Any]
    ) -> Any:
        """Build a trace exporter, or raise if the backend has no trace support."""
