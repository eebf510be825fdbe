"""Runtime metrics exporter bound to one validated SignalFx config."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List, Optional, Union

from opentelemetry.sdk.metrics.export import MetricsData

from exporters.interfaces import BaseMetricsExporter, BaseMetricsSink

from .config import Config
from .datapoint import Datapoint
from .errors import ExporterShutdownError
from .translation import datapoints_from_metrics_data

_LOG = logging.getLogger(__name__)

MetricsBatch = Optional[Union[MetricsData, Iterable[Datapoint]]]


class SignalFxMetricsExporter(BaseMetricsExporter):
    """Push metrics through a sink until :meth:`shutdown` is called.

    The exporter is active as soon as it is constructed. Shutdown is terminal:
    a push afterwards raises :class:`ExporterShutdownError` instead of being
    dropped silently. Calling :meth:`shutdown` more than once is harmless.
    """

    def __init__(
        self,
        config: Config,
        sink: BaseMetricsSink,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._config = config
        self._sink = sink
        self._logger = logger or _LOG
        self._shutdown = False
        self._shutdown_lock = asyncio.Lock()

    @property
    def config(self) -> Config:
        return self._config

    @property
    def sink(self) -> BaseMetricsSink:
        return self._sink

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    async def push_metrics(self, batch: MetricsBatch) -> int:
        if self._shutdown:
            raise ExporterShutdownError(
                f'"{self._config.name}" exporter has been shut down'
            )

        # An idle reader collects None.
        if batch is None:
            return 0
        if isinstance(batch, MetricsData):
            datapoints: List[Datapoint] = datapoints_from_metrics_data(batch)
        else:
            datapoints = list(batch)
        if not datapoints:
            return 0

        await self._sink.send(datapoints)
        self._logger.debug(
            "Pushed metrics batch",
            extra={"exporter": self._config.name, "count": len(datapoints)},
        )
        return len(datapoints)

    async def shutdown(self) -> None:
        async with self._shutdown_lock:
            if self._shutdown:
                return
            self._shutdown = True
            await self._sink.aclose()
        self._logger.info(
            "Exporter shut down", extra={"exporter": self._config.name}
        )


__all__ = ["MetricsBatch", "SignalFxMetricsExporter"]
