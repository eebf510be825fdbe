"""Factory wiring the SignalFx backend into a collector pipeline host."""

from __future__ import annotations

import logging
from typing import Any, Mapping, NoReturn, Optional, Union

from exporters.interfaces import BaseExporterFactory

from .config import TYPE_STR, Config, decode_config
from .errors import UnsupportedSignalError
from .exporter import SignalFxMetricsExporter
from .sink import HttpMetricsSink
from .validation import validate_config

_LOG = logging.getLogger(__name__)

ConfigInput = Union[Config, Mapping[str, Any], None]


class Factory(BaseExporterFactory):
    """Builds SignalFx exporters. Only the metrics signal is supported."""

    def type(self) -> str:
        return TYPE_STR

    def create_default_config(self) -> Config:
        """Return defaults that still need a realm or url before export.

        Credentials cannot be guessed, so the result is structurally valid but
        fails :func:`validate_config` until ``realm`` or ``url`` is set.
        """

        return Config()

    def create_metrics_exporter(
        self,
        logger: Optional[logging.Logger],
        config: ConfigInput,
    ) -> SignalFxMetricsExporter:
        """Validate ``config`` and return an exporter bound to a snapshot of it.

        Raises
        ------
        ConfigDecodeError
            If a raw mapping does not match the config schema.
        InvalidTimeoutError, MissingEndpointError
            If the decoded config is not exportable. No sink is built.
        """

        log = logger or _LOG
        decoded = validate_config(decode_config(config))
        bound = decoded.model_copy(deep=True)

        sink = HttpMetricsSink(
            bound.ingest_url(),
            access_token=bound.access_token,
            headers=bound.headers,
            timeout=bound.timeout.total_seconds(),
        )
        log.info(
            "Created metrics exporter",
            extra={"exporter": bound.name, "ingest_url": sink.ingest_url},
        )
        return SignalFxMetricsExporter(bound, sink, logger=log)

    def create_trace_exporter(
        self,
        logger: Optional[logging.Logger],
        config: ConfigInput,
    ) -> NoReturn:
        raise UnsupportedSignalError("traces", exporter_name=TYPE_STR)


__all__ = ["Factory"]
