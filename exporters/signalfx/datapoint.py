"""SignalFx datapoint model and v2 JSON encoding."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Union


class MetricType(str, Enum):
    """Metric kinds understood by the ``/v2/datapoint`` endpoint."""

    GAUGE = "gauge"
    COUNTER = "counter"
    CUMULATIVE_COUNTER = "cumulative_counter"


@dataclass(frozen=True)
class Datapoint:
    """One value of one metric time series."""

    metric: str
    value: Union[int, float]
    metric_type: MetricType = MetricType.GAUGE
    dimensions: Dict[str, str] = field(default_factory=dict)
    timestamp_ms: Optional[int] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"metric": self.metric, "value": self.value}
        if self.dimensions:
            payload["dimensions"] = dict(self.dimensions)
        if self.timestamp_ms is not None:
            payload["timestamp"] = self.timestamp_ms
        return payload


def encode_datapoints(datapoints: Iterable[Datapoint]) -> Dict[str, List[Dict[str, Any]]]:
    """Group ``datapoints`` by metric type into the ingest request body."""

    body: Dict[str, List[Dict[str, Any]]] = {}
    for datapoint in datapoints:
        key = MetricType(datapoint.metric_type).value
        body.setdefault(key, []).append(datapoint.to_payload())
    return body


__all__ = ["Datapoint", "MetricType", "encode_datapoints"]
