"""Translate OpenTelemetry SDK metric batches into SignalFx datapoints."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from opentelemetry.sdk.metrics.export import (
    AggregationTemporality,
    Gauge,
    Histogram,
    MetricsData,
    Sum,
)

from .datapoint import Datapoint, MetricType

logger = logging.getLogger(__name__)


def _dimension_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(_dimension_value(item) for item in value)
    return str(value)


def _dimensions(*layers: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    merged: Dict[str, str] = {}
    for layer in layers:
        for key, value in (layer or {}).items():
            merged[str(key)] = _dimension_value(value)
    return merged


def _timestamp_ms(time_unix_nano: Optional[int]) -> Optional[int]:
    if not time_unix_nano:
        return None
    return int(time_unix_nano // 1_000_000)


def _sum_metric_type(data: Sum) -> MetricType:
    if not data.is_monotonic:
        return MetricType.GAUGE
    if data.aggregation_temporality == AggregationTemporality.DELTA:
        return MetricType.COUNTER
    return MetricType.CUMULATIVE_COUNTER


def datapoints_from_metrics_data(metrics_data: MetricsData) -> List[Datapoint]:
    """Flatten an SDK ``MetricsData`` batch into SignalFx datapoints.

    Gauges map to ``gauge``, monotonic sums to ``counter`` or
    ``cumulative_counter`` depending on temporality, and non-monotonic sums to
    ``gauge``. Histograms become ``<name>_count`` and ``<name>_sum`` series.
    Other point kinds are skipped.
    """

    datapoints: List[Datapoint] = []
    for resource_metrics in metrics_data.resource_metrics:
        resource_attrs = getattr(resource_metrics.resource, "attributes", None)
        for scope_metrics in resource_metrics.scope_metrics:
            for metric in scope_metrics.metrics:
                data = metric.data
                if isinstance(data, Gauge):
                    metric_type = MetricType.GAUGE
                elif isinstance(data, Sum):
                    metric_type = _sum_metric_type(data)
                elif isinstance(data, Histogram):
                    datapoints.extend(
                        _histogram_datapoints(metric.name, data, resource_attrs)
                    )
                    continue
                else:
                    logger.debug(
                        "Skipping unsupported metric data",
                        extra={"metric": metric.name, "kind": type(data).__name__},
                    )
                    continue

                for point in data.data_points:
                    datapoints.append(
                        Datapoint(
                            metric=metric.name,
                            value=point.value,
                            metric_type=metric_type,
                            dimensions=_dimensions(resource_attrs, point.attributes),
                            timestamp_ms=_timestamp_ms(point.time_unix_nano),
                        )
                    )
    return datapoints


def _histogram_datapoints(
    name: str, data: Histogram, resource_attrs: Optional[Mapping[str, Any]]
) -> List[Datapoint]:
    counter_type = (
        MetricType.COUNTER
        if data.aggregation_temporality == AggregationTemporality.DELTA
        else MetricType.CUMULATIVE_COUNTER
    )
    result: List[Datapoint] = []
    for point in data.data_points:
        dimensions = _dimensions(resource_attrs, point.attributes)
        timestamp = _timestamp_ms(point.time_unix_nano)
        result.append(
            Datapoint(
                metric=f"{name}_count",
                value=point.count,
                metric_type=counter_type,
                dimensions=dimensions,
                timestamp_ms=timestamp,
            )
        )
        result.append(
            Datapoint(
                metric=f"{name}_sum",
                value=point.sum,
                metric_type=counter_type,
                dimensions=dimensions,
                timestamp_ms=timestamp,
            )
        )
    return result


__all__ = ["datapoints_from_metrics_data"]
