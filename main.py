"""Command line entrypoint for checking and exercising the SignalFx exporter."""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Dict, List, Optional, Sequence

from config.config import load_settings
from exporters.registry import create_metrics_exporter_from_block
from exporters.signalfx import (
    Datapoint,
    ExporterConfigError,
    MetricType,
    SinkError,
    check_config_structure,
    decode_config,
    validate_config,
)
from utils.logging_setup import init_logging

EXIT_OK = 0
EXIT_SEND_FAILED = 1
EXIT_INVALID_CONFIG = 2

logger = logging.getLogger(__name__)


def _parse_dimensions(values: Sequence[str]) -> Dict[str, str]:
    dimensions: Dict[str, str] = {}
    for item in values:
        if "=" not in item:
            raise argparse.ArgumentTypeError(f"dimension {item!r} must look like key=value")
        key, value = item.split("=", 1)
        dimensions[key.strip()] = value.strip()
    return dimensions


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SignalFx metrics exporter tools")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("check", help="Validate the exporter configuration from the environment")

    send = sub.add_parser("send", help="Push a single datapoint and shut down")
    send.add_argument("metric", help="Metric name")
    send.add_argument("value", type=float, help="Datapoint value")
    send.add_argument(
        "--type",
        dest="metric_type",
        choices=[item.value for item in MetricType],
        default=MetricType.GAUGE.value,
    )
    send.add_argument(
        "--dimension",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Dimension to attach (repeatable)",
    )
    return parser


def _check(block: Dict[str, object]) -> int:
    try:
        config = decode_config(block)
        check_config_structure(config)
        validate_config(config)
    except ExporterConfigError as exc:
        logger.error("Configuration rejected: %s", exc, extra={"kind": exc.kind})
        return EXIT_INVALID_CONFIG
    logger.info("Configuration valid (ingest_url=%s)", config.ingest_url())
    return EXIT_OK


async def _send(block: Dict[str, object], datapoint: Datapoint) -> int:
    try:
        exporter = create_metrics_exporter_from_block(logger, block)
    except ExporterConfigError as exc:
        logger.error("Configuration rejected: %s", exc, extra={"kind": exc.kind})
        return EXIT_INVALID_CONFIG

    try:
        await exporter.push_metrics([datapoint])
    except SinkError as exc:
        logger.error("Send failed: %s", exc, extra={"status_code": exc.status_code})
        return EXIT_SEND_FAILED
    finally:
        await exporter.shutdown()
    logger.info("Sent datapoint %s=%s", datapoint.metric, datapoint.value)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = load_settings()
    init_logging(settings.log_level)
    block = settings.exporter_block()

    if args.command == "check":
        return _check(block)

    try:
        dimensions = _parse_dimensions(args.dimension)
    except argparse.ArgumentTypeError as exc:
        parser.error(str(exc))
    datapoint = Datapoint(
        metric=args.metric,
        value=args.value,
        metric_type=MetricType(args.metric_type),
        dimensions=dimensions,
    )
    return asyncio.run(_send(block, datapoint))


if __name__ == "__main__":
    raise SystemExit(main())
