"""Tests for the SignalFx exporter factory contract."""

from __future__ import annotations

import logging
from datetime import timedelta

import pytest

from exporters.interfaces import BaseExporterFactory
from exporters.signalfx import (
    Config,
    ConfigDecodeError,
    ExporterConfigError,
    InvalidTimeoutError,
    MissingEndpointError,
    SignalFxMetricsExporter,
    UnsupportedSignalError,
    check_config_structure,
)
from exporters.signalfx.config import TYPE_STR


def test_factory_implements_host_contract(factory):
    assert isinstance(factory, BaseExporterFactory)
    assert factory.type() == TYPE_STR == "signalfx"


def test_create_default_config(factory):
    cfg = factory.create_default_config()

    assert cfg is not None
    check_config_structure(cfg)
    assert cfg.access_token == ""
    assert cfg.realm == ""
    assert cfg.url == ""
    assert cfg.timeout == timedelta(seconds=5)
    assert cfg.headers == {}


def test_create_default_config_is_deterministic(factory):
    first = factory.create_default_config()
    second = factory.create_default_config()

    assert first == second
    assert first is not second
    first.headers["x-only-first"] = "1"
    assert second.headers == {}


def test_default_config_is_not_exportable(factory, nop_logger):
    cfg = factory.create_default_config()

    with pytest.raises(MissingEndpointError) as excinfo:
        factory.create_metrics_exporter(nop_logger, cfg)

    assert str(excinfo.value) == '"signalfx" config requires a non-empty "realm" or "url"'


@pytest.mark.parametrize("use_valid_config", [False, True])
def test_create_trace_exporter_is_unsupported(factory, nop_logger, valid_config, use_valid_config):
    cfg = valid_config if use_valid_config else factory.create_default_config()

    with pytest.raises(UnsupportedSignalError) as excinfo:
        factory.create_trace_exporter(nop_logger, cfg)

    assert excinfo.value.kind == "UnsupportedSignal"
    assert excinfo.value.signal == "traces"


def test_create_trace_exporter_ignores_config_contents(factory):
    with pytest.raises(UnsupportedSignalError):
        factory.create_trace_exporter(None, {"not_a_field": object()})


@pytest.mark.asyncio
async def test_create_instance_via_factory(factory, nop_logger):
    cfg = factory.create_default_config()
    with pytest.raises(MissingEndpointError):
        factory.create_metrics_exporter(nop_logger, cfg)

    # Set values that don't have a valid default.
    cfg.access_token = "testToken"
    cfg.realm = "us1"
    cfg.timeout = timedelta(seconds=2)
    exporter = factory.create_metrics_exporter(nop_logger, cfg)

    assert isinstance(exporter, SignalFxMetricsExporter)
    assert exporter.is_shutdown is False
    await exporter.shutdown()
    assert exporter.is_shutdown is True


@pytest.mark.asyncio
async def test_create_metrics_exporter_with_headers(factory, nop_logger):
    cfg = Config(
        access_token="testToken",
        realm="us1",
        headers={"added-entry": "added value", "dot.test": "test"},
        timeout=timedelta(seconds=2),
    )

    exporter = factory.create_metrics_exporter(nop_logger, cfg)
    try:
        headers = exporter.sink.headers
        assert headers["added-entry"] == "added value"
        assert headers["dot.test"] == "test"
        assert headers["X-SF-Token"] == "testToken"
        assert exporter.sink.timeout == pytest.approx(2.0)
        assert exporter.sink.ingest_url == "https://ingest.us1.signalfx.com/v2/datapoint"
    finally:
        await exporter.shutdown()


@pytest.mark.parametrize(
    "config, error_type, message",
    [
        pytest.param(
            Config(access_token="testToken", realm="lab", timeout=timedelta(seconds=-2)),
            InvalidTimeoutError,
            '"signalfx" config cannot have a negative "timeout"',
            id="negative_duration",
        ),
        pytest.param(
            Config(),
            MissingEndpointError,
            '"signalfx" config requires a non-empty "realm" or "url"',
            id="empty_realm_and_url",
        ),
    ],
)
def test_create_metrics_exporter_fails(factory, nop_logger, config, error_type, message):
    exporter = None
    with pytest.raises(error_type) as excinfo:
        exporter = factory.create_metrics_exporter(nop_logger, config)

    assert str(excinfo.value) == message
    assert isinstance(excinfo.value, ExporterConfigError)
    assert exporter is None


def test_create_metrics_exporter_does_not_build_sink_on_failure(factory, nop_logger, monkeypatch):
    from exporters.signalfx import factory as factory_module

    built = []
    monkeypatch.setattr(
        factory_module, "HttpMetricsSink", lambda *a, **kw: built.append((a, kw))
    )

    with pytest.raises(InvalidTimeoutError):
        factory.create_metrics_exporter(nop_logger, {"realm": "lab", "timeout": "-2s"})

    assert built == []


@pytest.mark.asyncio
async def test_create_metrics_exporter_accepts_host_block(factory, nop_logger):
    exporter = factory.create_metrics_exporter(
        nop_logger,
        {
            "type": "signalfx",
            "name": "signalfx/secondary",
            "accessToken": "abc",
            "url": "https://ingest.example.test",
            "timeout": "750ms",
        },
    )
    try:
        assert exporter.config.name == "signalfx/secondary"
        assert exporter.config.timeout == timedelta(milliseconds=750)
        assert exporter.sink.ingest_url == "https://ingest.example.test/v2/datapoint"
    finally:
        await exporter.shutdown()


def test_create_metrics_exporter_rejects_non_mapping_config(factory, nop_logger):
    with pytest.raises(ConfigDecodeError) as excinfo:
        factory.create_metrics_exporter(nop_logger, "realm=us1")

    assert isinstance(excinfo.value, ExporterConfigError)
    assert str(excinfo.value) == '"signalfx" config must be a mapping, got str'


def test_error_message_uses_instance_name(factory, nop_logger):
    with pytest.raises(MissingEndpointError) as excinfo:
        factory.create_metrics_exporter(nop_logger, {"name": "signalfx/backup"})

    assert str(excinfo.value) == '"signalfx/backup" config requires a non-empty "realm" or "url"'
    assert excinfo.value.exporter_name == "signalfx/backup"


@pytest.mark.asyncio
async def test_exporter_keeps_snapshot_of_config(factory, nop_logger, valid_config):
    exporter = factory.create_metrics_exporter(nop_logger, valid_config)
    try:
        valid_config.realm = "eu0"
        valid_config.headers["late"] = "value"

        assert exporter.config.realm == "us1"
        assert "late" not in exporter.config.headers
        assert "late" not in exporter.sink.headers
    finally:
        await exporter.shutdown()


@pytest.mark.asyncio
async def test_exporters_from_different_configs_do_not_share_state(factory, nop_logger):
    first = factory.create_metrics_exporter(
        nop_logger, Config(realm="us1", headers={"x-team": "a"})
    )
    second = factory.create_metrics_exporter(
        nop_logger, Config(url="https://proxy.internal/v2/datapoint", headers={"x-team": "b"})
    )
    try:
        assert first.sink is not second.sink
        assert first.sink.headers["x-team"] == "a"
        assert second.sink.headers["x-team"] == "b"
        assert second.sink.ingest_url == "https://proxy.internal/v2/datapoint"
        assert "X-SF-Token" not in second.sink.headers
    finally:
        await first.shutdown()
        await second.shutdown()


@pytest.mark.asyncio
async def test_create_metrics_exporter_logs_with_given_logger(factory, valid_config, caplog):
    logger = logging.getLogger("tests.factory")

    with caplog.at_level("INFO", logger="tests.factory"):
        exporter = factory.create_metrics_exporter(logger, valid_config)
    await exporter.shutdown()

    assert any(
        record.name == "tests.factory" and "Created metrics exporter" in record.message
        for record in caplog.records
    )
