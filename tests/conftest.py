"""Test configuration helpers and shared fixtures."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Sequence

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from exporters.interfaces import BaseMetricsSink  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch):
    """Keep developer ``.env`` files and shell variables out of the tests."""

    monkeypatch.setenv("SETTINGS_SKIP_DOTENV", "1")
    for name in (
        "SIGNALFX_ACCESS_TOKEN",
        "SFX_TOKEN",
        "SIGNALFX_REALM",
        "SIGNALFX_INGEST_URL",
        "SIGNALFX_TIMEOUT",
        "SIGNALFX_HEADERS",
        "SIGNALFX_EXPORTER_NAME",
        "SIGNALFX_LOG_LEVEL",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def nop_logger() -> logging.Logger:
    logger = logging.getLogger("tests.nop")
    logger.addHandler(logging.NullHandler())
    return logger


@pytest.fixture
def factory():
    from exporters.signalfx import Factory

    return Factory()


@pytest.fixture
def valid_config(factory):
    config = factory.create_default_config()
    config.access_token = "testToken"
    config.realm = "us1"
    return config


@pytest.fixture
def isolated_factory_registry(monkeypatch):
    """Provide an empty factory registry restored after the test."""

    from exporters import registry

    fresh: dict = {}
    monkeypatch.setattr(registry, "_REGISTRY", fresh)
    return fresh


class RecordingSink(BaseMetricsSink):
    """In-memory sink capturing every batch it is asked to send."""

    def __init__(self) -> None:
        self.batches: List[Sequence[object]] = []
        self.close_calls = 0

    async def send(self, datapoints) -> None:
        self.batches.append(list(datapoints))

    async def aclose(self) -> None:
        self.close_calls += 1


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()
