"""Registry resolving exporter factories by their type identifier."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping, Optional

from exporters.interfaces import BaseExporterFactory, BaseMetricsExporter

_REGISTRY: Dict[str, BaseExporterFactory] = {}


def register_factory(factory: BaseExporterFactory) -> BaseExporterFactory:
    """Register ``factory`` under the identifier returned by ``factory.type()``."""

    if not isinstance(factory, BaseExporterFactory):
        raise TypeError(
            f"{type(factory).__name__} must inherit from BaseExporterFactory to register."
        )

    type_str = factory.type()
    if not type_str:
        raise ValueError("Factory type identifier must be a non-empty string.")

    existing = _REGISTRY.get(type_str)
    if existing is not None and type(existing) is not type(factory):
        raise ValueError(
            f"Exporter type '{type_str}' is already registered to "
            f"{type(existing).__name__}."
        )

    _REGISTRY[type_str] = factory
    return factory


def get_factory(type_str: str) -> BaseExporterFactory:
    """Return the factory registered for ``type_str``."""

    # Instance names look like "signalfx/secondary"; route on the type part.
    base_type = type_str.split("/", 1)[0]
    factory = _REGISTRY.get(base_type)
    if factory is None:
        available = ", ".join(sorted(_REGISTRY)) or "<none>"
        raise KeyError(
            f"Exporter type '{base_type}' is not registered. "
            f"Available options: {available}."
        )
    return factory


def available_factories() -> Iterable[str]:
    """Return the registered type identifiers."""

    return sorted(_REGISTRY.keys())


def create_metrics_exporter_from_block(
    logger: Optional[logging.Logger],
    block: Mapping[str, Any],
    *,
    default_type: str = "signalfx",
) -> BaseMetricsExporter:
    """Pick a factory from ``block['type']`` and build a metrics exporter."""

    type_str = str(block.get("type") or default_type)
    factory = get_factory(type_str)
    return factory.create_metrics_exporter(logger, block)


def _register_builtin_factories() -> None:
    from exporters.signalfx import Factory as SignalFxFactory

    register_factory(SignalFxFactory())


_register_builtin_factories()


__all__ = [
    "available_factories",
    "create_metrics_exporter_from_block",
    "get_factory",
    "register_factory",
]
