"""Exporter plugins for the collector pipeline."""

__all__ = [
    "interfaces",
    "registry",
    "signalfx",
]
