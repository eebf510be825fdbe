"""Validation helpers deciding whether a SignalFx config can be exported."""

from __future__ import annotations

from datetime import timedelta

from pydantic import ValidationError

from .config import Config
from .errors import ConfigDecodeError, InvalidTimeoutError, MissingEndpointError


def validate_config(config: Config) -> Config:
    """Return ``config`` if it is exportable, otherwise raise the first failure.

    Rules are checked in order: a negative ``timeout`` wins over a missing
    endpoint. An empty access token is accepted.
    """

    if config.timeout < timedelta(0):
        raise InvalidTimeoutError(
            f'"{config.name}" config cannot have a negative "timeout"',
            exporter_name=config.name,
        )

    if not config.realm and not config.url:
        raise MissingEndpointError(
            f'"{config.name}" config requires a non-empty "realm" or "url"',
            exporter_name=config.name,
        )

    return config


def check_config_structure(config: Config) -> None:
    """Check that ``config`` is a well formed instance of its own schema.

    This says nothing about exportability: the default config passes here and
    still fails :func:`validate_config`.
    """

    missing = sorted(field for field, value in config if value is None)
    if missing:
        raise ConfigDecodeError(
            f'"{config.name}" config has unset fields: {", ".join(missing)}',
            exporter_name=config.name,
        )

    try:
        type(config).model_validate(config.model_dump())
    except ValidationError as exc:
        raise ConfigDecodeError(
            f'"{config.name}" config does not match its schema: {exc.error_count()} error(s)',
            exporter_name=config.name,
        ) from exc
