"""
exporters/signalfx/config.py

Purpose
-------
Typed configuration for the SignalFx metrics exporter.
- Decodes the loosely typed block a pipeline host hands over into a
  :class:`Config` model (schema errors surface as ``ConfigDecodeError``).
- Accepts collector style duration strings (``"5s"``, ``"-2s"``, ``"1m30s"``).
- Derives the ingest endpoint from ``realm`` when no explicit ``url`` is set.

Exportability (negative timeout, missing realm/url) is checked separately in
:mod:`exporters.signalfx.validation`.
"""

from __future__ import annotations

import re
from datetime import timedelta
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlparse

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigDecodeError

TYPE_STR = "signalfx"
DEFAULT_TIMEOUT = timedelta(seconds=5)
DATAPOINT_PATH = "/v2/datapoint"
REALM_INGEST_URL = "https://ingest.{realm}.signalfx.com" + DATAPOINT_PATH

_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(raw: str) -> timedelta:
    """Parse a duration such as ``"2s"``, ``"-250ms"`` or ``"1h30m"``."""

    text = raw.strip()
    if not text:
        raise ValueError("empty duration")

    sign = 1
    if text[0] in "+-":
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if text == "0":
        return timedelta(0)

    total = 0.0
    pos = 0
    for match in _DURATION_PART_RE.finditer(text):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        pos = match.end()
    if pos == 0 or pos != len(text):
        raise ValueError(f"invalid duration {raw!r}")
    return timedelta(seconds=sign * total)


class Config(BaseModel):
    """Settings for one ``signalfx`` exporter instance.

    The model stays mutable so a caller can fill in credentials on top of
    :meth:`Factory.create_default_config`; assignments are re-validated.
    The factory binds each exporter to its own deep copy.
    """

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        validate_assignment=True,
    )

    exporter_type: str = Field(
        default=TYPE_STR, validation_alias=AliasChoices("type", "exporter_type")
    )
    name: str = TYPE_STR
    access_token: str = Field(
        default="", validation_alias=AliasChoices("access_token", "accessToken")
    )
    realm: str = ""
    url: str = ""
    timeout: timedelta = DEFAULT_TIMEOUT
    headers: Dict[str, str] = Field(default_factory=dict)

    @field_validator("timeout", mode="before")
    @classmethod
    def _parse_timeout(cls, value: Any) -> Any:
        # Strings that are not collector durations fall through to pydantic (ISO 8601).
        if isinstance(value, str):
            try:
                return parse_duration(value)
            except ValueError:
                return value
        return value

    @field_validator("headers", mode="before")
    @classmethod
    def _default_headers(cls, value: Any) -> Any:
        return {} if value is None else value

    def ingest_url(self) -> str:
        """Return the datapoint endpoint this config points at."""

        if self.url:
            parsed = urlparse(self.url)
            if parsed.path in ("", "/"):
                return parsed._replace(path=DATAPOINT_PATH).geturl()
            return self.url
        return REALM_INGEST_URL.format(realm=self.realm)


def _summarise_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())) or "<root>"
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)


def decode_config(
    raw: Union[Config, Mapping[str, Any], None],
    *,
    name: Optional[str] = None,
) -> Config:
    """Decode a host configuration block into a :class:`Config`.

    Parameters
    ----------
    raw:
        Either an already decoded :class:`Config` (returned unchanged), a
        mapping as found in the host configuration, or ``None`` for an
        empty block.
    name:
        Optional instance name used when the block does not carry one.

    Raises
    ------
    ConfigDecodeError
        If the block is not a mapping, or has unknown keys or values of the
        wrong type.
    """

    if isinstance(raw, Config):
        return raw
    if raw is not None and not isinstance(raw, Mapping):
        label = name or TYPE_STR
        raise ConfigDecodeError(
            f'"{label}" config must be a mapping, got {type(raw).__name__}',
            exporter_name=label,
        )

    block: Dict[str, Any] = dict(raw or {})
    if name and "name" not in block:
        block["name"] = name
    try:
        return Config.model_validate(block)
    except ValidationError as exc:
        label = block.get("name") or TYPE_STR
        raise ConfigDecodeError(
            f'"{label}" config is malformed: {_summarise_validation_error(exc)}',
            exporter_name=str(label),
        ) from exc


__all__ = [
    "Config",
    "DATAPOINT_PATH",
    "DEFAULT_TIMEOUT",
    "REALM_INGEST_URL",
    "TYPE_STR",
    "decode_config",
    "parse_duration",
]
