"""
config/config.py

Purpose
-------
Process settings for running the SignalFx exporter outside a pipeline host
(CLI, smoke checks).
- Reads ``SIGNALFX_*`` environment variables, with ``SFX_TOKEN`` accepted as a
  legacy alias for the access token.
- Loads a local ``.env`` file unless ``SETTINGS_SKIP_DOTENV`` is set.
- Produces the same loosely typed block a pipeline host would pass to the
  exporter factory, so both paths share one decoder.

Examples
--------
# Bash:
export SIGNALFX_REALM=us1
export SIGNALFX_ACCESS_TOKEN=...
export SIGNALFX_HEADERS='x-team=core;x-env=staging'
"""

from __future__ import annotations

import json
import os
from typing import Annotated, Any, Dict, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


# -----------------------------
# Helper functions
# -----------------------------
def _parse_bool(value: Optional[str], *, default: bool) -> bool:
    if value is None:
        return default
    v = str(value).strip().lower()
    return v in {"1", "true", "yes", "y", "on"}


def _parse_headers(value: Optional[str]) -> Dict[str, str]:
    """
    Parse extra request headers from env.

    Supported formats:
      - JSON: {"x-team": "core", "x-env": "staging"}
      - Simple string: "x-team=core;x-env=staging"
    """
    if value is None or str(value).strip() == "":
        return {}

    raw = str(value).strip()
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        parsed = None
    if isinstance(parsed, dict):
        return {str(k): str(v) for k, v in parsed.items()}

    result: Dict[str, str] = {}
    for pair in raw.split(";"):
        pair = pair.strip()
        if not pair or "=" not in pair:
            continue
        k, v = pair.split("=", 1)
        k, v = k.strip(), v.strip()
        if k:
            result[k] = v
    return result


# -----------------------------
# Main Settings
# -----------------------------
class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SIGNALFX_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    exporter_name: str = "signalfx"
    access_token: str = Field(
        default="",
        validation_alias=AliasChoices("SIGNALFX_ACCESS_TOKEN", "SFX_TOKEN"),
    )
    realm: str = ""
    ingest_url: str = ""
    # Kept as text; the exporter config owns duration parsing.
    timeout: str = "5s"
    headers: Annotated[Dict[str, str], NoDecode] = Field(default_factory=dict)
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("SIGNALFX_LOG_LEVEL", "LOG_LEVEL"),
    )

    @field_validator("headers", mode="before")
    @classmethod
    def _parse_headers_env(cls, v: Any) -> Dict[str, str]:
        if isinstance(v, dict):
            return {str(k): str(v2) for k, v2 in v.items()}
        return _parse_headers(v)

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, v: Any) -> str:
        return str(v or "INFO").strip().upper()

    def exporter_block(self) -> Dict[str, Any]:
        """Return a host style configuration block for the exporter factory."""

        return {
            "type": "signalfx",
            "name": self.exporter_name,
            "access_token": self.access_token,
            "realm": self.realm,
            "url": self.ingest_url,
            "timeout": self.timeout,
            "headers": dict(self.headers),
        }


def load_settings() -> Settings:
    """Build :class:`Settings` from the environment (and ``.env`` when allowed)."""

    skip_dotenv = _parse_bool(os.getenv("SETTINGS_SKIP_DOTENV"), default=False)
    env_file = None if skip_dotenv else ".env"
    return Settings(_env_file=env_file)
