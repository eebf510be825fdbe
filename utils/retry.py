"""Retry/backoff settings shared by outbound HTTP transports."""

DEFAULT_MAX_ATTEMPTS: int = 3
INITIAL_BACKOFF_SECONDS: float = 0.5
MAX_BACKOFF_SECONDS: float = 8.0
