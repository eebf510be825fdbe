"""Process level settings."""
