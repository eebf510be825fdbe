"""Shared helpers for transports and process setup."""
