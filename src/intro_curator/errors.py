"""Exceptions shared across the bot."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Required configuration is missing or malformed; the bot refuses to start."""


class PublishError(RuntimeError):
    """Discord rejected a profile card or reply we tried to send."""
