"""Errors raised while reading configuration from the environment."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """An environment variable is set but cannot be used."""


class MissingConfigurationError(ConfigurationError):
    """Required environment variables are unset or blank; the message names them all."""
