"""Exception types raised by the engine."""

from __future__ import annotations


class InsightError(Exception):
    """Base class for codeinsight errors."""


class InputError(InsightError, ValueError):
    """Raised when arguments are malformed or inconsistent with each other."""


class ConfigError(InsightError):
    """Raised when the configuration file cannot be parsed."""


__all__ = ["ConfigError", "InputError", "InsightError"]
