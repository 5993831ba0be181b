"""site_census.errors: exception hierarchy shared by the CLI, engine and config loader."""

from __future__ import annotations


class SiteCensusError(Exception):
    """Base class for all SiteCensus errors."""


class ConfigError(SiteCensusError, ValueError):
    """Configuration is missing, malformed or fails validation."""


class ExportError(SiteCensusError):
    """Records could not be written after all export attempts.

    The records themselves stay valid; only the write failed.
    """

    def __init__(self, message: str, path: object = None) -> None:
        super().__init__(message)
        self.path = path


__all__ = ["SiteCensusError", "ConfigError", "ExportError"]
