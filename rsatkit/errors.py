"""
Exceptions raised by rsatkit.

Install failures are never raised; they are reported inside InstallOutcome.
"""
from enum import Enum


class RsatError(Exception):
    """Base class for rsatkit errors."""


class QueryError(RsatError):
    """The capability inventory could not be fetched from the host."""


class ConfigError(RsatError):
    """A configuration value could not be parsed."""


class ResolutionKind(Enum):
    INVALID_SELECTION = "InvalidSelection"
    CANCELLED = "Cancelled"


class ResolutionError(RsatError):
    """A user selection token did not resolve to an inventory entry."""

    def __init__(self, kind, message):
        super().__init__(message)
        self.kind = kind

    @property
    def cancelled(self):
        return self.kind is ResolutionKind.CANCELLED
