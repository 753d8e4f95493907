"""Exception hierarchy for schemapush.

Only session-level failures are raised. Anything that goes wrong with a
single schema file is turned into a ``Result`` and reported instead.
"""

from __future__ import annotations


class SchemaPushError(Exception):
    """Base exception for schemapush errors.

    Attributes:
        message: Human-readable error description
        cause: Original exception if wrapping
    """

    def __init__(self, message: str, cause: Exception | None = None):
        self.message = message
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


class ConfigError(SchemaPushError):
    """Invalid registry URL, API key or config file."""


class FatalDiscoveryError(SchemaPushError):
    """The input directory cannot be enumerated."""


class FatalCredentialError(SchemaPushError):
    """A temporary write key could not be issued (legacy mode)."""
