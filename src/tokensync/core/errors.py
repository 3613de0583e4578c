"""
Error types for tokensync configuration, token loading, and processing.

Data-quality problems in a token document are never raised: the validator
and resolver report them as diagnostics. The exceptions below cover
infrastructural failures and the explicit "validation blocks sync" case.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .ir.diagnostics import ValidationDiagnostics


class TokenSyncError(Exception):
    """
    Root of every error tokensync raises on purpose.

    ``str(error)`` is ``"<file>[ at <token path>]: <message>"`` when a
    context is attached and the bare message otherwise; ``message`` and
    ``context`` stay available for callers that format their own output.
    """

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self.describe())

    def describe(self) -> str:
        if self.context is None:
            return self.message
        return f"{self.context.format()}: {self.message}"


class ConfigError(TokenSyncError):
    """The configuration could not be read or failed schema checks."""


class TokenSourceError(TokenSyncError):
    """
    The token document is unusable as input.

    Covers unreadable or unparsable files, a root that is not an object,
    and documents nested beyond what the pipeline can walk.
    """


class TokenValidationError(TokenSyncError):
    """Raised by a sync when validation fails and ``force`` was not given."""

    def __init__(
        self,
        message: str,
        diagnostics: "ValidationDiagnostics",
        context: Optional["ErrorContext"] = None,
    ):
        self.diagnostics = diagnostics
        super().__init__(message, context)


class TransformError(TokenSyncError):
    """Bad transform or filter registration, such as an empty name or unknown kind."""


@dataclass
class ErrorContext:
    """
    Where an error happened.

    Attributes:
        file: File the error relates to (token source or config)
        token_path: Optional dot path of the offending token
    """

    file: Path
    token_path: str | None = None

    def format(self) -> str:
        """Render as ``tokens.json`` or ``tokens.json at colors.primary.500``."""
        if self.token_path:
            return f"{self.file} at {self.token_path}"
        return str(self.file)


def make_source_error(message: str, file: Path, token_path: str | None = None) -> TokenSourceError:
    """``TokenSourceError`` pointing at ``file`` (and optionally a token)."""
    return TokenSourceError(message, ErrorContext(file=file, token_path=token_path))


def make_config_error(message: str, file: Path | None = None) -> ConfigError:
    """``ConfigError``, located in ``file`` when one is known."""
    if file is not None:
        return ConfigError(message, ErrorContext(file=file))
    return ConfigError(message)
