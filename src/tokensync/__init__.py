"""
tokensync - design token resolution and normalization.

Turns a hierarchical design-token document (optionally core/semantic/
component tiers with ``{path.to.token}`` references) into a validated,
fully resolved, normalized token model for code generators.
"""

from __future__ import annotations

from ._version import get_version
from .core import ir
from .core.config import TokenSyncConfig, create_config, load_config
from .core.errors import (
    ConfigError,
    TokenSourceError,
    TokenSyncError,
    TokenValidationError,
    TransformError,
)
from .core.lint import TokenValidator, validate_tokens
from .core.normalizer import normalize_tokens
from .core.processor import ProcessResult, TokenProcessor
from .core.resolver import resolve_all_token_references, resolve_value
from .core.transforms import TransformEngine

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    # Config
    "TokenSyncConfig",
    "create_config",
    "load_config",
    # Errors
    "ConfigError",
    "TokenSourceError",
    "TokenSyncError",
    "TokenValidationError",
    "TransformError",
    # Pipeline
    "ProcessResult",
    "TokenProcessor",
    "TokenValidator",
    "TransformEngine",
    "normalize_tokens",
    "resolve_all_token_references",
    "resolve_value",
    "validate_tokens",
]
