"""
tokensync configuration.

Configuration lives in ``tokensync.toml`` or under ``[tool.tokensync]`` in
``pyproject.toml``. It is parsed once into an immutable ``TokenSyncConfig``
that is passed explicitly to each component.

Example tokensync.toml:

    [tokens]
    input = "design/tokens.json"

    [tokens.validation]
    required = ["colors"]
    optional = ["spacing", "typography", "borderRadius"]

    [pipeline]
    transforms = ["color/hex", "size/rem"]
    filters = ["value/resolved"]
    strict_references = true

    [platforms]
    web = ["color/hex", "size/rem"]
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import make_config_error

logger = logging.getLogger(__name__)

CONFIG_FILE = "tokensync.toml"
PYPROJECT_FILE = "pyproject.toml"
PYPROJECT_SECTION = ("tool", "tokensync")


class ValidationConfig(BaseModel):
    """Required and optional top-level token categories."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    required: list[str] = Field(default_factory=lambda: ["colors"])
    optional: list[str] = Field(default_factory=lambda: ["spacing", "typography"])


class TokensConfig(BaseModel):
    """Where the raw token document lives and how it is validated."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    input: str = "tokens.json"
    validation: ValidationConfig = Field(default_factory=ValidationConfig)


class PipelineConfig(BaseModel):
    """Optional processing stages between resolution and normalization."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    transforms: list[str] | None = Field(
        default=None,
        description="Transform names; None skips the stage, [] applies the defaults",
    )
    filters: list[str] | None = Field(default=None, description="Filter names (AND semantics)")
    strict_references: bool = Field(
        default=False, description="Report unresolved references as validation warnings"
    )


class TokenSyncConfig(BaseModel):
    """Complete tokensync configuration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    tokens: TokensConfig = Field(default_factory=TokensConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    platforms: dict[str, list[str]] = Field(
        default_factory=dict, description="Per-platform transform lists"
    )

    # Directory the config was loaded from; relative paths resolve against it
    base_dir: Path = Field(default_factory=Path.cwd, exclude=True)

    @property
    def required_categories(self) -> list[str]:
        return self.tokens.validation.required

    @property
    def optional_categories(self) -> list[str]:
        return self.tokens.validation.optional

    @property
    def input_path(self) -> Path:
        path = Path(self.tokens.input)
        return path if path.is_absolute() else self.base_dir / path


def create_config(
    data: dict[str, Any] | None = None, *, base_dir: Path | None = None
) -> TokenSyncConfig:
    """
    Build a config from a plain dict, validating it.

    Raises:
        ConfigError: On schema violations
    """
    payload = dict(data or {})
    if base_dir is not None:
        payload["base_dir"] = base_dir
    try:
        return TokenSyncConfig.model_validate(payload)
    except ValidationError as e:
        raise make_config_error(f"Configuration validation error: {e}") from e


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise make_config_error(f"Invalid TOML: {e}", path) from e
    except OSError as e:
        raise make_config_error(f"Cannot read config: {e}", path) from e


def _section_from_pyproject(data: dict[str, Any]) -> dict[str, Any] | None:
    section: Any = data
    for key in PYPROJECT_SECTION:
        if not isinstance(section, dict) or key not in section:
            return None
        section = section[key]
    return section if isinstance(section, dict) else None


def _load_file(path: Path) -> TokenSyncConfig:
    data = _read_toml(path)
    if path.name == PYPROJECT_FILE:
        data = _section_from_pyproject(data) or {}
    try:
        return TokenSyncConfig.model_validate({**data, "base_dir": path.parent})
    except ValidationError as e:
        raise make_config_error(f"Configuration validation error: {e}", path) from e


def find_config_file(start: Path) -> Path | None:
    """Look for tokensync.toml, then a pyproject.toml with a [tool.tokensync] table."""
    candidate = start / CONFIG_FILE
    if candidate.is_file():
        return candidate
    pyproject = start / PYPROJECT_FILE
    if pyproject.is_file() and _section_from_pyproject(_read_toml(pyproject)) is not None:
        return pyproject
    return None


def load_config(path: Path | str | None = None) -> TokenSyncConfig:
    """
    Load configuration.

    Args:
        path: A config file, a directory to search, or None for the CWD

    Returns:
        Validated TokenSyncConfig (defaults when no config file exists)

    Raises:
        ConfigError: If an explicit file is missing or the config is invalid
    """
    target = Path(path) if path is not None else Path.cwd()

    if target.is_dir():
        found = find_config_file(target)
        if found is None:
            logger.debug(f"No tokensync config found in {target}, using defaults")
            return TokenSyncConfig(base_dir=target)
        return _load_file(found)

    if not target.exists():
        raise make_config_error(f"Config file not found: {target}", target)

    return _load_file(target)
