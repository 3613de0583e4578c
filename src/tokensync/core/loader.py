"""
Token source loading.

Reads the raw token document (JSON, or YAML for ``.yaml``/``.yml``) from
disk. Loads are single-flight: while one load is in progress, other callers
block until it finishes and then share its result instead of reading the
file again.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any

import yaml

from .errors import make_source_error

logger = logging.getLogger(__name__)

YAML_SUFFIXES = frozenset({".yaml", ".yml"})


def read_token_file(path: Path) -> dict[str, Any]:
    """
    Read and parse one token document.

    Raises:
        TokenSourceError: If the file is missing, unparseable, or not an object
    """
    if not path.exists():
        raise make_source_error(f"Tokens file not found: {path}", path)

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise make_source_error(f"Cannot read tokens file: {e}", path) from e

    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            data = yaml.safe_load(content)
        else:
            data = json.loads(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise make_source_error(f"Invalid token document: {e}", path) from e

    if not isinstance(data, dict):
        raise make_source_error(
            f"Token document root must be an object, got {type(data).__name__}", path
        )
    return data


class TokenSourceLoader:
    """
    Loads and caches the raw token document for one token file.

    Example:
        loader = TokenSourceLoader(Path("tokens.json"))
        raw = loader.load()
        raw = loader.load(force_reload=True)  # after the file changed
    """

    def __init__(self, path: Path):
        self.path = path
        self._tokens: dict[str, Any] | None = None
        self._lock = threading.Lock()
        self._generation = 0

    @property
    def is_loaded(self) -> bool:
        return self._tokens is not None

    def load(self, force_reload: bool = False) -> dict[str, Any]:
        """
        Return the raw token document, reading it if needed.

        Args:
            force_reload: Re-read the file even if a document is cached

        Returns:
            The parsed document. Callers must treat it as read-only.
        """
        if self._tokens is not None and not force_reload:
            return self._tokens

        generation = self._generation
        with self._lock:
            # Another caller completed a load while we waited: share it
            if self._generation != generation and self._tokens is not None:
                return self._tokens
            if self._tokens is not None and not force_reload:
                return self._tokens

            tokens = read_token_file(self.path)
            self._tokens = tokens
            self._generation += 1
            logger.info(f"Design tokens loaded from: {self.path}")
            return tokens

    def refresh(self) -> None:
        """Drop the cached document so the next load re-reads the file."""
        self._tokens = None

    def get_tokens(self) -> dict[str, Any]:
        """
        Return the cached document without loading.

        Raises:
            RuntimeError: If nothing has been loaded yet
        """
        if self._tokens is None:
            raise RuntimeError("Tokens not loaded. Call load() first.")
        return self._tokens
