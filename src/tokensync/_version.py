"""Package version lookup.

A source checkout reads ``[project].version`` from the repository's
``pyproject.toml``; an installed wheel has no such file and asks the
distribution metadata instead.
"""

import tomllib
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as distribution_version
from pathlib import Path

_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"
_UNKNOWN = "0.0.0"


def _version_from_pyproject(path: Path) -> str | None:
    try:
        with path.open("rb") as f:
            project = tomllib.load(f).get("project", {})
    except (OSError, tomllib.TOMLDecodeError):
        return None
    version = project.get("version")
    return version if isinstance(version, str) else None


def get_version() -> str:
    version = _version_from_pyproject(_PYPROJECT)
    if version is not None:
        return version
    try:
        return distribution_version("tokensync")
    except PackageNotFoundError:
        return _UNKNOWN
