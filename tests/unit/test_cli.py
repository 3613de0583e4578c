"""Tests for the tokensync CLI."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from tokensync import _version
from tokensync.cli import app


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def restore_logging():
    """The commands reconfigure the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def clean_project(tmp_path: Path, flat_tokens) -> Path:
    """A project whose tokens validate with no errors and no warnings."""
    flat_tokens["typography"]["fontSize"]["base"] = "1rem"
    (tmp_path / "tokens.json").write_text(json.dumps(flat_tokens))
    (tmp_path / "tokensync.toml").write_text('[tokens]\ninput = "tokens.json"\n')
    return tmp_path


def test_version(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "tokensync version" in result.stdout


def test_version_falls_back_without_pyproject(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(_version, "_PYPROJECT", tmp_path / "missing.toml")
    monkeypatch.setattr(_version, "distribution_version", lambda name: "9.9.9")
    assert _version.get_version() == "9.9.9"


def test_version_from_pyproject(tmp_path: Path, monkeypatch):
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text('[project]\nname = "tokensync"\nversion = "1.2.3"\n')
    monkeypatch.setattr(_version, "_PYPROJECT", pyproject)
    assert _version.get_version() == "1.2.3"


def test_validate_success(cli_runner: CliRunner, clean_project: Path):
    result = cli_runner.invoke(app, ["validate", "--config", str(clean_project)])
    assert result.exit_code == 0
    assert "OK: tokens are valid." in result.stdout
    assert "Summary" in result.stdout
    assert "Warnings" in result.stdout


def test_validate_json(cli_runner: CliRunner, clean_project: Path):
    result = cli_runner.invoke(app, ["validate", "-c", str(clean_project), "--format", "json"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["is_valid"] is True
    assert data["errors"] == []
    assert data["summary"]["total_categories"] == 3


def test_validate_with_errors(cli_runner: CliRunner, tmp_path: Path):
    tokens = tmp_path / "broken.json"
    tokens.write_text(json.dumps({"colour": {"primary": {"500": "#000"}}}))
    result = cli_runner.invoke(app, ["validate", "-c", str(tmp_path), "--tokens", str(tokens)])
    assert result.exit_code == 1
    assert "ERROR: Missing colors category - this is required" in result.output
    assert 'WARNING: Found "colour" - did you mean "colors"?' in result.output


def test_validate_missing_tokens_file(cli_runner: CliRunner, tmp_path: Path):
    result = cli_runner.invoke(app, ["validate", "-c", str(tmp_path)])
    assert result.exit_code == 1
    assert "Tokens file not found" in result.output


def test_validate_missing_config(cli_runner: CliRunner, tmp_path: Path):
    result = cli_runner.invoke(app, ["validate", "-c", str(tmp_path / "nope.toml")])
    assert result.exit_code == 2
    assert "Configuration error" in result.output


def test_resolve_prints_model(cli_runner: CliRunner, clean_project: Path):
    result = cli_runner.invoke(app, ["resolve", "-c", str(clean_project)])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["colors"]["primary"]["500"] == "#3b82f6"
    assert data["spacing"]["4"] == "16px"
    assert "borderRadius" in data


def test_resolve_platform(cli_runner: CliRunner, clean_project: Path):
    result = cli_runner.invoke(app, ["resolve", "-c", str(clean_project), "--platform", "web"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["spacing"]["4"] == "1rem"


def test_resolve_tiered_tokens(cli_runner: CliRunner, tmp_path: Path, tiered_tokens):
    tokens = tmp_path / "tiered.json"
    tokens.write_text(json.dumps(tiered_tokens))
    result = cli_runner.invoke(app, ["resolve", "-c", str(tmp_path), "-t", str(tokens)])
    assert result.exit_code == 1
    assert "Token validation failed" in result.output

    forced = cli_runner.invoke(app, ["resolve", "-c", str(tmp_path), "-t", str(tokens), "--force"])
    assert forced.exit_code == 0
    assert '"backgroundColor": "#3b82f6"' in forced.output
