"""
Token project commands: validate and resolve.

Both operate on the token file named by the configuration (tokensync.toml
or [tool.tokensync] in pyproject.toml), unless --tokens overrides it.
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from tokensync.core.config import TokenSyncConfig, load_config
from tokensync.core.errors import ConfigError, TokenSourceError, TokenValidationError
from tokensync.core.ir.diagnostics import ValidationDiagnostics
from tokensync.core.lint import TokenValidator
from tokensync.core.loader import read_token_file
from tokensync.core.processor import TokenProcessor

from .utils import configure_logging

console = Console()


def _load_project_config(config: str | None, tokens: str | None) -> TokenSyncConfig:
    cfg = load_config(Path(config).resolve() if config else None)
    if tokens:
        data = cfg.model_dump()
        data["tokens"]["input"] = str(Path(tokens).resolve())
        cfg = TokenSyncConfig.model_validate({**data, "base_dir": cfg.base_dir})
    return cfg


def _print_human_diagnostics(diagnostics: ValidationDiagnostics) -> None:
    """Print diagnostics in human-readable format."""
    if diagnostics.errors:
        typer.echo("Validation failed:\n", err=True)
        for err in diagnostics.errors:
            typer.echo(f"ERROR: {err}", err=True)

    if diagnostics.warnings:
        typer.echo("Validation warnings:\n", err=False)
        for warn in diagnostics.warnings:
            typer.echo(f"WARNING: {warn}", err=False)

    if diagnostics.is_valid:
        typer.echo("OK: tokens are valid.")

    summary = diagnostics.summary
    table = Table(title="Summary")
    table.add_column("Categories", justify="right")
    table.add_column("Tokens", justify="right")
    table.add_column("Errors", justify="right")
    table.add_column("Warnings", justify="right")
    table.add_row(
        str(summary.total_categories),
        str(summary.validated_tokens),
        str(summary.error_count),
        str(summary.warning_count),
    )
    console.print(table)


def validate_command(
    config: str = typer.Option(None, "--config", "-c", help="Config file or directory"),
    tokens: str = typer.Option(None, "--tokens", "-t", help="Token file (overrides config)"),
    format: str = typer.Option("human", "--format", "-f", help="Output format: 'human' or 'json'"),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging"),
) -> None:
    """
    Validate the raw token document: structure, values and consistency.

    Exits with code 1 when any error is found.
    """
    configure_logging(verbose)
    try:
        cfg = _load_project_config(config, tokens)
        raw = read_token_file(cfg.input_path)
    except ConfigError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=2)
    except TokenSourceError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    diagnostics = TokenValidator(cfg).validate(raw)

    if format == "json":
        typer.echo(json.dumps(diagnostics.to_dict(), indent=2))
    else:
        _print_human_diagnostics(diagnostics)

    if not diagnostics.is_valid:
        raise typer.Exit(code=1)


def resolve_command(
    config: str = typer.Option(None, "--config", "-c", help="Config file or directory"),
    tokens: str = typer.Option(None, "--tokens", "-t", help="Token file (overrides config)"),
    platform: str = typer.Option(
        None, "--platform", "-p", help="Print the resolved tree transformed for a platform"
    ),
    force: bool = typer.Option(False, "--force", help="Continue despite validation errors"),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging"),
) -> None:
    """
    Resolve references and print the normalized token model as JSON.
    """
    configure_logging(verbose)
    try:
        cfg = _load_project_config(config, tokens)
        processor = TokenProcessor(cfg)
        result = processor.sync(force=force)
    except ConfigError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=2)
    except TokenValidationError as e:
        typer.echo("Token validation failed:", err=True)
        for err in e.diagnostics.errors:
            typer.echo(f"ERROR: {err}", err=True)
        typer.echo("Run `tokensync validate` for the full report, or pass --force.", err=True)
        raise typer.Exit(code=1)
    except TokenSourceError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if platform:
        output = processor.create_platform_tokens(platform).to_raw()
    else:
        output = result.tokens.to_dict()
    typer.echo(json.dumps(output, indent=2, default=str))
