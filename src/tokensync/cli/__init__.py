"""
tokensync CLI.

- project.py: validate and resolve commands
- utils.py: version and logging helpers
"""

import sys

import typer

from tokensync.cli.project import resolve_command, validate_command
from tokensync.cli.utils import version_callback

app = typer.Typer(
    help="""tokensync – design token resolution and validation

Commands:
  • validate: check the raw token document
  • resolve: print the resolved, normalized token model
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
) -> None:
    """tokensync CLI main callback for global options."""
    pass


app.command(name="validate")(validate_command)
app.command(name="resolve")(resolve_command)


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


__all__ = ["app", "main"]

if __name__ == "__main__":
    main(sys.argv[1:])
