"""Main CLI entry point for build-audit."""

import typer
from rich.console import Console

from build_audit.cli import config, inspect, license

app = typer.Typer(
    name="build-audit",
    help="Inspect package builds for policy violations and regressions.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

# Register subcommands
app.command(name="inspect")(inspect.inspect_cmd)
app.command(name="license")(license.license_cmd)
app.command(name="check-config")(config.check_config_cmd)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output"),
    structured_logs: bool = typer.Option(
        False,
        "--structured-logs",
        help="Log with timestamps and context fields",
    ),
) -> None:
    """
    build-audit: compare a package build with its predecessor.

    - [bold]inspect[/bold]: Run the license, metadata, kmod and upstream inspections
    - [bold]license[/bold]: Validate a License tag
    - [bold]check-config[/bold]: Check settings and vendor data
    """
    from build_audit.utils.logging import configure_logging

    if verbose:
        level = "DEBUG"
    elif quiet:
        level = "ERROR"
    else:
        level = "WARNING"
    configure_logging(level=level, structured=structured_logs)


@app.command()
def version() -> None:
    """Show the build-audit version."""
    from build_audit import __version__

    console.print(f"build-audit version {__version__}")


if __name__ == "__main__":
    app()
