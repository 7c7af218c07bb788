"""CLI command for checking a License tag."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from build_audit.cli.utils import EXIT_USAGE, console, load_settings_or_exit


def license_cmd(
    expression: str = typer.Argument(..., help="License tag to validate"),
    licensedb: Optional[Path] = typer.Option(
        None,
        "--licensedb",
        "-l",
        help="License database file (default: from settings)",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Settings file (default: search standard locations)",
    ),
) -> None:
    """
    Check a License tag against the approved-license database.

    Example:
        build-audit license "GPLv2+ and (MIT or BSD)"
    """
    from build_audit.core.license import (
        LicenseDatabase,
        is_valid_license,
        iter_license_phrases,
        parens_balanced,
    )
    from build_audit.utils.errors import LicenseDatabaseError

    path = licensedb or load_settings_or_exit(config, None).licensedb_path

    try:
        db = LicenseDatabase.load(path)
    except LicenseDatabaseError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(EXIT_USAGE)

    if is_valid_license(db, expression):
        console.print(f"[green]Valid[/green] license expression: {escape(expression)}")
        return

    console.print(f"[red]Invalid[/red] license expression: {escape(expression)}")
    if not parens_balanced(expression):
        console.print("  unbalanced parentheses")
    for phrase in iter_license_phrases(expression):
        if not db.approves(phrase):
            console.print(f"  not approved: {escape(phrase)}")
    raise typer.Exit(1)
