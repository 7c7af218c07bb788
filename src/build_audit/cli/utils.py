"""Shared utilities for CLI commands."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from build_audit.models.results import Inspection, Severity
from build_audit.utils.config import Settings, load_settings
from build_audit.utils.errors import ConfigurationError

# Shared console instance
console = Console()

# Exit code for unusable settings or input files
EXIT_USAGE = 2


def load_settings_or_exit(config: Path | None, profile: str | None) -> Settings:
    """Load settings, exiting with a usage error if they are invalid.

    Args:
        config: Explicit settings file, or None to search default locations
        profile: Optional profile overlay name

    Returns:
        Resolved settings
    """
    try:
        return load_settings(config, profile)
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(EXIT_USAGE)


def parse_inspections(names: list[str] | None) -> list[Inspection] | None:
    """Turn ``--inspection`` values into inspection tags.

    Values may be repeated or comma-separated. None means "use settings".
    """
    if not names:
        return None

    selected = []
    for value in names:
        for name in value.split(","):
            name = name.strip().lower()
            if not name:
                continue
            try:
                selected.append(Inspection(name))
            except ValueError:
                known = ", ".join(i.value for i in Inspection)
                raise typer.BadParameter(
                    f"Unknown inspection '{name}' (expected one of: {known})",
                    param_hint="--inspection",
                )
    return selected


def parse_threshold(value: str | None) -> Severity | None:
    """Parse the ``--threshold`` option."""
    if value is None:
        return None
    try:
        return Severity.parse(value)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--threshold")


def status_icon(success: bool) -> str:
    """Get a colored status icon.

    Args:
        success: Whether the status is successful

    Returns:
        Formatted status string
    """
    return "[green]OK[/green]" if success else "[red]FAIL[/red]"
