"""CLI command for checking the settings and vendor data."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from build_audit.cli.utils import console, load_settings_or_exit, status_icon


def check_config_cmd(
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Settings file (default: search standard locations)",
    ),
    profile: Optional[str] = typer.Option(
        None,
        "--profile",
        "-p",
        help="Settings profile to overlay",
    ),
) -> None:
    """
    Load the settings, license database and whitelists and summarize them.

    Exits with status 1 when vendor data is missing.

    Example:
        build-audit check-config --config /etc/build-audit.yaml --profile fedora
    """
    from build_audit.core.context import WhitelistCache
    from build_audit.core.engine import list_inspections
    from build_audit.core.license import LicenseDatabase
    from build_audit.utils.errors import LicenseDatabaseError, WhitelistError

    settings = load_settings_or_exit(config, profile)

    table = Table(title="Settings", show_header=False)
    table.add_column("Setting", style="bold")
    table.add_column("Value")
    table.add_row("Vendor data", settings.vendor_data_dir)
    table.add_row("Vendor", settings.vendor or "[dim]-[/dim]")
    table.add_row("Build host subdomains", ", ".join(settings.buildhost_subdomain) or "[dim]-[/dim]")
    table.add_row("Bad words", str(len(settings.badwords)))
    table.add_row("Product release", settings.product_release or "[dim]-[/dim]")
    table.add_row("Threshold", settings.threshold.value)
    console.print(table)

    problems = 0
    data = Table(title="Vendor data")
    data.add_column("Item", style="bold")
    data.add_column("Status")
    data.add_column("Detail")

    try:
        db = LicenseDatabase.load(settings.licensedb_path)
        data.add_row("License database", status_icon(True), f"{len(db)} licenses")
    except LicenseDatabaseError as e:
        problems += 1
        data.add_row("License database", status_icon(False), escape(e.message))

    whitelists = WhitelistCache(settings)
    for label, loader in (
        ("Stat whitelist", whitelists.stat_whitelist),
        ("Capabilities whitelist", whitelists.caps_whitelist),
    ):
        if settings.product_release is None:
            data.add_row(label, "[dim]-[/dim]", "no product release set")
            continue
        try:
            data.add_row(label, status_icon(True), f"{len(loader())} entries")
        except WhitelistError as e:
            problems += 1
            data.add_row(label, status_icon(False), escape(e.message))

    console.print()
    console.print(data)

    enabled = set(settings.enabled_inspections())
    inspections = Table(title="Inspections")
    inspections.add_column("Inspection", style="bold")
    inspections.add_column("Enabled")
    inspections.add_column("Description")
    for tag, description in list_inspections():
        inspections.add_row(tag.value, "yes" if tag in enabled else "[dim]no[/dim]", description)

    console.print()
    console.print(inspections)

    if problems:
        raise typer.Exit(1)
