"""CLI command for inspecting builds."""

from pathlib import Path
from typing import Optional

import typer

from build_audit.cli.utils import (
    EXIT_USAGE,
    console,
    load_settings_or_exit,
    parse_inspections,
    parse_threshold,
)


def inspect_cmd(
    after: Path = typer.Argument(
        ...,
        help="Manifest of the build to inspect",
        exists=True,
        dir_okay=False,
    ),
    before: Optional[Path] = typer.Option(
        None,
        "--before",
        "-b",
        help="Manifest of the earlier build to compare against",
        exists=True,
        dir_okay=False,
    ),
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
    inspection: Optional[list[str]] = typer.Option(
        None,
        "--inspection",
        "-T",
        help="Inspection to run (repeatable or comma-separated)",
    ),
    threshold: Optional[str] = typer.Option(
        None,
        "--threshold",
        "-t",
        help="Severity at which an inspection fails (INFO, VERIFY, BAD)",
    ),
    format: str = typer.Option(
        "terminal",
        "--format",
        "-f",
        help="Output format (terminal, json)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file path",
    ),
    details: bool = typer.Option(
        False,
        "--details",
        "-d",
        help="Show finding details, remedies and passing inspections",
    ),
) -> None:
    """
    Inspect a build, optionally comparing it with an earlier build.

    Exits with status 1 when any inspection fails.

    Example:
        build-audit inspect after.yaml --before before.yaml -T license,kmod
    """
    from build_audit.core.build import load_build
    from build_audit.core.engine import InspectionEngine
    from build_audit.renderers import OutputFormat, RenderContext, get_renderer
    from build_audit.utils.errors import ManifestError

    try:
        output_format = OutputFormat(format)
    except ValueError:
        raise typer.BadParameter(f"Unsupported format: {format}", param_hint="--format")

    selected = parse_inspections(inspection)
    severity = parse_threshold(threshold)

    settings = load_settings_or_exit(config, profile)
    if severity is not None:
        settings = settings.model_copy(update={"threshold": severity})

    try:
        after_build = load_build(after)
        before_build = load_build(before) if before else None
    except ManifestError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(EXIT_USAGE)

    with console.status("Inspecting builds..."):
        report = InspectionEngine(settings).run(after_build, before_build, selected)

    renderer = get_renderer(output_format)
    context = RenderContext(format=output_format, output_path=output, verbose=details)

    if output:
        renderer.render_to_file(report, context)
        console.print(f"Report written to {output}")
    elif output_format == OutputFormat.JSON:
        typer.echo(renderer.render(report, context))
    else:
        renderer.render(report, context)

    if not report.passed:
        raise typer.Exit(1)
