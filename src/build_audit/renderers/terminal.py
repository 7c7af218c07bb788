"""Terminal renderer for build-audit reports."""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from build_audit.knowledge.remedies import get_remedy_text
from build_audit.models.results import Finding, Inspection, RunReport, Severity
from build_audit.renderers.base import BaseRenderer, OutputFormat, RenderContext

SEVERITY_STYLES = {
    Severity.OK: "green",
    Severity.INFO: "cyan",
    Severity.VERIFY: "yellow",
    Severity.BAD: "red",
    Severity.FATAL: "bold red",
}


class TerminalRenderer(BaseRenderer):
    """Renders a RunReport with rich.

    Example:
        renderer = TerminalRenderer()
        renderer.render(report, RenderContext(verbose=True))
    """

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    @property
    def format(self) -> OutputFormat:
        return OutputFormat.TERMINAL

    def render(self, data: Any, context: RenderContext) -> str:
        """Print data to the console.

        Returns:
            Empty string (output is printed to console)
        """
        if isinstance(data, RunReport):
            self._render_run_report(data, context)
        else:
            self._console.print(data)
        return ""

    def render_to_file(self, data: Any, context: RenderContext) -> None:
        """Capture the terminal output and write it to a file."""
        if context.output_path is None:
            raise ValueError("output_path must be set in context for file rendering")

        file_console = Console(record=True, width=120)
        original_console = self._console
        self._console = file_console

        try:
            self.render(data, context)
            context.output_path.write_text(file_console.export_text())
        finally:
            self._console = original_console

    def _render_run_report(self, report: RunReport, context: RenderContext) -> None:
        status = "[bold green]PASSED[/bold green]" if report.passed else "[bold red]FAILED[/bold red]"
        worst = report.worst_result
        style = SEVERITY_STYLES[worst]

        self._console.print()
        self._console.print(
            Panel(
                f"[bold]Before:[/bold] {escape(report.before or '-')}\n"
                f"[bold]After:[/bold] {escape(report.after)}\n"
                f"[bold]Worst result:[/bold] [{style}]{worst.value}[/{style}]\n"
                f"[bold]Threshold:[/bold] {report.threshold.value}\n"
                f"[bold]Status:[/bold] {status}",
                title="Build Inspection Report",
            )
        )

        table = Table(title="Inspections")
        table.add_column("Inspection", style="bold")
        table.add_column("Status")
        table.add_column("Findings", justify="right")
        table.add_column("Errors", justify="right")

        for outcome in report.outcomes:
            findings = [f for f in report.findings_for(outcome.inspection) if f.severity > Severity.OK]
            table.add_row(
                outcome.inspection.value,
                "[green]PASS[/green]" if outcome.passed else "[red]FAIL[/red]",
                str(len(findings)),
                str(len(outcome.errors)),
            )

        self._console.print()
        self._console.print(table)

        for outcome in report.outcomes:
            if outcome.passed and not context.verbose:
                continue
            self._render_findings(outcome.inspection, report.findings_for(outcome.inspection), context)

    def _render_findings(
        self,
        inspection: Inspection,
        findings: list[Finding],
        context: RenderContext,
    ) -> None:
        findings = [f for f in findings if f.severity > Severity.OK]
        if not findings:
            return

        table = Table(title=f"{inspection.value} findings", show_lines=context.verbose)
        table.add_column("Result")
        table.add_column("Waiver", style="dim")
        table.add_column("Message")

        for finding in findings:
            style = SEVERITY_STYLES[finding.severity]
            message = escape(finding.message or "")
            if context.verbose:
                if finding.details:
                    message += f"\n[dim]{escape(finding.details)}[/dim]"
                remedy = get_remedy_text(finding.remedy)
                if remedy:
                    message += f"\n[italic]Suggested remedy: {remedy}[/italic]"

            table.add_row(
                f"[{style}]{finding.severity.value}[/{style}]",
                finding.waiver.value,
                message,
            )

        self._console.print()
        self._console.print(table)
