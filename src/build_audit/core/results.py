"""Append-only collection of inspection findings."""

from __future__ import annotations

from build_audit.models.results import (
    Finding,
    Inspection,
    Remedy,
    Severity,
    Verdict,
)


class ResultSink:
    """Ordered findings of a run plus the worst severity seen so far.

    Findings are never removed or modified once recorded, and the
    ``worst_result`` watermark only ever goes up.

    Example:
        sink = ResultSink()
        sink.record(Verdict.bad(), Inspection.LICENSE, "Invalid License Tag", remedy=Remedy.LICENSE)
        assert sink.worst_result == Severity.BAD
    """

    def __init__(self) -> None:
        self._findings: list[Finding] = []
        self._worst = Severity.OK

    @property
    def worst_result(self) -> Severity:
        """Highest severity recorded so far (OK when empty)."""
        return self._worst

    @property
    def findings(self) -> list[Finding]:
        """Copy of the recorded findings in recording order."""
        return list(self._findings)

    def __len__(self) -> int:
        return len(self._findings)

    def add(self, finding: Finding) -> Finding:
        """Append an already-built finding."""
        self._findings.append(finding)
        if finding.severity > self._worst:
            self._worst = finding.severity
        return finding

    def extend(self, findings: list[Finding]) -> None:
        """Append several findings in order."""
        for finding in findings:
            self.add(finding)

    def record(
        self,
        verdict: Verdict,
        inspection: Inspection,
        message: str | None = None,
        details: str | None = None,
        remedy: Remedy | None = None,
    ) -> Finding:
        """Create and append a finding.

        Args:
            verdict: Severity and waiver authority
            inspection: Tag of the reporting inspection
            message: Headline message
            details: Optional detail blob (diff output, field text)
            remedy: Optional remedy key

        Returns:
            The recorded finding
        """
        return self.add(
            Finding(
                inspection=inspection,
                verdict=verdict,
                message=message,
                details=details,
                remedy=remedy,
            )
        )

    def record_ok(self, inspection: Inspection) -> Finding:
        """Record that an inspection ran and found nothing wrong."""
        return self.record(Verdict.ok(), inspection)

    def findings_for(self, inspection: Inspection) -> list[Finding]:
        """Findings recorded under one inspection tag."""
        return [f for f in self._findings if f.inspection == inspection]
