"""Base class shared by all inspections."""

from __future__ import annotations

from typing import TYPE_CHECKING

from build_audit.models.common import AuditError
from build_audit.models.results import (
    Finding,
    Inspection,
    InspectionOutcome,
    Remedy,
    Verdict,
)
from build_audit.utils.errors import BuildAuditError
from build_audit.utils.logging import get_logger

if TYPE_CHECKING:
    from build_audit.core.context import InspectionContext
    from build_audit.core.results import ResultSink
    from build_audit.models.package import PeerSet

logger = get_logger("inspection")


class BaseInspection:
    """Common driver logic for an inspection.

    Subclasses set ``inspection`` and ``description`` and implement
    :meth:`inspect`, which walks the peer set, records findings and calls
    :meth:`problem` for every change or violation it reports. The
    inspection fails when it records a finding at or above the configured
    threshold or hits a collaborator failure. The OK finding is recorded
    only when the inspection passed and reported no problem at all.
    """

    inspection: Inspection
    description: str = ""

    def __init__(self) -> None:
        self._errors: list[AuditError] = []
        self._clean = True

    @property
    def clean(self) -> bool:
        """Whether the last run reported no problem."""
        return self._clean

    def problem(self) -> None:
        """Note that a change or violation was reported."""
        self._clean = False

    def run(
        self,
        context: "InspectionContext",
        peers: "PeerSet",
        sink: "ResultSink",
    ) -> InspectionOutcome:
        """Run the inspection and report whether it passed.

        Args:
            context: Per-run settings, caches and collaborators
            peers: Matched before/after packages
            sink: Where findings are recorded

        Returns:
            InspectionOutcome for this inspection
        """
        self._errors = []
        self._clean = True
        start = len(sink)

        self.inspect(context, peers, sink)

        threshold = context.settings.threshold
        recorded = sink.findings[start:]
        passed = not self._errors and all(f.severity < threshold for f in recorded)

        if passed and self._clean:
            sink.record_ok(self.inspection)

        logger.debug(f"{self.inspection.value}: passed={passed} clean={self._clean} findings={len(recorded)}")
        return InspectionOutcome(
            inspection=self.inspection,
            passed=passed,
            errors=list(self._errors),
        )

    def inspect(
        self,
        context: "InspectionContext",
        peers: "PeerSet",
        sink: "ResultSink",
    ) -> None:
        """Walk the peers and record findings. Must be implemented by subclasses."""
        raise NotImplementedError

    def finding(
        self,
        verdict: Verdict,
        message: str,
        details: str | None = None,
        remedy: Remedy | None = None,
    ) -> Finding:
        """Build a finding tagged with this inspection."""
        return Finding(
            inspection=self.inspection,
            verdict=verdict,
            message=message,
            details=details,
            remedy=remedy,
        )

    def hard_failure(
        self,
        sink: "ResultSink",
        error: BuildAuditError,
        message: str,
        remedy: Remedy | None = None,
    ) -> None:
        """Record a collaborator failure and keep going."""
        logger.error(message)
        self.problem()
        self._errors.append(error.to_audit_error())
        sink.add(self.finding(Verdict.bad(), message, details=error.message, remedy=remedy))
