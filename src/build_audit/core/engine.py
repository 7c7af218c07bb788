"""Inspection registry and run orchestration."""

from __future__ import annotations

from typing import Iterable

from build_audit.core.context import InspectionContext
from build_audit.core.inspection import BaseInspection
from build_audit.core.kmod import KernelModuleDiffer
from build_audit.core.license import LicenseInspection
from build_audit.core.metadata import MetadataDiffer
from build_audit.core.peers import match
from build_audit.core.results import ResultSink
from build_audit.core.upstream import UpstreamSourceDiffer
from build_audit.extractors.base import ContentDigester, LineDiffer, ModuleIntrospector
from build_audit.models.package import Build
from build_audit.models.results import Inspection, RunReport
from build_audit.utils.config import Settings, get_settings
from build_audit.utils.logging import get_logger, get_logger_with_context

logger = get_logger("engine")

# Registry order is run order
INSPECTIONS: dict[Inspection, type[BaseInspection]] = {
    Inspection.LICENSE: LicenseInspection,
    Inspection.METADATA: MetadataDiffer,
    Inspection.KMOD: KernelModuleDiffer,
    Inspection.UPSTREAM: UpstreamSourceDiffer,
}


def list_inspections() -> list[tuple[Inspection, str]]:
    """Registered inspections with their descriptions."""
    return [(tag, cls.description) for tag, cls in INSPECTIONS.items()]


class InspectionEngine:
    """Runs inspections over a before/after build pair.

    Example:
        engine = InspectionEngine(load_settings())
        report = engine.run(after=load_build("after.yaml"), before=load_build("before.yaml"))
        print(report.passed, report.worst_result)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        introspector: ModuleIntrospector | None = None,
        digester: ContentDigester | None = None,
        differ: LineDiffer | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.introspector = introspector
        self.digester = digester
        self.differ = differ

    def run(
        self,
        after: Build,
        before: Build | None = None,
        inspections: Iterable[Inspection] | None = None,
    ) -> RunReport:
        """Inspect a build, comparing it with an earlier one when given.

        Args:
            after: The build under inspection
            before: The earlier build to compare against
            inspections: Inspections to run; defaults to the enabled ones

        Returns:
            RunReport with all findings and per-inspection outcomes
        """
        selected = set(inspections) if inspections is not None else set(
            self.settings.enabled_inspections()
        )
        ordered = [tag for tag in INSPECTIONS if tag in selected]

        peers = match(before, after)
        sink = ResultSink()
        outcomes = []

        logger.info(
            f"Inspecting {after.label or 'after build'}"
            + (f" against {before.label or 'before build'}" if before else "")
        )

        with InspectionContext(
            self.settings,
            introspector=self.introspector,
            digester=self.digester,
            differ=self.differ,
        ) as context:
            for tag in ordered:
                log = get_logger_with_context("engine", inspection=tag.value)
                log.debug(f"Running {tag.value} inspection")
                outcome = INSPECTIONS[tag]().run(context, peers, sink)
                if not outcome.passed:
                    log.info(f"{tag.value} inspection failed")
                outcomes.append(outcome)

        return RunReport(
            before=before.label if before else None,
            after=after.label,
            threshold=self.settings.threshold,
            worst_result=sink.worst_result,
            passed=all(o.passed for o in outcomes),
            outcomes=outcomes,
            findings=sink.findings,
        )
