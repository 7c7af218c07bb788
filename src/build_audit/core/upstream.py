"""Upstream source archive comparison for source packages."""

from __future__ import annotations

from typing import TYPE_CHECKING

from build_audit.core.inspection import BaseInspection
from build_audit.models.package import FileEntry, PackageEntry, PackageHeader
from build_audit.models.results import Inspection, Remedy, Verdict
from build_audit.utils.errors import BuildAuditError, DigestError
from build_audit.utils.logging import get_logger
from build_audit.utils.text import is_text_file

if TYPE_CHECKING:
    from build_audit.core.context import InspectionContext
    from build_audit.core.results import ResultSink
    from build_audit.models.package import PeerSet

logger = get_logger("upstream")


def strip_diff_header(output: str) -> str:
    """Drop the leading ``--- `` and ``+++ `` file header lines of a unified diff."""
    for prefix in ("--- ", "+++ "):
        if output.startswith(prefix):
            output = output.partition("\n")[2]
    return output


def change_verdict(
    before: PackageHeader | None,
    after: PackageHeader,
) -> tuple[Verdict, Remedy | None]:
    """Verdict and remedy for changed or removed source files.

    Source changes that come with a new version are expected. Changing
    sources without a version bump needs verifying.
    """
    if before is None or before.version != after.version:
        return Verdict.info(), None
    return Verdict.verify(), Remedy.UPSTREAM


class UpstreamSourceDiffer(BaseInspection):
    """Reports new, changed and removed upstream source archives."""

    inspection = Inspection.UPSTREAM
    description = "Report changes to the upstream sources of source packages."

    def inspect(
        self,
        context: "InspectionContext",
        peers: "PeerSet",
        sink: "ResultSink",
    ) -> None:
        for pkg in peers.packages:
            if not pkg.is_source or not pkg.after_files:
                continue

            verdict, remedy = change_verdict(pkg.before_header, pkg.after_header)
            sources = context.sources.ensure_loaded(pkg.after_header)

            for entry in pkg.after_files:
                if entry.file.basename not in sources:
                    continue

                peer = pkg.peer_of(entry)
                if peer is None:
                    self.problem()
                    sink.add(
                        self.finding(
                            Verdict.info(),
                            f"New upstream source file `{entry.file.basename}` appeared",
                        )
                    )
                else:
                    self._compare(context, peer, entry, verdict, remedy, sink)

            for entry in self._removed_sources(pkg, sources):
                self.problem()
                sink.add(
                    self.finding(
                        verdict,
                        f"Source package member `{entry.file.basename}` removed",
                        remedy=remedy,
                    )
                )

    def _removed_sources(self, pkg: PackageEntry, sources: frozenset[str]) -> list[FileEntry]:
        declared = set(sources)
        if pkg.before_header is not None:
            declared.update(pkg.before_header.sources)
        return [f for f in pkg.removed_files if f.file.basename in declared]

    def _compare(
        self,
        context: "InspectionContext",
        before: FileEntry,
        after: FileEntry,
        verdict: Verdict,
        remedy: Remedy | None,
        sink: "ResultSink",
    ) -> None:
        name = after.file.basename
        try:
            if before.full_path is None or after.full_path is None:
                raise DigestError("No extracted content to digest", path=after.local_path)
            before_sum = context.digester.digest(before.full_path)
            after_sum = context.digester.digest(after.full_path)
        except DigestError as e:
            self.hard_failure(sink, e, f"Unable to compute digest of upstream source file `{name}`")
            return

        if before_sum == after_sum:
            return

        self.problem()
        sink.add(
            self.finding(
                verdict,
                f"Upstream source file `{name}` changed content",
                details=self._text_diff(context, before, after),
                remedy=remedy,
            )
        )

    def _text_diff(
        self,
        context: "InspectionContext",
        before: FileEntry,
        after: FileEntry,
    ) -> str | None:
        if before.full_path is None or after.full_path is None:
            return None

        try:
            if not (is_text_file(before.full_path) and is_text_file(after.full_path)):
                return None
            return strip_diff_header(context.differ.diff(before.full_path, after.full_path))
        except (OSError, BuildAuditError) as e:
            logger.warning(f"Unable to diff {after.local_path}: {e}")
            return None
