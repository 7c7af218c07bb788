"""Package header metadata checks."""

from __future__ import annotations

from typing import TYPE_CHECKING

from build_audit.core.inspection import BaseInspection
from build_audit.models.package import HeaderTag, PackageHeader
from build_audit.models.results import Finding, Inspection, Remedy, Severity, Verdict
from build_audit.utils.config import Settings
from build_audit.utils.text import has_bad_word

if TYPE_CHECKING:
    from build_audit.core.context import InspectionContext
    from build_audit.core.results import ResultSink
    from build_audit.models.package import PeerSet


class MetadataDiffer(BaseInspection):
    """Checks Vendor, Build Host, Summary and Description.

    The after header is checked against the settings on its own; when a
    before header exists, Vendor/Summary/Description drift between the two
    is reported for a human to verify.
    """

    inspection = Inspection.METADATA
    description = "Check Vendor, Build Host, Summary and Description for policy and drift."

    def inspect(
        self,
        context: "InspectionContext",
        peers: "PeerSet",
        sink: "ResultSink",
    ) -> None:
        for pkg in peers.packages:
            if pkg.after_header is None:
                continue
            findings = self.check(pkg.before_header, pkg.after_header, context.settings)
            if any(f.severity > Severity.INFO for f in findings):
                self.problem()
            sink.extend(findings)

    def check(
        self,
        before: PackageHeader | None,
        after: PackageHeader,
        settings: Settings,
    ) -> list[Finding]:
        """Run every metadata check on one subpackage.

        Args:
            before: Header of the before build, if the subpackage existed
            after: Header of the after build
            settings: Expected vendor, build host suffixes and bad words

        Returns:
            Findings in check order
        """
        findings = self._check_after(after, settings)
        if before is not None:
            findings.extend(self._check_drift(before, after))
        return findings

    def _check_after(self, after: PackageHeader, settings: Settings) -> list[Finding]:
        findings = []
        nevra = after.nevra

        if settings.vendor is None:
            findings.append(
                self.finding(
                    Verdict.info(),
                    f'Vendor not set in configuration, ignoring Package Vendor "{after.vendor or ""}" in {nevra}',
                    remedy=Remedy.VENDOR,
                )
            )
        elif after.vendor and after.vendor != settings.vendor:
            findings.append(
                self.finding(
                    Verdict.bad(),
                    f'Package Vendor "{after.vendor}" is not "{settings.vendor}" in {nevra}',
                    remedy=Remedy.VENDOR,
                )
            )

        if after.buildhost and settings.buildhost_subdomain:
            if not any(after.buildhost.endswith(s) for s in settings.buildhost_subdomain):
                findings.append(
                    self.finding(
                        Verdict.bad(),
                        f'Package Build Host "{after.buildhost}" is not within an expected '
                        f"build host subdomain in {nevra}",
                        remedy=Remedy.BUILDHOST,
                    )
                )

        for tag in (HeaderTag.SUMMARY, HeaderTag.DESCRIPTION):
            value = after.get(tag)
            if not has_bad_word(value, settings.badwords):
                continue

            label = tag.value.capitalize()
            findings.append(
                self.finding(
                    Verdict.bad(),
                    f"Package {label} contains unprofessional language in {nevra}",
                    details=f"{label}: {value}" if tag is HeaderTag.SUMMARY else value,
                    remedy=Remedy.BADWORDS,
                )
            )

        return findings

    def _check_drift(self, before: PackageHeader, after: PackageHeader) -> list[Finding]:
        findings = []
        name = after.name

        vendor_msg = None
        if before.vendor is None and after.vendor:
            vendor_msg = f'Gained Package Vendor "{after.vendor}" in {name}'
        elif before.vendor and after.vendor is None:
            vendor_msg = f'Lost Package Vendor "{before.vendor}" in {name}'
        elif before.vendor and after.vendor and before.vendor != after.vendor:
            vendor_msg = f'Package Vendor changed from "{before.vendor}" to "{after.vendor}" in {name}'
        if vendor_msg:
            findings.append(self.finding(Verdict.verify(), vendor_msg))

        if (before.summary or "") != (after.summary or ""):
            findings.append(
                self.finding(
                    Verdict.verify(),
                    f'Package Summary changed from "{before.summary or ""}" '
                    f'to "{after.summary or ""}" in {name}',
                )
            )

        if (before.description or "") != (after.description or ""):
            findings.append(
                self.finding(
                    Verdict.verify(),
                    f"Package Description changed in {name}",
                    details=f"from:\n\n{before.description or ''}\n\nto:\n\n{after.description or ''}",
                )
            )

        return findings
