"""Kernel module parameter, dependency and alias comparison."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Iterable

from build_audit.core.inspection import BaseInspection
from build_audit.models.kmod import ModuleInfo, SetDiff
from build_audit.models.package import FileEntry, PackageHeader
from build_audit.models.results import Inspection, Remedy, Verdict
from build_audit.utils.config import KernelSettings
from build_audit.utils.errors import IntrospectionError
from build_audit.utils.logging import get_logger

if TYPE_CHECKING:
    from build_audit.core.context import InspectionContext
    from build_audit.core.results import ResultSink
    from build_audit.models.package import PeerSet

logger = get_logger("kmod")

AliasMap = dict[str, list[str]]
AliasVisitor = Callable[[str, list[str], list[str]], None]


def _unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))


def diff_sets(before: Iterable[str], after: Iterable[str]) -> SetDiff:
    """Set difference in both directions, each side sorted."""
    before_set = set(before)
    after_set = set(after)
    return SetDiff(lost=sorted(before_set - after_set), gain=sorted(after_set - before_set))


def module_info_from_listing(name: str, listing: list[tuple[str, str]]) -> ModuleInfo:
    """Build ModuleInfo from a raw modinfo listing.

    ``parm`` values look like ``debug:Enable debugging (int)``; only the
    name before the colon is kept. ``depends`` values are comma-separated.
    """
    parameters = []
    dependencies = []
    aliases = []

    for key, value in listing:
        if key == "parm":
            parm = value.split(":", 1)[0].strip()
            if parm:
                parameters.append(parm)
        elif key == "depends":
            dependencies.extend(d.strip() for d in value.split(",") if d.strip())
        elif key == "alias":
            if value.strip():
                aliases.append(value.strip())

    return ModuleInfo(
        name=name,
        parameters=_unique(parameters),
        dependencies=_unique(dependencies),
        aliases=_unique(aliases),
    )


def gather_module_aliases(modules: Iterable[ModuleInfo]) -> AliasMap:
    """Map every alias to the modules that provide it."""
    aliases: AliasMap = {}
    for info in modules:
        for alias in info.aliases:
            providers = aliases.setdefault(alias, [])
            if info.name not in providers:
                providers.append(info.name)
    return aliases


def compare_module_aliases(before: AliasMap, after: AliasMap, visitor: AliasVisitor) -> bool:
    """Find aliases that some before module no longer provides.

    For each such alias the visitor gets the alias, the before modules that
    lost it, and the after modules that newly provide it.

    Returns:
        True if no alias was lost
    """
    result = True
    for alias in sorted(before):
        after_modules = after.get(alias, [])
        lost_by = [m for m in before[alias] if m not in after_modules]
        if not lost_by:
            continue

        gained_by = [m for m in after_modules if m not in before[alias]]
        visitor(alias, lost_by, gained_by)
        result = False
    return result


def is_kernel_module_path(entry: FileEntry, kernel: KernelSettings) -> bool:
    """Whether a file looks like a kernel module worth introspecting."""
    if not entry.file.is_regular:
        return False
    if entry.local_path.startswith(kernel.debug_path):
        return False
    return kernel.modules_dir in entry.local_path and kernel.module_extension in entry.local_path


def loss_verdict(before: PackageHeader, after: PackageHeader) -> Verdict:
    """Verdict for lost parameters, dependencies and aliases.

    A loss in a rebuild with unchanged name and version needs verifying;
    otherwise it is informational.
    """
    if before.name == after.name and before.version == after.version:
        return Verdict.verify()
    return Verdict.info()


class KernelModuleDiffer(BaseInspection):
    """Compares kernel module parameters, dependencies and aliases."""

    inspection = Inspection.KMOD
    description = "Report kernel modules that lose parameters, dependencies or aliases."

    def inspect(
        self,
        context: "InspectionContext",
        peers: "PeerSet",
        sink: "ResultSink",
    ) -> None:
        kernel = context.settings.kernel

        for pkg in peers.packages:
            if pkg.after_header is None or pkg.before_header is None or pkg.is_source:
                continue

            verdict = loss_verdict(pkg.before_header, pkg.after_header)

            for entry in pkg.after_files:
                if not is_kernel_module_path(entry, kernel):
                    continue

                peer = pkg.peer_of(entry)
                if peer is None:
                    continue

                try:
                    before_info = self._read_module(context, peer)
                    after_info = self._read_module(context, entry)
                except IntrospectionError as e:
                    self.hard_failure(
                        sink,
                        e,
                        f"Unable to read kernel module {entry.local_path}",
                    )
                    continue

                if before_info is None or after_info is None:
                    logger.debug(f"{entry.local_path} is not a kernel module, skipping")
                    continue

                if not all(self.diff(before_info, after_info, entry.local_path, verdict, sink)):
                    self.problem()

    def _read_module(self, context: "InspectionContext", entry: FileEntry) -> ModuleInfo | None:
        if entry.full_path is None:
            raise IntrospectionError("No extracted content", path=entry.local_path)

        handle = context.introspector.open(entry.full_path)
        if handle is None:
            return None
        return module_info_from_listing(handle.name, context.introspector.read_info(handle))

    def diff(
        self,
        before: ModuleInfo,
        after: ModuleInfo,
        path: str,
        verdict: Verdict,
        sink: "ResultSink",
    ) -> tuple[bool, bool, bool]:
        """Compare one module pair and record findings.

        Args:
            before: Module info of the before file
            after: Module info of the after file
            path: Local path of the module, used in messages
            verdict: Verdict for losses (and gained dependencies)
            sink: Where findings are recorded

        Returns:
            (parameters kept, dependencies unchanged, aliases kept)
        """
        params = diff_sets(before.parameters, after.parameters)
        for parm in params.lost:
            sink.add(
                self.finding(
                    verdict,
                    f"Kernel module {path} removes parameter '{parm}'",
                    remedy=Remedy.KMOD_PARM,
                )
            )
        for parm in params.gain:
            sink.add(self.finding(Verdict.info(), f"Kernel module {path} adds parameter '{parm}'"))

        deps = diff_sets(before.dependencies, after.dependencies)
        for dep in deps.lost:
            sink.add(
                self.finding(
                    verdict,
                    f"Kernel module {path} removes dependency '{dep}'",
                    remedy=Remedy.KMOD_DEPS,
                )
            )
        for dep in deps.gain:
            sink.add(
                self.finding(
                    verdict,
                    f"Kernel module {path} adds dependency '{dep}'",
                    remedy=Remedy.KMOD_DEPS,
                )
            )

        def report_alias(alias: str, lost_by: list[str], gained_by: list[str]) -> None:
            for module in lost_by:
                sink.add(
                    self.finding(
                        verdict,
                        f"Kernel module '{module}' lost alias '{alias}'",
                        remedy=Remedy.KMOD_ALIAS,
                    )
                )
            for module in gained_by:
                sink.add(
                    self.finding(
                        verdict,
                        f"Kernel module '{module}' gained alias '{alias}'",
                        remedy=Remedy.KMOD_ALIAS,
                    )
                )

        aliases_kept = compare_module_aliases(
            gather_module_aliases([before]),
            gather_module_aliases([after]),
            report_alias,
        )

        return not params.lost, deps.unchanged, aliases_kept
