"""Peer matching between the before and after builds."""

from __future__ import annotations

import posixpath

from build_audit.models.package import (
    Build,
    BuildPackage,
    BuildSide,
    FileEntry,
    PackageEntry,
    PackageFile,
    PeerSet,
)
from build_audit.utils.logging import get_logger

logger = get_logger("peers")


def normalize_local_path(path: str, root: str | None = None) -> str:
    """Reduce a file path to its canonical local path inside the package.

    Args:
        path: Path as delivered by extraction
        root: Optional extraction root to strip from the front of the path

    Returns:
        Absolute, normalized POSIX path such as ``/usr/lib/libfoo.so``
    """
    if root and path.startswith(root):
        path = path[len(root):]
    return posixpath.normpath("/" + path.lstrip("/"))


def match(before: Build | None, after: Build | None) -> PeerSet:
    """Pair subpackages by name and files by local path.

    Every subpackage name found in either build gets one PackageEntry, in
    after-build order followed by subpackages that only exist before. Files
    are linked to the file with the same local path in the other build;
    unmatched files have no peer.

    When two files of one package normalize to the same local path, the last
    one wins and the earlier one is dropped with a warning. Duplicate
    subpackage names within one build are handled the same way. A source
    package is keyed apart from the binary package of the same name.

    Args:
        before: The before build, None for a new package
        after: The after build, None when only the old build is known

    Returns:
        PeerSet covering both builds
    """
    before_pkgs = _index_packages(before, BuildSide.BEFORE)
    after_pkgs = _index_packages(after, BuildSide.AFTER)

    keys = list(after_pkgs)
    keys.extend(key for key in before_pkgs if key not in after_pkgs)

    entries = [
        _match_package(key[0], before_pkgs.get(key), after_pkgs.get(key))
        for key in keys
    ]
    return PeerSet(packages=entries)


def _index_packages(build: Build | None, side: BuildSide) -> dict[tuple[str, bool], BuildPackage]:
    packages: dict[tuple[str, bool], BuildPackage] = {}
    if build is None:
        return packages

    for pkg in build.packages:
        key = (pkg.header.name, pkg.header.is_source)
        if key in packages:
            logger.warning(f"Duplicate {side.value} subpackage '{pkg.header.name}', keeping the last one")
            del packages[key]
        packages[key] = pkg
    return packages


def _index_files(pkg: BuildPackage | None, side: BuildSide) -> dict[str, PackageFile]:
    files: dict[str, PackageFile] = {}
    if pkg is None:
        return files

    for f in pkg.files:
        local_path = normalize_local_path(f.local_path)
        if local_path in files:
            logger.warning(
                f"{side.value} package {pkg.header.name} lists {local_path} more than once, "
                "keeping the last entry"
            )
            del files[local_path]
        if local_path != f.local_path:
            f = f.model_copy(update={"local_path": local_path})
        files[local_path] = f
    return files


def _match_package(
    name: str,
    before: BuildPackage | None,
    after: BuildPackage | None,
) -> PackageEntry:
    before_files = _index_files(before, BuildSide.BEFORE)
    after_files = _index_files(after, BuildSide.AFTER)

    before_index = {path: i for i, path in enumerate(before_files)}
    after_index = {path: i for i, path in enumerate(after_files)}

    return PackageEntry(
        name=name,
        before_header=before.header if before else None,
        after_header=after.header if after else None,
        before_files=[
            FileEntry(side=BuildSide.BEFORE, index=i, file=f, peer=after_index.get(path))
            for i, (path, f) in enumerate(before_files.items())
        ],
        after_files=[
            FileEntry(side=BuildSide.AFTER, index=i, file=f, peer=before_index.get(path))
            for i, (path, f) in enumerate(after_files.items())
        ],
    )
