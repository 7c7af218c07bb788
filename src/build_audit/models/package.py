"""Package, build and peer data models."""

import posixpath
import stat
from enum import Enum
from pathlib import Path
from typing import Iterator

from pydantic import BaseModel, Field


class HeaderTag(str, Enum):
    """Symbolic names of the package header fields the inspections read."""

    NAME = "name"
    EPOCH = "epoch"
    VERSION = "version"
    RELEASE = "release"
    ARCH = "arch"
    VENDOR = "vendor"
    BUILDHOST = "buildhost"
    SUMMARY = "summary"
    DESCRIPTION = "description"
    LICENSE = "license"


class PackageHeader(BaseModel):
    """Header fields of one binary or source package."""

    model_config = {"frozen": True}

    name: str = Field(description="Package name")
    epoch: str | None = Field(default=None, description="Package epoch")
    version: str = Field(description="Package version")
    release: str = Field(default="", description="Package release")
    arch: str = Field(default="noarch", description="Package architecture, 'src' for source packages")
    vendor: str | None = Field(default=None, description="Vendor tag")
    buildhost: str | None = Field(default=None, description="Host the package was built on")
    summary: str | None = Field(default=None, description="One-line summary")
    description: str | None = Field(default=None, description="Long description")
    license: str | None = Field(default=None, description="License expression")
    sources: list[str] = Field(
        default_factory=list,
        description="Declared source archive basenames (source packages only)",
    )

    def get(self, tag: HeaderTag) -> str | None:
        """Look up a header field by symbolic tag."""
        return getattr(self, tag.value)

    @property
    def is_source(self) -> bool:
        """Whether this is a source package header."""
        return self.arch == "src"

    @property
    def nevra(self) -> str:
        """Name-[epoch:]version-release.arch string."""
        evr = f"{self.version}-{self.release}" if self.release else self.version
        if self.epoch:
            evr = f"{self.epoch}:{evr}"
        return f"{self.name}-{evr}.{self.arch}"


class PackageFile(BaseModel):
    """A file record as delivered by package extraction."""

    model_config = {"frozen": True}

    local_path: str = Field(description="Path of the file inside the package")
    full_path: Path | None = Field(
        default=None,
        description="Location of the extracted file content on disk",
    )
    mode: int = Field(default=stat.S_IFREG | 0o644, description="st_mode of the file")
    owner: str = Field(default="root", description="Owning user")
    group: str = Field(default="root", description="Owning group")

    @property
    def basename(self) -> str:
        """Last component of the local path."""
        return posixpath.basename(self.local_path)

    @property
    def is_regular(self) -> bool:
        """Whether the file is a regular file."""
        return stat.S_ISREG(self.mode)


class BuildPackage(BaseModel):
    """One subpackage of a build: its header and its files."""

    model_config = {"frozen": True}

    header: PackageHeader
    files: list[PackageFile] = Field(default_factory=list)


class Build(BaseModel):
    """A set of subpackages produced by one build."""

    model_config = {"frozen": True}

    label: str = Field(default="", description="Human-readable build identifier")
    packages: list[BuildPackage] = Field(default_factory=list)


class BuildSide(str, Enum):
    """Which build of the pair a file belongs to."""

    BEFORE = "before"
    AFTER = "after"

    @property
    def opposite(self) -> "BuildSide":
        return BuildSide.AFTER if self is BuildSide.BEFORE else BuildSide.BEFORE


class FileEntry(BaseModel):
    """A file within a PackageEntry, linked to its peer by index."""

    model_config = {"frozen": True}

    side: BuildSide = Field(description="Build this file belongs to")
    index: int = Field(description="Position in its side's file list")
    file: PackageFile = Field(description="The underlying file record")
    peer: int | None = Field(
        default=None,
        description="Index of the peer file in the opposite side's file list",
    )

    @property
    def local_path(self) -> str:
        return self.file.local_path

    @property
    def full_path(self) -> Path | None:
        return self.file.full_path


class PackageEntry(BaseModel):
    """One subpackage name with its before and after sides."""

    model_config = {"frozen": True}

    name: str = Field(description="Subpackage name")
    before_header: PackageHeader | None = Field(default=None)
    after_header: PackageHeader | None = Field(default=None)
    before_files: list[FileEntry] = Field(default_factory=list)
    after_files: list[FileEntry] = Field(default_factory=list)

    def files(self, side: BuildSide) -> list[FileEntry]:
        """File list of one side."""
        return self.before_files if side is BuildSide.BEFORE else self.after_files

    def peer_of(self, entry: FileEntry) -> FileEntry | None:
        """Resolve the peer of a file entry, if it has one."""
        if entry.peer is None:
            return None
        return self.files(entry.side.opposite)[entry.peer]

    @property
    def is_source(self) -> bool:
        """Whether this entry pairs source packages."""
        header = self.after_header or self.before_header
        return header is not None and header.is_source

    @property
    def added_files(self) -> list[FileEntry]:
        """After files without a before peer."""
        return [f for f in self.after_files if f.peer is None]

    @property
    def removed_files(self) -> list[FileEntry]:
        """Before files without an after peer."""
        return [f for f in self.before_files if f.peer is None]


class PeerSet(BaseModel):
    """All PackageEntries of a before/after build pair."""

    model_config = {"frozen": True}

    packages: list[PackageEntry] = Field(default_factory=list)

    def get(self, name: str, is_source: bool = False) -> PackageEntry | None:
        """Get a PackageEntry by subpackage name.

        A source package and a binary package may share a name, so the
        source one is only returned when ``is_source`` is set.
        """
        for entry in self.packages:
            if entry.name == name and entry.is_source == is_source:
                return entry
        return None

    def after_files(self) -> Iterator[tuple[PackageEntry, FileEntry]]:
        """Walk every after-side file along with its package."""
        for pkg in self.packages:
            for entry in pkg.after_files:
                yield pkg, entry
