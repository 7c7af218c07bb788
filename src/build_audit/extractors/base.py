"""Protocols for the external collaborators the inspections rely on."""

from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field


class ModuleHandle(BaseModel):
    """An opened kernel module."""

    model_config = {"frozen": True}

    path: Path = Field(description="Location of the module file")
    name: str = Field(description="Kernel module name")


@runtime_checkable
class ModuleIntrospector(Protocol):
    """Reads modinfo listings out of kernel module files.

    Example:
        class FakeIntrospector:
            def open(self, path: Path) -> ModuleHandle | None:
                return ModuleHandle(path=path, name="foo")

            def read_info(self, handle: ModuleHandle) -> list[tuple[str, str]]:
                return [("parm", "debug:Enable debugging (int)")]
    """

    def open(self, path: Path) -> ModuleHandle | None:
        """Open a kernel module.

        Args:
            path: File that looks like a kernel module

        Returns:
            Module handle, or None if the file is not a kernel module

        Raises:
            IntrospectionError: If the file cannot be read
        """
        ...

    def read_info(self, handle: ModuleHandle) -> list[tuple[str, str]]:
        """Read the raw key/value modinfo listing of a module.

        Raises:
            IntrospectionError: If the module info cannot be read
        """
        ...


@runtime_checkable
class ContentDigester(Protocol):
    """Computes a collision-resistant identity string for file content."""

    def digest(self, path: Path) -> str:
        """Digest a file.

        Raises:
            DigestError: If the file cannot be read
        """
        ...


@runtime_checkable
class LineDiffer(Protocol):
    """Produces a unified text diff between two files."""

    def diff(self, before: Path, after: Path) -> str:
        """Diff two files, returning the raw diff output.

        Raises:
            DiffError: If the diff could not be produced
        """
        ...
