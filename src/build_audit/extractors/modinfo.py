"""Kernel module introspection through the modinfo tool."""

from __future__ import annotations

import re
import subprocess
from pathlib import Path

from build_audit.extractors.base import ModuleHandle
from build_audit.utils.errors import IntrospectionError
from build_audit.utils.logging import get_logger

logger = get_logger("modinfo")

ELF_MAGIC = b"\x7fELF"

COMPRESSED_MAGIC = {
    ".xz": b"\xfd7zXZ\x00",
    ".zst": b"\x28\xb5\x2f\xfd",
    ".gz": b"\x1f\x8b",
}

_FIELD_LINE = re.compile(r"^([A-Za-z0-9_.-]+):\s*(.*)$")


def module_name(path: Path) -> str:
    """Kernel module name of a file, e.g. ``snd-hda.ko.xz`` gives ``snd_hda``."""
    name = path.name.split(".", 1)[0]
    return name.replace("-", "_")


def parse_modinfo(output: str) -> list[tuple[str, str]]:
    """Parse modinfo output into (key, value) pairs.

    Lines that do not start a new field are continuations of the previous
    value.
    """
    fields: list[tuple[str, str]] = []
    for line in output.splitlines():
        m = _FIELD_LINE.match(line)
        if m:
            fields.append((m.group(1), m.group(2).strip()))
        elif fields and line.strip():
            key, value = fields[-1]
            fields[-1] = (key, f"{value}\n{line.strip()}")
    return fields


class ModinfoIntrospector:
    """Reads kernel module info by running ``modinfo`` on the file.

    Files are checked for the magic of their format first: ELF for plain
    modules, the compressor magic for ``.ko.xz``, ``.ko.zst`` and
    ``.ko.gz``. Compressed modules are passed to modinfo as-is.

    Example:
        introspector = ModinfoIntrospector()
        handle = introspector.open(Path("/tmp/after/lib/modules/6.1/foo.ko"))
        if handle is not None:
            print(introspector.read_info(handle))
    """

    def __init__(self, command: str = "modinfo") -> None:
        self.command = command

    def open(self, path: Path) -> ModuleHandle | None:
        """Open a kernel module, returning None for non-module files."""
        expected = COMPRESSED_MAGIC.get(path.suffix, ELF_MAGIC)
        try:
            with open(path, "rb") as f:
                magic = f.read(len(expected))
        except OSError as e:
            raise IntrospectionError(f"Unable to open kernel module: {e}", path=str(path))

        if magic != expected:
            logger.debug(f"{path} does not carry the expected magic, skipping")
            return None

        return ModuleHandle(path=path, name=module_name(path))

    def read_info(self, handle: ModuleHandle) -> list[tuple[str, str]]:
        """Run modinfo and return its key/value listing."""
        cmd = [self.command, str(handle.path)]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, errors="replace")
        except FileNotFoundError:
            raise IntrospectionError(f"{self.command} not found", path=str(handle.path))

        if result.returncode != 0:
            raise IntrospectionError(
                f"{self.command} failed: {result.stderr.strip()}",
                path=str(handle.path),
            )

        return parse_modinfo(result.stdout)
