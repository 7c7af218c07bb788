"""Default content digester and line differ."""

from __future__ import annotations

import subprocess
from pathlib import Path

from build_audit.utils.errors import DiffError, DigestError
from build_audit.utils.hashing import DEFAULT_ALGORITHM, hash_file


class HashDigester:
    """Digests file content with a hashlib algorithm (SHA-256 by default)."""

    def __init__(self, algorithm: str = DEFAULT_ALGORITHM) -> None:
        self.algorithm = algorithm

    def digest(self, path: Path) -> str:
        try:
            return hash_file(path, self.algorithm)
        except OSError as e:
            raise DigestError(f"Unable to read file: {e}", path=str(path))


class UnifiedDiffer:
    """Runs ``diff -u`` on two files.

    diff exits 0 when the files match and 1 when they differ; anything
    else is an error.
    """

    def __init__(self, command: str = "diff") -> None:
        self.command = command

    def diff(self, before: Path, after: Path) -> str:
        cmd = [self.command, "-u", str(before), str(after)]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, errors="replace")
        except FileNotFoundError:
            raise DiffError(f"{self.command} not found", path=str(after))

        if result.returncode not in (0, 1):
            raise DiffError(f"{self.command} failed: {result.stderr.strip()}", path=str(after))
        return result.stdout
