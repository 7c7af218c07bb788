"""Stat and capabilities whitelist loading."""

from __future__ import annotations

import stat
from pathlib import Path

from build_audit.models.whitelist import (
    CapsFileEntry,
    CapsWhitelistEntry,
    StatWhitelistEntry,
)
from build_audit.utils.errors import WhitelistError
from build_audit.utils.logging import get_logger

logger = get_logger("whitelist")

_FILE_TYPES = {
    "-": stat.S_IFREG,
    "d": stat.S_IFDIR,
    "c": stat.S_IFCHR,
    "b": stat.S_IFBLK,
    "l": stat.S_IFLNK,
    "s": stat.S_IFSOCK,
    "p": stat.S_IFIFO,
}

# (read, write, execute, special bit, special letter) per permission triad
_TRIADS = (
    (stat.S_IRUSR, stat.S_IWUSR, stat.S_IXUSR, stat.S_ISUID, "s"),
    (stat.S_IRGRP, stat.S_IWGRP, stat.S_IXGRP, stat.S_ISGID, "s"),
    (stat.S_IROTH, stat.S_IWOTH, stat.S_IXOTH, stat.S_ISVTX, "t"),
)


def parse_mode(value: str) -> int:
    """Convert an ``ls -l`` mode string such as ``-rwsr-xr-x`` to st_mode.

    Raises:
        ValueError: If the string is not a valid 10-character mode
    """
    if len(value) != 10:
        raise ValueError(f"Invalid mode string '{value}'")

    if value[0] not in _FILE_TYPES:
        raise ValueError(f"Invalid file type in mode string '{value}'")
    mode = _FILE_TYPES[value[0]]

    for i, (read, write, execute, special, letter) in enumerate(_TRIADS):
        r, w, x = value[1 + 3 * i: 4 + 3 * i]

        if r == "r":
            mode |= read
        elif r != "-":
            raise ValueError(f"Invalid mode string '{value}'")

        if w == "w":
            mode |= write
        elif w != "-":
            raise ValueError(f"Invalid mode string '{value}'")

        if x == "x":
            mode |= execute
        elif x == letter:
            mode |= execute | special
        elif x == letter.upper():
            mode |= special
        elif x != "-":
            raise ValueError(f"Invalid mode string '{value}'")

    return mode


def _data_lines(path: Path) -> list[tuple[int, list[str]]]:
    """Read the non-comment lines of a whitelist file, split into fields."""
    try:
        text = path.read_text()
    except FileNotFoundError:
        raise WhitelistError(f"Whitelist not found: {path}", str(path))
    except OSError as e:
        raise WhitelistError(f"Unable to read whitelist {path}: {e}", str(path))

    lines = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip() or line.startswith("#"):
            continue
        lines.append((lineno, line.split()))
    return lines


def load_stat_whitelist(path: Path | str) -> list[StatWhitelistEntry]:
    """Load a stat whitelist.

    Each line is ``<mode> <owner> <group> <path>``; the path must contain a
    ``/`` and anything before the first one is dropped. Malformed lines are
    logged and skipped.

    Raises:
        WhitelistError: If the file does not exist
    """
    path = Path(path)
    entries = []

    for lineno, fields in _data_lines(path):
        if len(fields) < 4:
            logger.warning(f"{path}:{lineno}: expected mode, owner, group and path")
            continue

        mode_str, owner, group, filename = fields[:4]
        try:
            mode = parse_mode(mode_str)
        except ValueError as e:
            logger.warning(f"{path}:{lineno}: {e}")
            continue

        slash = filename.find("/")
        if slash < 0:
            logger.warning(f"{path}:{lineno}: invalid filename '{filename}'")
            continue

        entries.append(
            StatWhitelistEntry(mode=mode, owner=owner, group=group, filename=filename[slash:])
        )

    logger.debug(f"Loaded {len(entries)} stat whitelist entries from {path}")
    return entries


def load_caps_whitelist(path: Path | str) -> list[CapsWhitelistEntry]:
    """Load a capabilities whitelist.

    Each line is ``<package> <path> [<caps>]``. Lines for the same package
    are grouped into one entry in order of first appearance.

    Raises:
        WhitelistError: If the file does not exist
    """
    path = Path(path)
    grouped: dict[str, list[CapsFileEntry]] = {}

    for lineno, fields in _data_lines(path):
        if len(fields) < 2:
            logger.warning(f"{path}:{lineno}: expected package and path")
            continue

        package, filepath = fields[0], fields[1]
        caps = fields[2] if len(fields) > 2 else ""
        grouped.setdefault(package, []).append(CapsFileEntry(path=filepath, caps=caps))

    return [CapsWhitelistEntry(package=pkg, files=files) for pkg, files in grouped.items()]
