"""Text helpers shared by inspections and configuration loading."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

TEXT_SNIFF_SIZE = 8192


def has_bad_word(text: str | None, badwords: Iterable[str]) -> bool:
    """Check whether text contains any forbidden word.

    Matching is a case-insensitive substring search, the same for every
    header field it is applied to.

    Args:
        text: Text to scan (None never matches)
        badwords: Forbidden words

    Returns:
        True if any forbidden word occurs in the text
    """
    if not text:
        return False

    haystack = text.casefold()
    return any(word and word.casefold() in haystack for word in badwords)


def is_text_file(path: Path | str) -> bool:
    """Guess whether a file holds text.

    The first few KiB must contain no NUL byte and decode as UTF-8.

    Raises:
        OSError: If the file cannot be read
    """
    with open(path, "rb") as f:
        head = f.read(TEXT_SNIFF_SIZE)

    if b"\x00" in head:
        return False

    try:
        head.decode("utf-8")
    except UnicodeDecodeError as e:
        # a multibyte sequence cut at the sniff boundary is still text
        return len(head) == TEXT_SNIFF_SIZE and e.start >= len(head) - 3
    return True


def split_words(value: str | Iterable[str] | None) -> list[str]:
    """Split a whitespace-separated setting into a list.

    Lists pass through with empty items dropped.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    return [str(v) for v in value if str(v).strip()]
