"""License expression validation against the approved-license database."""

from __future__ import annotations

import json
import re
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterator

from build_audit.core.inspection import BaseInspection
from build_audit.models.license import LicenseDatabaseEntry
from build_audit.models.results import Inspection, Remedy, Verdict
from build_audit.utils.errors import LicenseDatabaseError
from build_audit.utils.logging import get_logger
from build_audit.utils.text import has_bad_word

if TYPE_CHECKING:
    from build_audit.core.context import InspectionContext
    from build_audit.core.results import ResultSink
    from build_audit.models.package import PeerSet

logger = get_logger("license")

BOOLEAN_KEYWORDS = frozenset({"and", "or"})

_TOKEN_SEPARATORS = re.compile(r"[()\s]+")


class LicenseDatabase:
    """Approved licenses and the short forms they may be written as.

    The database file is a JSON object keyed by license name::

        {
          "MIT License": {"fedora_abbrev": "MIT", "spdx_abbrev": "MIT", "approved": "yes"}
        }

    Entries that are not objects or have neither abbreviation are skipped.
    """

    def __init__(self, entries: list[LicenseDatabaseEntry]) -> None:
        self._entries = list(entries)
        self._approved: set[str] = set()
        self._approved_names: set[str] = set()
        for entry in self._entries:
            if entry.approved:
                self._approved.update(entry.abbreviations)
                self._approved_names.add(entry.name)

    @property
    def entries(self) -> list[LicenseDatabaseEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def approves(self, phrase: str) -> bool:
        """Whether a phrase equals a short form of an approved license."""
        return phrase in self._approved

    def approves_whole(self, expression: str) -> bool:
        """Whether an expression is exactly an approved license name or short form."""
        return expression in self._approved_names or expression in self._approved

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LicenseDatabase":
        entries = []
        for name, props in data.items():
            if not isinstance(props, dict):
                logger.warning(f"Skipping malformed license database entry '{name}'")
                continue

            entry = LicenseDatabaseEntry(
                name=name,
                fedora_abbrev=props.get("fedora_abbrev") or None,
                spdx_abbrev=props.get("spdx_abbrev") or None,
                approved=_parse_approved(props.get("approved")),
            )
            if not entry.abbreviations:
                logger.warning(f"License database entry '{name}' has no abbreviation, skipping")
                continue
            entries.append(entry)
        return cls(entries)

    @classmethod
    def load(cls, path: Path | str) -> "LicenseDatabase":
        """Load a license database file.

        Raises:
            LicenseDatabaseError: If the file is missing, unreadable or not a JSON object
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text())
        except FileNotFoundError:
            raise LicenseDatabaseError(f"License database not found: {path}", str(path))
        except (OSError, json.JSONDecodeError) as e:
            raise LicenseDatabaseError(f"Unable to read license database {path}: {e}", str(path))

        if not isinstance(data, dict):
            raise LicenseDatabaseError(f"License database {path} must be a JSON object", str(path))

        db = cls.from_dict(data)
        logger.debug(f"Loaded {len(db)} licenses from {path}")
        return db


def _parse_approved(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return isinstance(value, str) and value.strip().lower() == "yes"


class _PhraseState(Enum):
    COLLECTING = "collecting"
    BOOLEAN_SEEN = "boolean-seen"


def iter_license_phrases(expression: str) -> Iterator[str]:
    """Split a license expression into license phrases.

    Parentheses and whitespace separate tokens. Consecutive non-boolean
    tokens are joined by single spaces into one phrase, so multi-word
    licenses such as ``Public Domain`` survive; ``and`` / ``or`` end a
    phrase.

    Example:
        >>> list(iter_license_phrases("GPLv2+ and (MIT or Public Domain)"))
        ['GPLv2+', 'MIT', 'Public Domain']
    """
    state = _PhraseState.COLLECTING
    words: list[str] = []

    for token in _TOKEN_SEPARATORS.split(expression):
        if not token:
            continue

        if token.lower() in BOOLEAN_KEYWORDS:
            if state is _PhraseState.COLLECTING and words:
                yield " ".join(words)
                words = []
            state = _PhraseState.BOOLEAN_SEEN
        else:
            words.append(token)
            state = _PhraseState.COLLECTING

    if words:
        yield " ".join(words)


def parens_balanced(expression: str) -> bool:
    """Whether every ``(`` is closed and no ``)`` comes first."""
    depth = 0
    for ch in expression:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


def is_valid_license(db: LicenseDatabase, expression: str) -> bool:
    """Check a License tag against the database.

    The expression is valid when its parentheses balance and either the
    whole expression is exactly an approved license name or short form,
    or every phrase in it is an approved short form.
    An expression without phrases is vacuously valid.

    Args:
        db: Loaded license database
        expression: License tag value

    Returns:
        True if the expression is acceptable
    """
    if not parens_balanced(expression):
        return False

    if db.approves_whole(expression):
        return True

    seen = 0
    valid = 0
    for phrase in iter_license_phrases(expression):
        seen += 1
        if db.approves(phrase):
            valid += 1
        else:
            logger.debug(f"Unapproved license phrase: '{phrase}'")

    return seen == valid


class LicenseInspection(BaseInspection):
    """Validates the License tag of every after package."""

    inspection = Inspection.LICENSE
    description = "Verify the License tag is made of approved licenses."

    def inspect(
        self,
        context: "InspectionContext",
        peers: "PeerSet",
        sink: "ResultSink",
    ) -> None:
        try:
            db = context.licenses.ensure_loaded()
        except LicenseDatabaseError as e:
            self.hard_failure(
                sink,
                e,
                f"Missing license database {context.settings.licensedb_path}",
                remedy=Remedy.LICENSEDB,
            )
            return

        for pkg in peers.packages:
            header = pkg.after_header
            if header is None:
                continue

            nevra = header.nevra
            tag = header.license

            if not tag or not tag.strip():
                self.problem()
                sink.add(
                    self.finding(
                        Verdict.bad(),
                        f"Empty License Tag in {nevra}",
                        remedy=Remedy.LICENSE,
                    )
                )
                continue

            if is_valid_license(db, tag):
                sink.add(self.finding(Verdict.info(), f"Valid License Tag in {nevra}: {tag}"))
            else:
                self.problem()
                sink.add(
                    self.finding(
                        Verdict.bad(),
                        f"Invalid License Tag in {nevra}: {tag}",
                        remedy=Remedy.LICENSE,
                    )
                )

            if has_bad_word(tag, context.settings.badwords):
                self.problem()
                sink.add(
                    self.finding(
                        Verdict.bad(),
                        f"License Tag contains unprofessional language in {nevra}: {tag}",
                        remedy=Remedy.BADWORDS,
                    )
                )
