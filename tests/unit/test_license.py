"""Unit tests for license validation."""

import json

import pytest

from build_audit.core.context import InspectionContext
from build_audit.core.license import (
    LicenseDatabase,
    LicenseInspection,
    is_valid_license,
    iter_license_phrases,
    parens_balanced,
)
from build_audit.core.peers import match
from build_audit.core.results import ResultSink
from build_audit.models.results import Inspection, Remedy, Severity
from build_audit.utils.errors import LicenseDatabaseError


class TestLicenseDatabase:
    """Tests for loading the license database."""

    def test_load_skips_invalid_entries(self, license_db):
        """Test entries without abbreviations or not mappings are skipped."""
        names = {e.name for e in license_db.entries}
        assert "MIT License" in names
        assert "License Without Short Forms" not in names
        assert "Broken Entry" not in names

    def test_approved_flag(self, license_db):
        """Test "yes" and true both approve, anything else does not."""
        assert license_db.approves("MIT")
        assert license_db.approves("Apache-2.0")
        assert not license_db.approves("Proprietary")

    def test_missing_file(self, tmp_path):
        """Test loading a missing database."""
        with pytest.raises(LicenseDatabaseError) as exc_info:
            LicenseDatabase.load(tmp_path / "missing.json")
        assert exc_info.value.code == "LICENSEDB_ERROR"

    def test_not_an_object(self, tmp_path):
        """Test a database that is not a JSON object."""
        path = tmp_path / "list.json"
        path.write_text(json.dumps(["MIT"]))
        with pytest.raises(LicenseDatabaseError, match="JSON object"):
            LicenseDatabase.load(path)

    def test_invalid_json(self, tmp_path):
        """Test a database that is not JSON at all."""
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(LicenseDatabaseError):
            LicenseDatabase.load(path)


class TestIterLicensePhrases:
    """Tests for the phrase tokenizer."""

    def test_splits_on_boolean_keywords(self):
        """Test and/or separate phrases and are dropped."""
        assert list(iter_license_phrases("GPLv2+ and MIT or BSD")) == ["GPLv2+", "MIT", "BSD"]

    def test_keeps_multi_word_phrases(self):
        """Test consecutive words are joined with single spaces."""
        assert list(iter_license_phrases("Public   Domain and ASL 2.0")) == ["Public Domain", "ASL 2.0"]

    def test_parentheses_separate_tokens(self):
        """Test parentheses are treated as separators."""
        assert list(iter_license_phrases("GPLv2+ and (MIT or BSD)")) == ["GPLv2+", "MIT", "BSD"]

    def test_keywords_case_insensitive(self):
        """Test AND / Or are keywords too."""
        assert list(iter_license_phrases("MIT AND BSD Or GPLv2+")) == ["MIT", "BSD", "GPLv2+"]

    def test_empty_and_keyword_only(self):
        """Test expressions without phrases."""
        assert list(iter_license_phrases("")) == []
        assert list(iter_license_phrases("and or")) == []

    def test_is_lazy(self):
        """Test phrases are produced one at a time."""
        phrases = iter_license_phrases("MIT and BSD")
        assert next(phrases) == "MIT"
        assert next(phrases) == "BSD"


class TestParensBalanced:
    """Tests for parenthesis balance checking."""

    @pytest.mark.parametrize("expression", ["", "MIT", "(MIT)", "((MIT) or (BSD))"])
    def test_balanced(self, expression):
        """Test balanced expressions."""
        assert parens_balanced(expression)

    @pytest.mark.parametrize("expression", ["(MIT", "MIT)", ")MIT(", "(MIT))("])
    def test_unbalanced(self, expression):
        """Test unbalanced expressions."""
        assert not parens_balanced(expression)


class TestIsValidLicense:
    """Tests for is_valid_license()."""

    def test_single_approved(self, license_db):
        """Test a single approved short form."""
        assert is_valid_license(license_db, "MIT")
        assert is_valid_license(license_db, "GPL-2.0-or-later")

    def test_conjunction_requires_every_phrase(self, license_db):
        """Test one unapproved phrase invalidates the expression."""
        assert is_valid_license(license_db, "GPLv2+ and MIT")
        assert not is_valid_license(license_db, "GPLv2+ and BadWord License")
        assert not is_valid_license(license_db, "BadWord License or MIT")

    def test_multi_word_phrase(self, license_db):
        """Test multi-word short forms validate."""
        assert is_valid_license(license_db, "ASL 2.0 and Public Domain")

    def test_unapproved_license(self, license_db):
        """Test a known but unapproved license."""
        assert not is_valid_license(license_db, "Proprietary")

    def test_unbalanced_parentheses(self, license_db):
        """Test unbalanced parentheses invalidate an otherwise valid expression."""
        assert not is_valid_license(license_db, "(MIT or BSD")
        assert not is_valid_license(license_db, "MIT or BSD)")

    def test_whole_tag_shortcut(self, license_db):
        """Test an exact canonical name is valid as a whole."""
        for entry in license_db.entries:
            if entry.approved:
                assert is_valid_license(license_db, entry.name)

    def test_whole_tag_shortcut_requires_exact_match(self, license_db):
        """Test a canonical name with extra text is decomposed."""
        assert not is_valid_license(license_db, "MIT License and BSD")

    def test_unapproved_name_is_not_whole_tag(self, license_db):
        """Test canonical names of unapproved licenses do not validate."""
        assert not is_valid_license(license_db, "Proprietary License")

    def test_empty_expression_is_vacuously_valid(self, license_db):
        """Test zero phrases seen means zero mismatches."""
        assert is_valid_license(license_db, "")
        assert is_valid_license(license_db, "and or")


class TestLicenseInspection:
    """Tests for the license inspection driver."""

    def _run(self, settings, after, before=None):
        sink = ResultSink()
        with InspectionContext(settings) as context:
            outcome = LicenseInspection().run(context, match(before, after), sink)
        return outcome, sink

    def test_valid_license(self, settings, make_package, make_build):
        """Test a valid tag gives INFO and an OK result."""
        outcome, sink = self._run(settings, make_build(make_package(license="GPLv2+ and MIT")))

        assert outcome.passed
        severities = [f.severity for f in sink.findings]
        assert severities == [Severity.INFO, Severity.OK]
        assert sink.findings[0].message == "Valid License Tag in foo-1.0-1.x86_64: GPLv2+ and MIT"

    def test_invalid_license(self, settings, make_package, make_build):
        """Test an invalid tag gives exactly one BAD finding."""
        before = make_build(make_package(license="GPLv2+ and MIT"))
        after = make_build(make_package(license="GPLv2+ and BadWord License"))

        outcome, sink = self._run(settings, after, before)

        bad = [f for f in sink.findings if f.severity == Severity.BAD]
        assert not outcome.passed
        assert len(bad) == 1
        assert bad[0].remedy == Remedy.LICENSE
        assert "Invalid License Tag" in bad[0].message

    def test_empty_license(self, settings, make_package, make_build):
        """Test an empty tag is rejected."""
        outcome, sink = self._run(settings, make_build(make_package(license="  ")))

        assert not outcome.passed
        assert sink.findings[0].message == "Empty License Tag in foo-1.0-1.x86_64"

    def test_bad_word_in_license(self, settings, make_package, make_build):
        """Test forbidden words in the tag are reported."""
        outcome, sink = self._run(settings, make_build(make_package(license="Damn Fine License")))

        remedies = [f.remedy for f in sink.findings]
        assert Remedy.BADWORDS in remedies
        assert not outcome.passed

    def test_missing_database(self, settings, tmp_path, make_package, make_build):
        """Test a missing database fails the inspection without raising."""
        settings = settings.model_copy(update={"licensedb": str(tmp_path / "nope.json")})

        outcome, sink = self._run(settings, make_build(make_package()))

        assert not outcome.passed
        assert outcome.errors[0].code == "LICENSEDB_ERROR"
        assert len(sink) == 1
        assert sink.findings[0].remedy == Remedy.LICENSEDB
        assert sink.findings[0].inspection == Inspection.LICENSE

    def test_skips_removed_subpackages(self, settings, make_package, make_build):
        """Test subpackages only in the before build are not checked."""
        before = make_build(make_package(name="gone", license="Bogus"))
        after = make_build(make_package(license="MIT"))

        outcome, sink = self._run(settings, after, before)

        assert outcome.passed
        assert all("gone" not in (f.message or "") for f in sink.findings)

    def test_database_released_after_run(self, settings, make_package, make_build):
        """Test the context drops the database at the end of the run."""
        with InspectionContext(settings) as context:
            LicenseInspection().run(context, match(None, make_build(make_package())), ResultSink())
            assert context.licenses.loaded
        assert not context.licenses.loaded
