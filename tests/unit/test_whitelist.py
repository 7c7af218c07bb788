"""Unit tests for whitelist loading."""

import stat

import pytest

from build_audit.core.whitelist import load_caps_whitelist, load_stat_whitelist, parse_mode
from build_audit.utils.errors import WhitelistError


class TestParseMode:
    """Tests for parse_mode()."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("-rw-r--r--", stat.S_IFREG | 0o644),
            ("drwxr-xr-x", stat.S_IFDIR | 0o755),
            ("lrwxrwxrwx", stat.S_IFLNK | 0o777),
            ("-rwsr-xr-x", stat.S_IFREG | stat.S_ISUID | 0o755),
            ("-rwSr--r--", stat.S_IFREG | stat.S_ISUID | 0o644),
            ("-rwxr-sr-x", stat.S_IFREG | stat.S_ISGID | 0o755),
            ("drwxrwxrwt", stat.S_IFDIR | stat.S_ISVTX | 0o777),
            ("drwxrwxrwT", stat.S_IFDIR | stat.S_ISVTX | 0o776),
        ],
    )
    def test_valid(self, value, expected):
        """Test ls -l style mode strings."""
        assert parse_mode(value) == expected

    @pytest.mark.parametrize("value", ["", "rw-r--r--", "?rw-r--r--", "-rw-r--r-q", "-rwtr--r--"])
    def test_invalid(self, value):
        """Test malformed mode strings."""
        with pytest.raises(ValueError):
            parse_mode(value)


class TestLoadStatWhitelist:
    """Tests for load_stat_whitelist()."""

    def test_load(self, tmp_path):
        """Test valid lines load and bad ones are skipped."""
        path = tmp_path / "rhel-9"
        path.write_text(
            "# mode owner group path\n"
            "\n"
            "-rwsr-xr-x root root /usr/bin/passwd\n"
            "drwxr-xr-x root root ./var/lib/foo\n"
            "-rwxr-xr-x root root no-slash\n"
            "bogus root root /usr/bin/bad\n"
            "-rw-r--r-- root\n"
        )

        entries = load_stat_whitelist(path)

        assert [e.filename for e in entries] == ["/usr/bin/passwd", "/var/lib/foo"]
        assert entries[0].mode == stat.S_IFREG | stat.S_ISUID | 0o755
        assert entries[1].owner == "root"

    def test_missing(self, tmp_path):
        """Test a missing whitelist raises."""
        with pytest.raises(WhitelistError) as exc_info:
            load_stat_whitelist(tmp_path / "missing")
        assert exc_info.value.code == "WHITELIST_ERROR"


class TestLoadCapsWhitelist:
    """Tests for load_caps_whitelist()."""

    def test_groups_by_package(self, tmp_path):
        """Test lines for the same package are grouped in order."""
        path = tmp_path / "rhel-9"
        path.write_text(
            "# package path caps\n"
            "iputils /usr/bin/ping cap_net_raw+ep\n"
            "shadow /usr/bin/newuidmap cap_setuid+ep\n"
            "iputils /usr/bin/arping\n"
            "lonely\n"
        )

        entries = load_caps_whitelist(path)

        assert [e.package for e in entries] == ["iputils", "shadow"]
        assert entries[0].caps_for("/usr/bin/ping") == "cap_net_raw+ep"
        assert entries[0].caps_for("/usr/bin/arping") == ""
        assert entries[0].caps_for("/usr/bin/other") is None

    def test_missing(self, tmp_path):
        """Test a missing whitelist raises."""
        with pytest.raises(WhitelistError):
            load_caps_whitelist(tmp_path / "missing")
