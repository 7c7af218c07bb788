"""Unit tests for text helpers."""

from build_audit.utils.text import TEXT_SNIFF_SIZE, has_bad_word, is_text_file, split_words


class TestHasBadWord:
    """Tests for has_bad_word()."""

    def test_case_insensitive_substring(self):
        """Test matching ignores case and word boundaries."""
        assert has_bad_word("A CRAPPY tool", ["crap"])
        assert not has_bad_word("A fine tool", ["crap"])

    def test_empty_inputs(self):
        """Test None text and empty words never match."""
        assert not has_bad_word(None, ["crap"])
        assert not has_bad_word("anything", [""])
        assert not has_bad_word("anything", [])


class TestIsTextFile:
    """Tests for is_text_file()."""

    def test_text(self, tmp_path):
        """Test UTF-8 text."""
        path = tmp_path / "a.txt"
        path.write_text("héllo\n", encoding="utf-8")
        assert is_text_file(path)

    def test_binary(self, tmp_path):
        """Test NUL bytes mean binary."""
        path = tmp_path / "a.bin"
        path.write_bytes(b"\x7fELF\x00\x01")
        assert not is_text_file(path)

    def test_invalid_utf8(self, tmp_path):
        """Test undecodable bytes mean binary."""
        path = tmp_path / "a.bin"
        path.write_bytes(b"\xff\xfe\xfa")
        assert not is_text_file(path)

    def test_multibyte_cut_at_boundary(self, tmp_path):
        """Test a character split by the sniff window still counts as text."""
        path = tmp_path / "a.txt"
        path.write_bytes(b"a" * (TEXT_SNIFF_SIZE - 1) + "é".encode("utf-8"))
        assert is_text_file(path)


class TestSplitWords:
    """Tests for split_words()."""

    def test_split(self):
        """Test strings, lists and None."""
        assert split_words("a  b\tc") == ["a", "b", "c"]
        assert split_words(["a", "", 3]) == ["a", "3"]
        assert split_words(None) == []
