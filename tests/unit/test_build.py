"""Unit tests for build manifest loading."""

import json
import stat

import pytest

from build_audit.core.build import load_build
from build_audit.utils.errors import ManifestError


class TestLoadBuild:
    """Tests for load_build()."""

    def test_yaml_manifest(self, tmp_path):
        """Test a YAML manifest with package and file roots."""
        manifest = tmp_path / "after.yaml"
        manifest.write_text(
            "label: foo-1.2-1\n"
            "root: extracted\n"
            "packages:\n"
            "  - header: {name: foo, version: 1.2, release: 1, arch: x86_64, license: MIT}\n"
            "    root: foo\n"
            "    files:\n"
            "      - /usr/bin/foo\n"
            "      - path: /usr/bin/foo-helper\n"
            "        mode: \"-rwsr-xr-x\"\n"
            "        owner: root\n"
            "        group: wheel\n"
        )

        build = load_build(manifest)

        assert build.label == "foo-1.2-1"
        pkg = build.packages[0]
        assert pkg.header.version == "1.2"
        assert pkg.header.release == "1"
        assert pkg.files[0].full_path == tmp_path / "extracted" / "foo" / "usr/bin/foo"
        assert pkg.files[1].mode == stat.S_IFREG | stat.S_ISUID | 0o755
        assert pkg.files[1].group == "wheel"

    def test_json_manifest_and_default_label(self, tmp_path):
        """Test JSON manifests load and the label falls back to the file stem."""
        manifest = tmp_path / "before.json"
        manifest.write_text(
            json.dumps(
                {
                    "packages": [
                        {
                            "header": {"name": "foo", "version": "1.0", "arch": "src", "sources": ["foo.tar.gz"]},
                            "files": [{"path": "foo.tar.gz", "mode": 0o100644}],
                        }
                    ]
                }
            )
        )

        build = load_build(manifest)

        assert build.label == "before"
        assert build.packages[0].header.sources == ["foo.tar.gz"]
        assert build.packages[0].files[0].full_path == tmp_path / "foo.tar.gz"

    def test_missing_file(self, tmp_path):
        """Test a missing manifest."""
        with pytest.raises(ManifestError) as exc_info:
            load_build(tmp_path / "missing.yaml")
        assert exc_info.value.code == "MANIFEST_ERROR"

    @pytest.mark.parametrize(
        "content",
        [
            "- just\n- a list\n",
            "label: x\n",
            "packages:\n  - name: foo\n",
            "packages:\n  - header: {version: 1.0}\n",
            "packages:\n  - header: {name: foo, version: 1.0}\n    files:\n      - {owner: root}\n",
            "packages:\n  - header: {name: foo, version: 1.0}\n    files:\n      - {path: /x, mode: bogus}\n",
            "packages: [unclosed\n",
        ],
    )
    def test_invalid_manifest(self, tmp_path, content):
        """Test invalid manifests raise ManifestError."""
        manifest = tmp_path / "bad.yaml"
        manifest.write_text(content)
        with pytest.raises(ManifestError):
            load_build(manifest)
