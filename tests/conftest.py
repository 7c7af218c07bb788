"""Shared test fixtures for build-audit tests."""

import json
import logging
from pathlib import Path
from typing import Any, Callable

import pytest

from build_audit.core.license import LicenseDatabase
from build_audit.extractors.base import ModuleHandle
from build_audit.extractors.modinfo import module_name
from build_audit.models.package import Build, BuildPackage, PackageFile, PackageHeader
from build_audit.utils.config import Settings
from build_audit.utils.errors import DiffError, IntrospectionError

LICENSES: dict[str, Any] = {
    "GNU General Public License v2.0 or later": {
        "fedora_abbrev": "GPLv2+",
        "spdx_abbrev": "GPL-2.0-or-later",
        "approved": "yes",
    },
    "MIT License": {"fedora_abbrev": "MIT", "spdx_abbrev": "MIT", "approved": "yes"},
    "BSD 3-Clause License": {"fedora_abbrev": "BSD", "spdx_abbrev": "BSD-3-Clause", "approved": "yes"},
    "Public Domain": {"fedora_abbrev": "Public Domain", "spdx_abbrev": "", "approved": "yes"},
    "Apache License 2.0": {"fedora_abbrev": "ASL 2.0", "spdx_abbrev": "Apache-2.0", "approved": True},
    "Proprietary License": {"fedora_abbrev": "Proprietary", "approved": "no"},
    "License Without Short Forms": {"approved": "yes"},
    "Broken Entry": "not-a-mapping",
}


class FakeIntrospector:
    """Module introspector backed by a path to modinfo listing mapping."""

    def __init__(
        self,
        modules: dict[Path, list[tuple[str, str]]] | None = None,
        failing: tuple[Path, ...] = (),
    ) -> None:
        self.modules = modules or {}
        self.failing = failing

    def open(self, path: Path) -> ModuleHandle | None:
        if path in self.failing:
            raise IntrospectionError("cannot read module", path=str(path))
        if path not in self.modules:
            return None
        return ModuleHandle(path=path, name=module_name(path))

    def read_info(self, handle: ModuleHandle) -> list[tuple[str, str]]:
        return self.modules[handle.path]


class FakeDiffer:
    """Line differ returning canned unified diff output."""

    OUTPUT = "--- before\n+++ after\n@@ -1 +1 @@\n-old line\n+new line\n"

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple[Path, Path]] = []

    def diff(self, before: Path, after: Path) -> str:
        self.calls.append((before, after))
        if self.fail:
            raise DiffError("diff exploded", path=str(after))
        return self.OUTPUT


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo logging configured by CLI invocations."""
    logger = logging.getLogger("build_audit")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers, logger.level, logger.propagate = handlers, level, propagate


@pytest.fixture
def license_db_file(tmp_path: Path) -> Path:
    """Write a small license database to disk."""
    path = tmp_path / "licenses.json"
    path.write_text(json.dumps(LICENSES))
    return path


@pytest.fixture
def license_db(license_db_file: Path) -> LicenseDatabase:
    """Load the sample license database."""
    return LicenseDatabase.load(license_db_file)


@pytest.fixture
def settings(license_db_file: Path) -> Settings:
    """Settings pointing at the sample license database."""
    return Settings(
        licensedb=str(license_db_file),
        vendor="Acme Corp",
        buildhost_subdomain=[".build.acme.com"],
        badwords=["crap", "damn"],
    )


@pytest.fixture
def make_header() -> Callable[..., PackageHeader]:
    """Factory for package headers with sane defaults."""

    def _make(**overrides: Any) -> PackageHeader:
        fields: dict[str, Any] = {
            "name": "foo",
            "version": "1.0",
            "release": "1",
            "arch": "x86_64",
            "vendor": "Acme Corp",
            "buildhost": "builder1.build.acme.com",
            "summary": "Foo utilities",
            "description": "Foo does useful things.",
            "license": "GPLv2+",
        }
        fields.update(overrides)
        return PackageHeader(**fields)

    return _make


@pytest.fixture
def make_package(make_header: Callable[..., PackageHeader]) -> Callable[..., BuildPackage]:
    """Factory for build packages; files may be PackageFile objects or local paths."""

    def _make(files: tuple = (), **header: Any) -> BuildPackage:
        records = [f if isinstance(f, PackageFile) else PackageFile(local_path=f) for f in files]
        return BuildPackage(header=make_header(**header), files=records)

    return _make


@pytest.fixture
def make_build() -> Callable[..., Build]:
    """Factory for builds."""

    def _make(*packages: BuildPackage, label: str = "") -> Build:
        return Build(label=label, packages=list(packages))

    return _make


@pytest.fixture
def fake_introspector() -> type[FakeIntrospector]:
    """The fake module introspector class."""
    return FakeIntrospector


@pytest.fixture
def fake_differ() -> FakeDiffer:
    """A fake line differ."""
    return FakeDiffer()
