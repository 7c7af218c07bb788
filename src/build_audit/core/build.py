"""Loading builds from manifest files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from build_audit.core.whitelist import parse_mode
from build_audit.models.package import Build, BuildPackage, PackageFile, PackageHeader
from build_audit.utils.errors import ManifestError
from build_audit.utils.logging import get_logger

logger = get_logger("build")


def load_build(path: Path | str) -> Build:
    """Load a build manifest.

    A manifest is a YAML (or JSON) mapping::

        label: foo-1.2-1
        root: extracted        # relative to the manifest, default: its directory
        packages:
          - header: {name: foo, version: "1.2", release: "1", arch: x86_64}
            root: foo          # optional, relative to the build root
            files:
              - /usr/bin/foo
              - path: /usr/lib/modules/6.1/extra/foo.ko
                mode: "-rw-r--r--"

    File content is expected at ``<root>/<package root>/<local path>``.

    Args:
        path: Manifest file

    Returns:
        The described build

    Raises:
        ManifestError: If the manifest cannot be read or is invalid
    """
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ManifestError(f"Invalid manifest {path}: {e}", str(path))
    except OSError as e:
        raise ManifestError(f"Failed to read manifest {path}: {e}", str(path))

    if not isinstance(data, dict):
        raise ManifestError(f"Manifest {path} must contain a mapping", str(path))

    packages = data.get("packages")
    if not isinstance(packages, list):
        raise ManifestError(f"Manifest {path} must list its packages", str(path))

    root = path.parent / data.get("root", ".")

    try:
        build = Build(
            label=str(data.get("label") or path.stem),
            packages=[_load_package(pkg, root) for pkg in packages],
        )
    except (ValidationError, ValueError, TypeError) as e:
        raise ManifestError(f"Invalid manifest {path}: {e}", str(path))

    logger.debug(f"Loaded build {build.label} with {len(build.packages)} packages")
    return build


def _load_package(data: Any, root: Path) -> BuildPackage:
    if not isinstance(data, dict) or not isinstance(data.get("header"), dict):
        raise ValueError("each package needs a header mapping")

    # unquoted YAML versions and epochs arrive as numbers
    header_data = {
        key: str(value) if isinstance(value, (int, float)) and not isinstance(value, bool) else value
        for key, value in data["header"].items()
    }
    header = PackageHeader.model_validate(header_data)
    pkg_root = root / data.get("root", ".")
    files = [_load_file(f, pkg_root) for f in data.get("files") or []]
    return BuildPackage(header=header, files=files)


def _load_file(data: Any, root: Path) -> PackageFile:
    if isinstance(data, str):
        data = {"path": data}
    if not isinstance(data, dict) or "path" not in data:
        raise ValueError(f"invalid file entry: {data!r}")

    local_path = str(data["path"])
    fields: dict[str, Any] = {
        "local_path": local_path,
        "full_path": root / local_path.lstrip("/"),
    }

    mode = data.get("mode")
    if isinstance(mode, str):
        fields["mode"] = parse_mode(mode)
    elif mode is not None:
        fields["mode"] = mode

    for key in ("owner", "group"):
        if key in data:
            fields[key] = str(data[key])

    return PackageFile.model_validate(fields)
