"""build-audit: inspect package builds against their predecessors.

A build is described by a manifest listing its subpackages, their header
fields and their files. build-audit pairs the subpackages and files of two
builds and runs a set of inspections over them:

- **license**: the License tag must consist of approved licenses
- **metadata**: Vendor, Build Host, Summary and Description policy and drift
- **kmod**: kernel modules losing parameters, dependencies or aliases
- **upstream**: changes to the upstream source archives of source packages

Usage:
    # Library API
    from build_audit import InspectionEngine, load_build, load_settings

    engine = InspectionEngine(load_settings())
    report = engine.run(after=load_build("after.yaml"), before=load_build("before.yaml"))
    for finding in report.findings_at_least(Severity.VERIFY):
        print(finding.verdict, finding.message)

CLI:
    build-audit inspect after.yaml --before before.yaml
    build-audit license "GPLv2+ and MIT"
    build-audit check-config
"""

__version__ = "0.1.0"

# Core classes
from build_audit.core.build import load_build
from build_audit.core.engine import InspectionEngine
from build_audit.core.license import LicenseDatabase, is_valid_license
from build_audit.core.peers import match
from build_audit.core.results import ResultSink

# Models (commonly used)
from build_audit.models.package import Build, BuildPackage, PackageFile, PackageHeader, PeerSet
from build_audit.models.results import (
    Finding,
    Inspection,
    Remedy,
    RunReport,
    Severity,
    Verdict,
    WaiverAuthority,
)

# Settings
from build_audit.utils.config import Settings, load_settings

# Renderers
from build_audit.renderers.base import OutputFormat, RenderContext, Renderer

__all__ = [
    # Version
    "__version__",
    # Core
    "load_build",
    "InspectionEngine",
    "LicenseDatabase",
    "is_valid_license",
    "match",
    "ResultSink",
    # Models - Package
    "Build",
    "BuildPackage",
    "PackageFile",
    "PackageHeader",
    "PeerSet",
    # Models - Results
    "Finding",
    "Inspection",
    "Remedy",
    "RunReport",
    "Severity",
    "Verdict",
    "WaiverAuthority",
    # Settings
    "Settings",
    "load_settings",
    # Renderers
    "OutputFormat",
    "RenderContext",
    "Renderer",
]
