"""Data models for build-audit.

All models are Pydantic BaseModel with frozen=True for immutability.
"""

from build_audit.models.common import AuditError
from build_audit.models.kmod import ModuleInfo, SetDiff
from build_audit.models.license import LicenseDatabaseEntry
from build_audit.models.package import (
    Build,
    BuildPackage,
    BuildSide,
    FileEntry,
    HeaderTag,
    PackageEntry,
    PackageFile,
    PackageHeader,
    PeerSet,
)
from build_audit.models.results import (
    Finding,
    Inspection,
    InspectionOutcome,
    Remedy,
    RunReport,
    Severity,
    Verdict,
    WaiverAuthority,
)
from build_audit.models.whitelist import CapsFileEntry, CapsWhitelistEntry, StatWhitelistEntry

__all__ = [
    # Common
    "AuditError",
    # Kernel modules
    "ModuleInfo",
    "SetDiff",
    # License
    "LicenseDatabaseEntry",
    # Package
    "Build",
    "BuildPackage",
    "BuildSide",
    "FileEntry",
    "HeaderTag",
    "PackageEntry",
    "PackageFile",
    "PackageHeader",
    "PeerSet",
    # Results
    "Finding",
    "Inspection",
    "InspectionOutcome",
    "Remedy",
    "RunReport",
    "Severity",
    "Verdict",
    "WaiverAuthority",
    # Whitelists
    "CapsFileEntry",
    "CapsWhitelistEntry",
    "StatWhitelistEntry",
]
