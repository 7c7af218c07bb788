"""Core inspection logic for build-audit."""

from build_audit.core.build import load_build
from build_audit.core.context import InspectionContext
from build_audit.core.engine import INSPECTIONS, InspectionEngine, list_inspections
from build_audit.core.kmod import KernelModuleDiffer, compare_module_aliases, diff_sets
from build_audit.core.license import LicenseDatabase, LicenseInspection, is_valid_license
from build_audit.core.metadata import MetadataDiffer
from build_audit.core.peers import match
from build_audit.core.results import ResultSink
from build_audit.core.upstream import UpstreamSourceDiffer, strip_diff_header
from build_audit.core.whitelist import load_caps_whitelist, load_stat_whitelist, parse_mode

__all__ = [
    "load_build",
    "InspectionContext",
    "INSPECTIONS",
    "InspectionEngine",
    "list_inspections",
    "KernelModuleDiffer",
    "compare_module_aliases",
    "diff_sets",
    "LicenseDatabase",
    "LicenseInspection",
    "is_valid_license",
    "MetadataDiffer",
    "match",
    "ResultSink",
    "UpstreamSourceDiffer",
    "strip_diff_header",
    "load_caps_whitelist",
    "load_stat_whitelist",
    "parse_mode",
]
