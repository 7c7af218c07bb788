"""Collaborators that read kernel modules and file content."""

from build_audit.extractors.base import (
    ContentDigester,
    LineDiffer,
    ModuleHandle,
    ModuleIntrospector,
)
from build_audit.extractors.content import HashDigester, UnifiedDiffer
from build_audit.extractors.modinfo import ModinfoIntrospector, parse_modinfo

__all__ = [
    "ContentDigester",
    "LineDiffer",
    "ModuleHandle",
    "ModuleIntrospector",
    "HashDigester",
    "UnifiedDiffer",
    "ModinfoIntrospector",
    "parse_modinfo",
]
