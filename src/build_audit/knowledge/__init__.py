"""Curated guidance for build-audit findings."""

from build_audit.knowledge.remedies import get_remedy_text

__all__ = [
    "get_remedy_text",
]
