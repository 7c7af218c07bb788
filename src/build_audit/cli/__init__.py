"""CLI interface for build-audit."""

from build_audit.cli.main import app

__all__ = ["app"]
