"""Error handling utilities for build-audit."""

from __future__ import annotations

from typing import Any

from build_audit.models.common import AuditError


class BuildAuditError(Exception):
    """Base exception for build-audit."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: dict[str, Any] | None = None,
        path: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.path = path

    def to_audit_error(self) -> AuditError:
        """Convert to AuditError model."""
        return AuditError(
            code=self.code,
            message=self.message,
            path=self.path,
            details=self.details,
        )


class ConfigurationError(BuildAuditError):
    """Configuration error."""

    def __init__(self, message: str, config_key: str | None = None):
        details = {"config_key": config_key} if config_key else {}
        super().__init__(message, code="CONFIG_ERROR", details=details)


class LicenseDatabaseError(BuildAuditError):
    """The license database is missing or unreadable."""

    def __init__(self, message: str, licensedb: str | None = None):
        details = {"licensedb": licensedb} if licensedb else {}
        super().__init__(message, code="LICENSEDB_ERROR", details=details)


class IntrospectionError(BuildAuditError):
    """Reading a kernel module's info failed."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message, code="INTROSPECTION_ERROR", path=path)


class DigestError(BuildAuditError):
    """Computing the content digest of a file failed."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message, code="DIGEST_ERROR", path=path)


class ManifestError(BuildAuditError):
    """A build manifest is invalid."""

    def __init__(self, message: str, manifest: str | None = None):
        details = {"manifest": manifest} if manifest else {}
        super().__init__(message, code="MANIFEST_ERROR", details=details)


class WhitelistError(BuildAuditError):
    """A configured whitelist file is missing."""

    def __init__(self, message: str, whitelist: str | None = None):
        details = {"whitelist": whitelist} if whitelist else {}
        super().__init__(message, code="WHITELIST_ERROR", details=details)


class DiffError(BuildAuditError):
    """Producing a text diff between two files failed."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message, code="DIFF_ERROR", path=path)
