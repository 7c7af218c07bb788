"""Utility functions for build-audit."""

from build_audit.utils.hashing import hash_file
from build_audit.utils.logging import configure_logging, get_logger, get_logger_with_context
from build_audit.utils.errors import (
    BuildAuditError,
    ConfigurationError,
    DiffError,
    DigestError,
    IntrospectionError,
    LicenseDatabaseError,
    ManifestError,
    WhitelistError,
)
from build_audit.utils.config import (
    KernelSettings,
    Settings,
    get_config_paths,
    get_settings,
    load_settings,
    save_settings,
    set_settings,
)
from build_audit.utils.text import has_bad_word, is_text_file, split_words

__all__ = [
    # Hashing
    "hash_file",
    # Logging
    "configure_logging",
    "get_logger",
    "get_logger_with_context",
    # Errors
    "BuildAuditError",
    "ConfigurationError",
    "DiffError",
    "DigestError",
    "IntrospectionError",
    "LicenseDatabaseError",
    "ManifestError",
    "WhitelistError",
    # Config
    "KernelSettings",
    "Settings",
    "get_config_paths",
    "load_settings",
    "get_settings",
    "set_settings",
    "save_settings",
    # Text
    "has_bad_word",
    "is_text_file",
    "split_words",
]
