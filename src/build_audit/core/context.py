"""Per-run state shared by the inspections."""

from __future__ import annotations

from build_audit.core.license import LicenseDatabase
from build_audit.core.whitelist import load_caps_whitelist, load_stat_whitelist
from build_audit.extractors.base import ContentDigester, LineDiffer, ModuleIntrospector
from build_audit.extractors.content import HashDigester, UnifiedDiffer
from build_audit.extractors.modinfo import ModinfoIntrospector
from build_audit.models.package import PackageHeader
from build_audit.models.whitelist import CapsWhitelistEntry, StatWhitelistEntry
from build_audit.utils.config import Settings
from build_audit.utils.logging import get_logger

logger = get_logger("context")


class LicenseDatabaseCache:
    """Loads the license database on first use and keeps it for the run."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._db: LicenseDatabase | None = None

    @property
    def loaded(self) -> bool:
        return self._db is not None

    def ensure_loaded(self) -> LicenseDatabase:
        """Get the database, loading it if needed.

        Raises:
            LicenseDatabaseError: If the database cannot be loaded
        """
        if self._db is None:
            self._db = LicenseDatabase.load(self._settings.licensedb_path)
        return self._db

    def release(self) -> None:
        self._db = None


class SourceFileCache:
    """Declared source archive names, taken from the first source header seen.

    The cache stays empty until a header that declares sources is offered,
    so a header without Source tags does not pin an empty list.
    """

    def __init__(self) -> None:
        self._sources: frozenset[str] | None = None

    @property
    def loaded(self) -> bool:
        return self._sources is not None

    def ensure_loaded(self, header: PackageHeader) -> frozenset[str]:
        if self._sources is None and header.sources:
            self._sources = frozenset(header.sources)
            logger.debug(f"Declared sources: {sorted(self._sources)}")
        return self._sources or frozenset()

    def release(self) -> None:
        self._sources = None


class WhitelistCache:
    """Stat and capabilities whitelists for the configured product release."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._stat: list[StatWhitelistEntry] | None = None
        self._caps: list[CapsWhitelistEntry] | None = None

    def stat_whitelist(self) -> list[StatWhitelistEntry]:
        """Stat whitelist entries; empty when no product release is set.

        Raises:
            WhitelistError: If the configured whitelist file is missing
        """
        if self._stat is None:
            path = self._settings.stat_whitelist_path
            self._stat = load_stat_whitelist(path) if path else []
        return self._stat

    def caps_whitelist(self) -> list[CapsWhitelistEntry]:
        """Capabilities whitelist entries; empty when no product release is set.

        Raises:
            WhitelistError: If the configured whitelist file is missing
        """
        if self._caps is None:
            path = self._settings.caps_whitelist_path
            self._caps = load_caps_whitelist(path) if path else []
        return self._caps

    def release(self) -> None:
        self._stat = None
        self._caps = None


class InspectionContext:
    """Settings, caches and collaborators for one inspection run.

    Use as a context manager so the caches are released when the run ends.

    Example:
        with InspectionContext(settings) as context:
            db = context.licenses.ensure_loaded()
    """

    def __init__(
        self,
        settings: Settings,
        introspector: ModuleIntrospector | None = None,
        digester: ContentDigester | None = None,
        differ: LineDiffer | None = None,
    ) -> None:
        self.settings = settings
        self.introspector = introspector or ModinfoIntrospector()
        self.digester = digester or HashDigester()
        self.differ = differ or UnifiedDiffer()

        self.licenses = LicenseDatabaseCache(settings)
        self.sources = SourceFileCache()
        self.whitelists = WhitelistCache(settings)

    def release(self) -> None:
        """Drop everything loaded during the run."""
        self.licenses.release()
        self.sources.release()
        self.whitelists.release()

    def __enter__(self) -> "InspectionContext":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()
