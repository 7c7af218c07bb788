"""Result vocabulary: severities, waiver authorities, findings and reports."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from build_audit.models.common import AuditError


class Severity(str, Enum):
    """Classification of a finding, also used as the pass/fail threshold.

    The order is explicit (see ``_SEVERITY_RANK``) rather than derived from
    declaration order or the string values.
    """

    OK = "OK"
    INFO = "INFO"
    VERIFY = "VERIFY"
    BAD = "BAD"
    FATAL = "FATAL"

    @property
    def rank(self) -> int:
        """Position of this severity in the total order."""
        return _SEVERITY_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank

    @classmethod
    def parse(cls, value: "str | Severity") -> "Severity":
        """Parse a severity name case-insensitively.

        Raises:
            ValueError: If the name is not a known severity
        """
        if isinstance(value, Severity):
            return value
        try:
            return cls(value.strip().upper())
        except ValueError:
            names = ", ".join(s.value for s in cls)
            raise ValueError(f"Invalid severity '{value}' (expected one of: {names})")


_SEVERITY_RANK = {
    Severity.OK: 0,
    Severity.INFO: 1,
    Severity.VERIFY: 2,
    Severity.BAD: 3,
    Severity.FATAL: 4,
}


class WaiverAuthority(str, Enum):
    """Who may override a failing finding in downstream tooling."""

    NOT_WAIVABLE = "not-waivable"
    WAIVABLE_BY_ANYONE = "anyone"
    WAIVABLE_BY_SECURITY = "security"


class Inspection(str, Enum):
    """Inspection tags findings are reported under."""

    LICENSE = "license"
    METADATA = "metadata"
    KMOD = "kmod"
    UPSTREAM = "upstream"


class Remedy(str, Enum):
    """Keys pointing at human-readable guidance for a finding category."""

    LICENSE = "license"
    LICENSEDB = "licensedb"
    VENDOR = "vendor"
    BUILDHOST = "buildhost"
    BADWORDS = "badwords"
    KMOD_PARM = "kmod-parm"
    KMOD_DEPS = "kmod-deps"
    KMOD_ALIAS = "kmod-alias"
    UPSTREAM = "upstream"


class Verdict(BaseModel):
    """A severity paired with the authority allowed to waive it."""

    model_config = {"frozen": True}

    severity: Severity = Field(description="Finding severity")
    waiver: WaiverAuthority = Field(
        default=WaiverAuthority.NOT_WAIVABLE,
        description="Waiver authority",
    )

    def __str__(self) -> str:
        return f"{self.severity.value}/{self.waiver.value}"

    @classmethod
    def ok(cls) -> "Verdict":
        """Passing result, not waivable."""
        return cls(severity=Severity.OK)

    @classmethod
    def info(cls) -> "Verdict":
        """Informational result, not waivable."""
        return cls(severity=Severity.INFO)

    @classmethod
    def verify(cls) -> "Verdict":
        """Result needing human verification, waivable by anyone."""
        return cls(severity=Severity.VERIFY, waiver=WaiverAuthority.WAIVABLE_BY_ANYONE)

    @classmethod
    def bad(cls) -> "Verdict":
        """Policy violation, not waivable."""
        return cls(severity=Severity.BAD)


class Finding(BaseModel):
    """A single inspection result."""

    model_config = {"frozen": True}

    inspection: Inspection = Field(description="Inspection that produced this finding")
    verdict: Verdict = Field(description="Severity and waiver authority")
    message: str | None = Field(default=None, description="Headline message")
    details: str | None = Field(default=None, description="Optional detail blob")
    remedy: Remedy | None = Field(default=None, description="Remedy key")

    @property
    def severity(self) -> Severity:
        """Severity of the finding."""
        return self.verdict.severity

    @property
    def waiver(self) -> WaiverAuthority:
        """Waiver authority of the finding."""
        return self.verdict.waiver


class InspectionOutcome(BaseModel):
    """Pass/fail status of one inspection within a run."""

    model_config = {"frozen": True}

    inspection: Inspection = Field(description="Inspection tag")
    passed: bool = Field(description="Whether the inspection passed")
    errors: list[AuditError] = Field(
        default_factory=list,
        description="Collaborator failures hit while inspecting",
    )


class RunReport(BaseModel):
    """Complete result of inspecting a before/after build pair."""

    model_config = {"frozen": True}

    before: str | None = Field(default=None, description="Label of the before build")
    after: str = Field(description="Label of the after build")
    generated_at: datetime = Field(
        default_factory=datetime.now,
        description="Report generation timestamp",
    )
    threshold: Severity = Field(default=Severity.VERIFY, description="Failure threshold")
    worst_result: Severity = Field(default=Severity.OK, description="Worst recorded severity")
    passed: bool = Field(description="Conjunction of all inspection outcomes")
    outcomes: list[InspectionOutcome] = Field(default_factory=list)
    findings: list[Finding] = Field(default_factory=list)

    def findings_for(self, inspection: Inspection) -> list[Finding]:
        """Filter findings by inspection."""
        return [f for f in self.findings if f.inspection == inspection]

    def findings_at_least(self, severity: Severity) -> list[Finding]:
        """Findings at or above a severity."""
        return [f for f in self.findings if f.severity >= severity]

    def outcome_for(self, inspection: Inspection) -> InspectionOutcome | None:
        """Get the outcome of an inspection, if it ran."""
        for outcome in self.outcomes:
            if outcome.inspection == inspection:
                return outcome
        return None
