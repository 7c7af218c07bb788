"""License database data models."""

from pydantic import BaseModel, Field


class LicenseDatabaseEntry(BaseModel):
    """One license known to the approved-license database."""

    model_config = {"frozen": True}

    name: str = Field(description="Canonical license name")
    fedora_abbrev: str | None = Field(default=None, description="First short form")
    spdx_abbrev: str | None = Field(default=None, description="Second short form (SPDX identifier)")
    approved: bool = Field(default=False, description="Whether the license is approved")

    @property
    def abbreviations(self) -> tuple[str, ...]:
        """Non-empty short forms of this license."""
        return tuple(a for a in (self.fedora_abbrev, self.spdx_abbrev) if a)
