"""Stat and capabilities whitelist data models."""

from pydantic import BaseModel, Field


class StatWhitelistEntry(BaseModel):
    """Expected mode and ownership of one path."""

    model_config = {"frozen": True}

    mode: int = Field(description="Expected st_mode")
    owner: str = Field(description="Expected owning user")
    group: str = Field(description="Expected owning group")
    filename: str = Field(description="Local path the entry applies to")


class CapsFileEntry(BaseModel):
    """Expected file capabilities of one path."""

    model_config = {"frozen": True}

    path: str = Field(description="Local path")
    caps: str = Field(default="", description="Capability string, e.g. cap_net_raw+ep")


class CapsWhitelistEntry(BaseModel):
    """Capability baseline for all files of one package."""

    model_config = {"frozen": True}

    package: str = Field(description="Package name")
    files: list[CapsFileEntry] = Field(default_factory=list)

    def caps_for(self, path: str) -> str | None:
        """Whitelisted capabilities of a path, if listed."""
        for entry in self.files:
            if entry.path == path:
                return entry.caps
        return None
