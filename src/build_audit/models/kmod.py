"""Kernel module introspection data models."""

from pydantic import BaseModel, Field


class ModuleInfo(BaseModel):
    """Listings read from a kernel module's modinfo section."""

    model_config = {"frozen": True}

    name: str = Field(description="Kernel module name")
    parameters: list[str] = Field(default_factory=list, description="Parameter names")
    dependencies: list[str] = Field(default_factory=list, description="Modules this one depends on")
    aliases: list[str] = Field(default_factory=list, description="Device and module aliases")


class SetDiff(BaseModel):
    """Lost and gained elements between a before and an after set."""

    model_config = {"frozen": True}

    lost: list[str] = Field(default_factory=list, description="Elements only in the before set")
    gain: list[str] = Field(default_factory=list, description="Elements only in the after set")

    @property
    def unchanged(self) -> bool:
        return not self.lost and not self.gain
