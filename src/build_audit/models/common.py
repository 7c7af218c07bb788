"""Common model types shared across modules."""

from typing import Any

from pydantic import BaseModel, Field


class AuditError(BaseModel):
    """An error raised by a collaborator while inspecting a build."""

    model_config = {"frozen": True}

    code: str = Field(description="Error code for programmatic handling")
    message: str = Field(description="Human-readable error message")
    path: str | None = Field(
        default=None,
        description="Local path of the file being inspected, if any",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional error context",
    )

    def __str__(self) -> str:
        if self.path:
            return f"[{self.code}] {self.path}: {self.message}"
        return f"[{self.code}] {self.message}"
