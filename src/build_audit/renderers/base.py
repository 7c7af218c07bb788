"""Base renderer protocol and types."""

from enum import Enum
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field


class OutputFormat(str, Enum):
    """Supported output formats."""

    JSON = "json"
    TERMINAL = "terminal"


class RenderContext(BaseModel):
    """Context for rendering operations."""

    model_config = {"frozen": True}

    format: OutputFormat = Field(default=OutputFormat.TERMINAL, description="Output format")
    output_path: Path | None = Field(default=None, description="Output file path")
    verbose: bool = Field(default=False, description="Show finding details and passing inspections")


@runtime_checkable
class Renderer(Protocol):
    """Protocol for report renderers."""

    @property
    def format(self) -> OutputFormat:
        """The output format this renderer produces."""
        ...

    def render(self, data: Any, context: RenderContext) -> str:
        """Render data to a string."""
        ...

    def render_to_file(self, data: Any, context: RenderContext) -> None:
        """Render data directly to a file.

        Raises:
            ValueError: If context.output_path is not set
        """
        ...


class BaseRenderer:
    """Base implementation providing render_to_file."""

    def render_to_file(self, data: Any, context: RenderContext) -> None:
        if context.output_path is None:
            raise ValueError("output_path must be set in context for file rendering")

        content = self.render(data, context)
        context.output_path.write_text(content, encoding="utf-8")

    def render(self, data: Any, context: RenderContext) -> str:
        """Render data to a string. Must be implemented by subclasses."""
        raise NotImplementedError
