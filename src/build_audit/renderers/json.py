"""JSON renderer for build-audit reports."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel

from build_audit.renderers.base import BaseRenderer, OutputFormat, RenderContext


class JSONRenderer(BaseRenderer):
    """Renders a RunReport (or any pydantic model) as JSON.

    Example:
        renderer = JSONRenderer()
        print(renderer.render(report, RenderContext(format=OutputFormat.JSON)))
    """

    @property
    def format(self) -> OutputFormat:
        return OutputFormat.JSON

    def render(self, data: Any, context: RenderContext) -> str:
        """Render data to a JSON string.

        Args:
            data: The data to render (typically a RunReport)
            context: Rendering context with options

        Returns:
            JSON string
        """
        if isinstance(data, BaseModel):
            data = data.model_dump(mode="json")

        return json.dumps(
            data,
            indent=2,
            ensure_ascii=False,
        )
