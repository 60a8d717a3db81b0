"""Jinja2 backed renderer for cni config templates.

Templates reference the pod CIDR as ``{{ PodCIDR }}``.  Rendering is strict:
referencing any other field fails instead of silently producing an empty
value, which would otherwise yield a syntactically valid but broken conflist.
"""

from __future__ import annotations

from pathlib import Path
from typing import IO

from jinja2 import Environment, StrictUndefined, Template, TemplateError

from .config import RenderContext
from .errors import RenderError, TemplateParseError


class ConfTemplate:
    """A parsed cni config template."""

    def __init__(self, name: str, template: Template) -> None:
        self.name = name
        self._template = template

    def execute(self, writer: IO[str], context: RenderContext) -> None:
        """Render into ``writer``, raising :class:`RenderError` on failure."""

        try:
            self._template.stream(context.as_template_vars()).dump(writer)
        except Exception as exc:
            raise RenderError(self.name, exc) from exc

    def render_string(self, context: RenderContext) -> str:
        try:
            return self._template.render(context.as_template_vars())
        except Exception as exc:
            raise RenderError(self.name, exc) from exc


class TemplateRenderer:
    """Parse cni config templates from disk."""

    def __init__(self) -> None:
        self._env = Environment(
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
        )

    def parse(self, path) -> ConfTemplate:
        name = str(path)
        try:
            source = Path(path).read_text()
            template = self._env.from_string(source)
        except (OSError, UnicodeDecodeError, TemplateError) as exc:
            raise TemplateParseError(name, exc) from exc
        return ConfTemplate(name, template)
