"""Config template rendering."""

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path
from typing import Any

from jinja2 import Environment, StrictUndefined, TemplateError

from labnode.errors import RenderError

logger = logging.getLogger(__name__)


def load_default_template(package: str, name: str) -> str:
    """Read a template shipped as package data."""
    return resources.files(package).joinpath(name).read_text(encoding="utf-8")


class TemplateRenderer:
    """Render config templates to files.

    Undefined template variables are errors rather than empty strings, so a
    template typo fails the deploy instead of booting a broken config.
    """

    def __init__(self, env: Environment | None = None):
        self.env = env or Environment(
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
        )

    def render(self, dst: str | Path, template_text: str, params: dict[str, Any]) -> None:
        """Render template_text with params and write the result to dst."""
        try:
            content = self.env.from_string(template_text).render(**params)
        except TemplateError as e:
            raise RenderError(f"failed to render template ({e})", str(dst)) from e
        self.write(dst, content)

    def write(self, dst: str | Path, text: str) -> None:
        """Write text to dst as-is."""
        try:
            Path(dst).write_text(text, encoding="utf-8")
        except OSError as e:
            raise RenderError(f"failed to write config ({e.strerror or e})", str(dst)) from e
