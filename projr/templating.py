"""
templating.py

Responsibility: render the packaged Jinja2 templates (currently the project
README) into the working directory.

Rules:
- Templates live in `projr/templates/` and are read as package resources.
- Rendering uses `StrictUndefined`, so a missing context key is an error rather
  than an empty string.
- Output is UTF-8 with `\\n` newlines and always overwrites the destination.

This module intentionally does NOT know about git or the runner.
"""

from __future__ import annotations

from importlib import resources
from pathlib import Path
from typing import Any

from jinja2 import Environment, StrictUndefined, TemplateError as JinjaTemplateError


class TemplateError(RuntimeError):
    pass


def _environment() -> Environment:
    return Environment(
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def load_template_text(name: str) -> str:
    try:
        return resources.files("projr").joinpath("templates", name).read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise TemplateError(f"Template not found: {name}") from e


def render_template(name: str, context: dict[str, Any]) -> str:
    text = load_template_text(name)
    try:
        return _environment().from_string(text).render(**context)
    except JinjaTemplateError as e:
        raise TemplateError(f"Failed rendering template file: {name}") from e


def write_template(name: str, destination: str | Path, context: dict[str, Any]) -> Path:
    """Render template `name` with `context` and write it to `destination`."""
    out = render_template(name, context)
    dst = Path(destination)
    dst.parent.mkdir(parents=True, exist_ok=True)
    dst.write_text(out, encoding="utf-8", newline="\n")
    return dst
