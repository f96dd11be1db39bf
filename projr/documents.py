"""
documents.py

Responsibility: render notebook documents to static files.

Two single-document renderers and one project renderer share the
`DocumentRenderer` / `ProjectRenderer` protocols so the runner can be tested
with fakes:

- `NotebookRenderer` executes a Jupyter notebook with nbclient and exports it to
  `<name>.html` beside the notebook with nbconvert. The Jupyter packages are
  imported on first use, after `deps` has had a chance to install them.
- `QuartoRenderer` shells out to `quarto render`, for single files and for the
  whole project.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

_log = logging.getLogger("projr.documents")

OUTPUT_FORMATS = ("html", "pdf", "docx")


class RenderError(RuntimeError):
    pass


class DocumentRenderer(Protocol):
    def render(self, path: Path, *, execution_dir: Path | None = None) -> list[Path]: ...


class ProjectRenderer(Protocol):
    def render_project(self) -> None: ...


def produced_files(path: Path) -> list[Path]:
    """Output files that sit beside `path` and share its base name."""
    return [
        candidate
        for candidate in (path.parent / f"{path.stem}.{ext}" for ext in OUTPUT_FORMATS)
        if candidate.is_file()
    ]


class NotebookRenderer:
    def __init__(self, *, timeout: int | None = None, kernel_name: str = "python3") -> None:
        self.timeout = timeout
        self.kernel_name = kernel_name

    def render(self, path: Path, *, execution_dir: Path | None = None) -> list[Path]:
        import nbformat
        from nbclient import NotebookClient
        from nbconvert import HTMLExporter

        nb = nbformat.read(path, as_version=4)
        client = NotebookClient(
            nb,
            timeout=self.timeout,
            kernel_name=self.kernel_name,
            resources={"metadata": {"path": str(execution_dir or path.parent)}},
        )
        client.execute()

        body, _resources = HTMLExporter().from_notebook_node(nb)
        out = path.with_suffix(".html")
        out.write_text(body, encoding="utf-8")
        return [out]


@dataclass
class QuartoRenderer:
    executable: str = "quarto"
    extra_args: list[str] = field(default_factory=list)

    def render(self, path: Path, *, execution_dir: Path | None = None) -> list[Path]:
        cmd = [self.executable, "render", str(path), *self.extra_args]
        if execution_dir is not None:
            cmd.extend(["--execute-dir", str(execution_dir)])
        self._run(cmd, cwd=path.parent)
        return produced_files(path)

    def render_project(self) -> None:
        self._run([self.executable, "render", *self.extra_args], cwd=Path.cwd())

    def _run(self, cmd: list[str], *, cwd: Path) -> None:
        _log.debug("%s", " ".join(cmd))
        try:
            subprocess.run(cmd, cwd=str(cwd), check=True, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True)
        except subprocess.CalledProcessError as e:
            raise RenderError(f"Command failed: {' '.join(cmd)}\n\n{e.stdout}") from e


@dataclass
class Renderers:
    notebook: DocumentRenderer = field(default_factory=NotebookRenderer)
    quarto: DocumentRenderer = field(default_factory=QuartoRenderer)
    project: ProjectRenderer = field(default_factory=QuartoRenderer)
