"""
runner.py

Responsibility: run a project's analysis scripts and documents.

High-level flow (`run_project`):
1) Resolve the scripts to run (`scripts.discover_scripts`)
2) Install the rendering toolchains they need (`deps`)
3) Clear or create the output and docs directories
4) For each script, in order: execute it, then move its rendered docs into the
   docs directory (`artifacts`)
5) Render the whole Quarto project when `_quarto.yml` exists

Execution is sequential and in-process. A failing script is not caught: the
error propagates and the rest of the run is abandoned.
"""

from __future__ import annotations

import logging
import os
import runpy
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

from projr.artifacts import collect_artifacts
from projr.deps import DependencyInstaller, install_dependencies
from projr.directories import DEFAULT_PATHS, DirectoryRole, prepare_directory
from projr.documents import Renderers
from projr.scripts import PROJECT_CONFIG, ScriptKind, ScriptReference, discover_scripts, project_detected

_log = logging.getLogger("projr.runner")


class ConfigurationError(ValueError):
    pass


@contextmanager
def working_directory(path: str | Path | None) -> Iterator[Path]:
    """Change into `path` for the duration of the block, always restoring the previous directory."""
    previous = os.getcwd()
    if path is not None:
        os.chdir(path)
    try:
        yield Path.cwd()
    finally:
        os.chdir(previous)


def execute_script(ref: ScriptReference, renderers: Renderers, execution_dir: Path | None = None) -> None:
    _log.info("Running script: %s", ref.path)
    if ref.kind is ScriptKind.SCRIPT:
        with working_directory(execution_dir):
            runpy.run_path(str(ref.path), run_name="__main__")
    elif ref.kind is ScriptKind.NOTEBOOK:
        renderers.notebook.render(ref.path, execution_dir=execution_dir)
    else:
        renderers.quarto.render(ref.path, execution_dir=execution_dir)


def render_project(renderers: Renderers, skip: bool, *, root: Path | None = None) -> bool:
    if not project_detected(root):
        return False
    if skip:
        _log.info("Skipping quarto project rendering.")
        return False
    _log.info("Rendering entire Quarto project (%s).", PROJECT_CONFIG)
    renderers.project.render_project()
    return True


def run_project(
    scripts: Sequence[str] | None = None,
    skip_project_render: bool = False,
    clear_output_and_docs: bool = False,
    copy_docs: bool = True,
    scripts_dir: str | Path | None = None,
    output_dir: str | Path | None = None,
    docs_dir: str | Path | None = None,
    execution_dir: str | Path | None = None,
    *,
    renderers: Renderers | None = None,
    installer: DependencyInstaller | None = None,
) -> bool:
    """
    Run scripts (`.py`), Jupyter notebooks (`.ipynb`) and Quarto documents
    (`.qmd`), optionally clearing the output and docs directories first and
    moving rendered documents into the docs directory.

    `scripts=None` runs everything found in `scripts_dir` (default: the working
    directory). Quarto documents are not run individually inside a Quarto
    project; the project is rendered as a whole at the end instead.
    """
    root = Path.cwd()
    exec_dir: Path | None = None
    if execution_dir is not None:
        exec_dir = (root / execution_dir).resolve()
        if not exec_dir.is_dir():
            raise ConfigurationError(f"Execution directory does not exist: {execution_dir}")
    if isinstance(scripts, str):
        scripts = [scripts]

    renderers = renderers or Renderers()
    installer = installer or DependencyInstaller(root)
    out_dir = (root / (output_dir or DEFAULT_PATHS[DirectoryRole.OUTPUT])).resolve()
    doc_dir = (root / (docs_dir or DEFAULT_PATHS[DirectoryRole.DOCS])).resolve()

    refs = discover_scripts(scripts, scripts_dir, root=root)
    project = project_detected(root)

    install_dependencies((ref.kind for ref in refs), project, installer)

    prepare_directory(out_dir, clear=clear_output_and_docs)
    prepare_directory(doc_dir, clear=clear_output_and_docs, create_if_missing=copy_docs)

    for ref in refs:
        execute_script(ref, renderers, exec_dir)
        if copy_docs and ref.kind.document and not project:
            collect_artifacts(ref, doc_dir)

    render_project(renderers, skip_project_render, root=root)
    return True
