"""
directories.py

Responsibility: the project directory layout and its lifecycle.

- `DirectorySpec` maps a logical role to a path, or to `None` to skip it.
- `create_directories` creates missing directories and never deletes anything.
- `prepare_directory` clears (delete + recreate) or creates-if-missing a single
  directory ahead of a run.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

_log = logging.getLogger("projr.directories")


class DirectoryRole(str, Enum):
    RAW_DATA = "raw_data"
    CACHE = "cache"
    DOCS = "docs"
    OUTPUT = "output"
    REFERENCE = "reference"


DEFAULT_PATHS: dict[DirectoryRole, str] = {
    DirectoryRole.RAW_DATA: "_raw_data",
    DirectoryRole.CACHE: "_tmp",
    DirectoryRole.DOCS: "docs",
    DirectoryRole.OUTPUT: "_output",
    DirectoryRole.REFERENCE: "_reference",
}

DESCRIPTIONS: dict[DirectoryRole, str] = {
    DirectoryRole.REFERENCE: (
        "Static documents that are not generated by analyses, such as assignment questions and reference materials."
    ),
    DirectoryRole.RAW_DATA: "Raw, unprocessed data files.",
    DirectoryRole.DOCS: "Rendered documents produced from Jupyter (`ipynb`) or Quarto (`qmd`) scripts.",
    DirectoryRole.OUTPUT: "Final analysis results, processed data, and exported reports.",
    DirectoryRole.CACHE: "Temporary storage for cached outputs, intermediate results, and shared files.",
}


@dataclass(frozen=True)
class DirectorySpec:
    role: DirectoryRole
    path: str | None

    @property
    def absent(self) -> bool:
        return self.path is None

    @property
    def description(self) -> str:
        return DESCRIPTIONS[self.role]


def default_specs() -> list[DirectorySpec]:
    return [DirectorySpec(role, path) for role, path in DEFAULT_PATHS.items()]


def create_directories(specs: Iterable[DirectorySpec]) -> list[Path]:
    """Create every non-absent directory that does not exist yet; return the ones created."""
    created: list[Path] = []
    for spec in specs:
        if spec.path is None:
            continue
        path = Path(spec.path)
        if path.is_dir():
            continue
        path.mkdir(parents=True, exist_ok=True)
        _log.info("Created directory: %s", spec.path)
        created.append(path)
    return created


def prepare_directory(path: Path, *, clear: bool, create_if_missing: bool = True) -> None:
    """
    Clear `path` (delete recursively, recreate empty) when `clear` is set.

    Otherwise leave any existing contents alone and only create the directory
    when it is missing and `create_if_missing` is set.
    """
    if not clear:
        if create_if_missing and not path.is_dir():
            path.mkdir(parents=True, exist_ok=True)
        return
    if path.exists():
        _log.info("Clearing directory: %s", path)
        shutil.rmtree(path)
    path.mkdir(parents=True, exist_ok=True)
