"""
artifacts.py

Responsibility: move the files a rendered document produced into the docs
directory.

For a document `analysis.qmd`:
- `analysis.html`, `analysis.pdf` and `analysis.docx` beside it are moved into
  the docs directory, replacing files of the same name.
- For Quarto documents, `analysis_files/` is merged into the docs directory
  (paths relative to `analysis_files/` are kept) and then removed. An empty
  `analysis_files/` is just removed.

Moves are not transactional; an interrupted collection can leave the docs
directory partially updated.
"""

from __future__ import annotations

import logging
import shutil
import warnings
from dataclasses import dataclass, field
from pathlib import Path

from projr.documents import OUTPUT_FORMATS
from projr.scripts import ScriptKind, ScriptReference

_log = logging.getLogger("projr.artifacts")

RESOURCE_SUFFIX = "_files"


class NoDocsFoundWarning(UserWarning):
    pass


@dataclass
class ArtifactSet:
    documents: list[Path] = field(default_factory=list)
    resource_dir: Path | None = None
    resources: list[Path] = field(default_factory=list)


def find_artifacts(ref: ScriptReference) -> ArtifactSet:
    source_dir = ref.path.parent
    artifacts = ArtifactSet(
        documents=[
            path
            for path in sorted(source_dir.iterdir())
            if path.is_file() and path.stem == ref.base_name and path.suffix[1:] in OUTPUT_FORMATS
        ]
    )
    if ref.kind is ScriptKind.QUARTO:
        resource_dir = source_dir / f"{ref.base_name}{RESOURCE_SUFFIX}"
        if resource_dir.is_dir():
            artifacts.resource_dir = resource_dir
            artifacts.resources = sorted(p.relative_to(resource_dir) for p in resource_dir.rglob("*") if p.is_file())
    return artifacts


def _move(src: Path, dst: Path) -> None:
    # A document rendered inside the docs directory is already in place.
    if src.resolve() == dst.resolve():
        return
    if dst.exists():
        dst.unlink()
    shutil.move(str(src), str(dst))



def merge_resource_dir(resource_dir: Path, files: list[Path], docs_dir: Path) -> None:
    if not files:
        _log.debug("Removing empty resource directory %s", resource_dir)
        shutil.rmtree(resource_dir)
        return
    for sub_dir in sorted({rel.parent for rel in files}):
        (docs_dir / sub_dir).mkdir(parents=True, exist_ok=True)
    for rel in files:
        _move(resource_dir / rel, docs_dir / rel)
    shutil.rmtree(resource_dir)


def collect_artifacts(ref: ScriptReference, docs_dir: Path) -> ArtifactSet:
    """Move the rendered outputs of `ref` into `docs_dir`."""
    artifacts = find_artifacts(ref)
    docs_dir.mkdir(parents=True, exist_ok=True)

    if not artifacts.documents:
        warnings.warn(f"No docs found for script: {ref.base_name}", NoDocsFoundWarning, stacklevel=2)
    for path in artifacts.documents:
        _move(path, docs_dir / path.name)
        _log.info("Moved %s to %s", path.name, docs_dir)

    if artifacts.resource_dir is not None:
        merge_resource_dir(artifacts.resource_dir, artifacts.resources, docs_dir)
    return artifacts
