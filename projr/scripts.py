"""
scripts.py

Responsibility: decide which files a run executes, and as what.

- `ScriptKind` is the closed set of things the runner knows how to execute.
  `classify` maps a path onto exactly one kind or raises.
- `discover_scripts` resolves either an explicit list of names or a directory
  listing into `ScriptReference`s, then drops Quarto documents when the working
  directory is a Quarto project (the project render covers them).
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

_log = logging.getLogger("projr.scripts")

PROJECT_CONFIG = "_quarto.yml"


class ScriptError(ValueError):
    pass


class UnknownScriptTypeError(ScriptError):
    pass


class MissingScriptError(ScriptError):
    def __init__(self, missing: Sequence[Path]) -> None:
        self.missing = list(missing)
        super().__init__("The following script(s) do not exist: " + ", ".join(str(p) for p in self.missing))


class NothingToRunError(ScriptError):
    pass


class ProjectDetectedWarning(UserWarning):
    pass


class ScriptKind(str, Enum):
    SCRIPT = "script"
    NOTEBOOK = "notebook"
    QUARTO = "quarto"

    @property
    def document(self) -> bool:
        return self is not ScriptKind.SCRIPT


def classify(path: str | Path) -> ScriptKind:
    """Return the kind of `path`. `.py` is matched case-sensitively, documents are not."""
    suffix = Path(path).suffix
    if suffix == ".py":
        return ScriptKind.SCRIPT
    if suffix.lower() == ".ipynb":
        return ScriptKind.NOTEBOOK
    if suffix.lower() == ".qmd":
        return ScriptKind.QUARTO
    raise UnknownScriptTypeError(f"Unknown script type for file: {path}")


@dataclass(frozen=True)
class ScriptReference:
    path: Path
    kind: ScriptKind

    @classmethod
    def from_path(cls, path: Path) -> ScriptReference:
        return cls(path=path, kind=classify(path))

    @property
    def base_name(self) -> str:
        """File name without its script extension."""
        return self.path.stem


def project_detected(root: Path | None = None) -> bool:
    return ((root or Path.cwd()) / PROJECT_CONFIG).is_file()


def _listed(scripts_dir: Path, project: bool) -> list[Path]:
    found: list[Path] = []
    if not scripts_dir.is_dir():
        _log.debug("Scripts directory %s does not exist", scripts_dir)
        return found
    for path in sorted(scripts_dir.iterdir()):
        if not path.is_file():
            continue
        try:
            kind = classify(path)
        except UnknownScriptTypeError:
            continue
        if kind is ScriptKind.QUARTO and project:
            continue
        found.append(path)
    return found


def _named(scripts_dir: Path, names: Sequence[str]) -> list[Path]:
    names = [name for name in names if name != ""]
    if not names:
        raise ScriptError("At least one non-empty script name is required.")
    paths = [scripts_dir / name for name in names]
    missing = [p for p in paths if not p.is_file()]
    if missing:
        raise MissingScriptError(missing)
    return paths


def discover_scripts(
    scripts: Sequence[str] | None = None,
    scripts_dir: str | Path | None = None,
    *,
    root: Path | None = None,
) -> list[ScriptReference]:
    """
    Resolve the scripts a run executes, in order.

    With `scripts=None`, `scripts_dir` (default: the working directory) is
    listed non-recursively in name order. Otherwise every name is resolved
    against `scripts_dir` and must exist.
    """
    root = (root or Path.cwd()).resolve()
    directory = (root / scripts_dir).resolve() if scripts_dir is not None else root
    project = project_detected(root)

    paths = _listed(directory, project) if scripts is None else _named(directory, scripts)
    refs = [ScriptReference.from_path(p) for p in paths]

    if not refs and not project:
        raise NothingToRunError("Nothing to run: no scripts specified/found and/or no quarto project found")

    skipped = [ref for ref in refs if ref.kind is ScriptKind.QUARTO] if project else []
    if skipped:
        warnings.warn(
            f"Quarto project detected ({PROJECT_CONFIG} exists), so .qmd scripts are not run individually: "
            + ", ".join(ref.path.name for ref in skipped),
            ProjectDetectedWarning,
            stacklevel=2,
        )
        refs = [ref for ref in refs if ref.kind is not ScriptKind.QUARTO]

    for ref in refs:
        _log.debug("Queued %s (%s)", ref.path, ref.kind.value)
    return refs
