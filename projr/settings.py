"""
settings.py

Responsibility: load the optional project settings file (`projr.yml`) into a
typed, validated model.

Settings are defaults only: the CLI applies its own flags on top, and the
Python API ignores the file entirely unless the caller loads it.

Recognised keys:
- directories.{raw_data,cache,docs,output,reference}: str or null (null skips it)
- git.init, git.commit_all: bool
- readme: bool
- github.init, github.private: bool; github.owner: str
- run.scripts: list of str
- run.skip_project_render, run.clear_output_and_docs, run.copy_docs: bool
- run.scripts_dir, run.output_dir, run.docs_dir, run.execution_dir: str
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from projr.directories import DEFAULT_PATHS, DirectoryRole

SETTINGS_FILE = "projr.yml"

_TOP_LEVEL_KEYS = {"directories", "git", "readme", "github", "run"}


class SettingsError(ValueError):
    pass


@dataclass(frozen=True)
class GitSettings:
    init: bool = True
    commit_all: bool = True


@dataclass(frozen=True)
class GitHubSettings:
    """GitHub-related configuration for `projr init`."""

    init: bool = False
    private: bool = True
    owner: str | None = None


@dataclass(frozen=True)
class RunSettings:
    """Defaults for `projr run`."""

    scripts: list[str] | None = None
    skip_project_render: bool = False
    clear_output_and_docs: bool = False
    copy_docs: bool = True
    scripts_dir: str | None = None
    output_dir: str | None = None
    docs_dir: str | None = None
    execution_dir: str | None = None


@dataclass(frozen=True)
class Settings:
    directories: dict[DirectoryRole, str | None] = field(default_factory=lambda: dict(DEFAULT_PATHS))
    git: GitSettings = field(default_factory=GitSettings)
    readme: bool = True
    github: GitHubSettings = field(default_factory=GitHubSettings)
    run: RunSettings = field(default_factory=RunSettings)


def _mapping(data: dict[str, Any], key: str) -> dict[str, Any]:
    raw = data.get(key)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise SettingsError(f"`{key}` must be an object/mapping when provided.")
    return raw


def _bool(section: dict[str, Any], key: str, default: bool, where: str) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise SettingsError(f"`{where}.{key}` must be true or false.")
    return value


def _optional_str(section: dict[str, Any], key: str, where: str) -> str | None:
    value = section.get(key)
    if value is None:
        return None
    if not isinstance(value, (str, int, float)) or isinstance(value, bool):
        raise SettingsError(f"`{where}.{key}` must be a string or null.")
    return str(value).strip() or None


def parse_settings(data: dict[str, Any]) -> Settings:
    unknown = set(data) - _TOP_LEVEL_KEYS
    if unknown:
        raise SettingsError(f"Unknown settings key(s): {', '.join(sorted(unknown))}")

    dirs_raw = _mapping(data, "directories")
    unknown_roles = set(dirs_raw) - {role.value for role in DirectoryRole}
    if unknown_roles:
        raise SettingsError(f"Unknown directory role(s): {', '.join(sorted(unknown_roles))}")
    directories = dict(DEFAULT_PATHS)
    for role in DirectoryRole:
        if role.value in dirs_raw:
            directories[role] = _optional_str(dirs_raw, role.value, "directories")

    git_raw = _mapping(data, "git")
    gh_raw = _mapping(data, "github")
    run_raw = _mapping(data, "run")

    readme = data.get("readme", True)
    if not isinstance(readme, bool):
        raise SettingsError("`readme` must be true or false.")

    scripts = run_raw.get("scripts")
    if scripts is not None:
        if isinstance(scripts, str):
            scripts = [scripts]
        if not isinstance(scripts, list):
            raise SettingsError("`run.scripts` must be a list of file names.")
        scripts = [str(s) for s in scripts]

    return Settings(
        directories=directories,
        git=GitSettings(
            init=_bool(git_raw, "init", True, "git"),
            commit_all=_bool(git_raw, "commit_all", True, "git"),
        ),
        readme=readme,
        github=GitHubSettings(
            init=_bool(gh_raw, "init", False, "github"),
            private=_bool(gh_raw, "private", True, "github"),
            owner=_optional_str(gh_raw, "owner", "github"),
        ),
        run=RunSettings(
            scripts=scripts,
            skip_project_render=_bool(run_raw, "skip_project_render", False, "run"),
            clear_output_and_docs=_bool(run_raw, "clear_output_and_docs", False, "run"),
            copy_docs=_bool(run_raw, "copy_docs", True, "run"),
            scripts_dir=_optional_str(run_raw, "scripts_dir", "run"),
            output_dir=_optional_str(run_raw, "output_dir", "run"),
            docs_dir=_optional_str(run_raw, "docs_dir", "run"),
            execution_dir=_optional_str(run_raw, "execution_dir", "run"),
        ),
    )


def load_settings(path: str | Path | None = None) -> Settings:
    """
    Load settings from `path` (default: `projr.yml` in the working directory).

    A missing default file yields the built-in defaults; a missing explicit
    file is an error.
    """
    explicit = path is not None
    settings_path = Path(path) if path is not None else Path.cwd() / SETTINGS_FILE
    if not settings_path.exists():
        if explicit:
            raise SettingsError(f"Settings file does not exist: {settings_path}")
        return Settings()

    try:
        data = yaml.safe_load(settings_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise SettingsError(f"Could not parse {settings_path}: {e}") from e
    if not isinstance(data, dict):
        raise SettingsError("Settings must be a mapping/object at the top level.")
    return parse_settings(data)
