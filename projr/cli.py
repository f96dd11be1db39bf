"""
cli.py

Responsibility: CLI entrypoint for projr.

Two commands:
- `init`: scaffold directories, git, README and (optionally) a GitHub remote
- `run`: execute the project's scripts and documents

Values are layered: built-in defaults, then `projr.yml` (`settings.py`), then
command-line flags. This module only resolves options and hands off to
`initializer.py` and `runner.py`.
"""

from __future__ import annotations

import argparse
import logging
from typing import Any

from projr import __version__
from projr.directories import DirectoryRole
from projr.github_client import GitHubClient
from projr.initializer import init_project
from projr.runner import run_project
from projr.settings import Settings, load_settings

_log = logging.getLogger("projr.cli")

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def _pick(value: Any, default: Any) -> Any:
    return default if value is None else value


def _settings(args: argparse.Namespace) -> Settings:
    return load_settings(args.settings)


def init_cmd(args: argparse.Namespace) -> int:
    settings = _settings(args)

    directories = dict(settings.directories)
    for role in DirectoryRole:
        override = getattr(args, f"dir_{role.value}")
        if override is not None:
            directories[role] = override
    for role in args.skip_dir:
        directories[DirectoryRole(role)] = None

    token = args.github_token
    init_project(
        dir_raw_data=directories[DirectoryRole.RAW_DATA],
        dir_cache=directories[DirectoryRole.CACHE],
        dir_docs=directories[DirectoryRole.DOCS],
        dir_output=directories[DirectoryRole.OUTPUT],
        dir_reference=directories[DirectoryRole.REFERENCE],
        init_git=_pick(args.git, settings.git.init),
        commit_all_changes=_pick(args.commit, settings.git.commit_all),
        init_readme=_pick(args.readme, settings.readme),
        init_remote=_pick(args.github, settings.github.init),
        remote_private=_pick(args.private, settings.github.private),
        github=lambda: GitHubClient.from_env(token),
        github_owner=args.github_owner or settings.github.owner,
    )
    return 0


def run_cmd(args: argparse.Namespace) -> int:
    run = _settings(args).run
    run_project(
        scripts=args.scripts or run.scripts,
        skip_project_render=_pick(args.skip_project_render, run.skip_project_render),
        clear_output_and_docs=_pick(args.clear, run.clear_output_and_docs),
        copy_docs=_pick(args.copy_docs, run.copy_docs),
        scripts_dir=args.scripts_dir or run.scripts_dir,
        output_dir=args.output_dir or run.output_dir,
        docs_dir=args.docs_dir or run.docs_dir,
        execution_dir=args.execution_dir or run.execution_dir,
    )
    return 0


def _toggle(p: argparse.ArgumentParser, name: str, dest: str, on_help: str, off_help: str) -> None:
    p.add_argument(f"--{name}", dest=dest, action="store_true", default=None, help=on_help)
    p.add_argument(f"--no-{name}", dest=dest, action="store_false", default=None, help=off_help)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="projr", description="Scaffold and run lightweight analysis projects")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    p.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")
    sub = p.add_subparsers(dest="command", required=True)

    i = sub.add_parser("init", help="Create directories, git repository, README and GitHub remote")
    i.add_argument("--settings", default=None, help="Settings file (default: projr.yml if present)")
    i.add_argument("--raw-data", dest="dir_raw_data", default=None, help="Raw data directory (default: _raw_data)")
    i.add_argument("--cache", dest="dir_cache", default=None, help="Cache directory (default: _tmp)")
    i.add_argument("--docs", dest="dir_docs", default=None, help="Rendered docs directory (default: docs)")
    i.add_argument("--output", dest="dir_output", default=None, help="Output directory (default: _output)")
    i.add_argument("--reference", dest="dir_reference", default=None, help="Reference directory (default: _reference)")
    i.add_argument(
        "--skip-dir",
        action="append",
        default=[],
        choices=[role.value for role in DirectoryRole],
        help="Do not create this directory (repeatable)",
    )
    _toggle(i, "git", "git", "Initialise a git repository (default)", "Do not initialise git")
    _toggle(i, "commit", "commit", "Commit all changes (default)", "Do not commit anything")
    _toggle(i, "readme", "readme", "Write README.md (default)", "Do not write README.md")
    _toggle(i, "github", "github", "Create a GitHub repository and push", "Do not touch GitHub (default)")
    i.add_argument("--private", dest="private", action="store_true", default=None, help="Create a private repo (default)")
    i.add_argument("--public", dest="private", action="store_false", default=None, help="Create a public repo")
    i.add_argument("--github-owner", default=None, help="GitHub owner (user or org; default: authenticated user)")
    i.add_argument("--github-token", default=None, help="GitHub token (or set env GITHUB_TOKEN)")
    i.set_defaults(func=init_cmd)

    r = sub.add_parser("run", help="Run scripts, render documents and collect docs")
    r.add_argument("scripts", nargs="*", help="Scripts to run, relative to --scripts-dir (default: all)")
    r.add_argument("--settings", default=None, help="Settings file (default: projr.yml if present)")
    r.add_argument(
        "--skip-project-render",
        action="store_true",
        default=None,
        help="Do not render the Quarto project even if _quarto.yml exists",
    )
    _toggle(r, "clear", "clear", "Clear the output and docs directories first", "Keep existing outputs (default)")
    _toggle(r, "copy-docs", "copy_docs", "Move rendered docs into the docs directory (default)", "Leave rendered docs in place")
    r.add_argument("--scripts-dir", default=None, help="Directory holding the scripts (default: working directory)")
    r.add_argument("--output-dir", default=None, help="Output directory (default: _output)")
    r.add_argument("--docs-dir", default=None, help="Docs directory (default: docs)")
    r.add_argument("--execution-dir", default=None, help="Working directory for scripts and rendering")
    r.set_defaults(func=run_cmd)
    return p


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.DEBUG if args.verbose else logging.WARNING if args.quiet else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.captureWarnings(True)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args)
    _log.debug("projr %s: %s", __version__, args.command)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
