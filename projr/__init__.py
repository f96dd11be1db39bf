"""
projr package

This package scaffolds and runs lightweight analysis projects, as a CLI and as
a small Python API.

Key responsibilities are split across modules:
- `initializer.py`: directories, git, `.gitignore`, README, GitHub remote
- `runner.py`: discover -> install -> clear -> execute/collect -> project render
- `scripts.py`: script kinds and discovery
- `artifacts.py`: moving rendered documents into the docs directory
- `documents.py`: Jupyter and Quarto renderers
- `git_repo.py` / `github_client.py`: git subprocess calls / GitHub REST API
- `settings.py`: optional `projr.yml` defaults
- `cli.py`: CLI entrypoint
"""

from __future__ import annotations

__all__ = ["__version__", "init_project", "run_project"]

__version__ = "0.1.0"

from projr.initializer import init_project  # noqa: E402
from projr.runner import run_project  # noqa: E402
