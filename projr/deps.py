"""
deps.py

Responsibility: make sure the rendering toolchains a run needs are available.

The runner asks for the set of script kinds it is about to execute (plus
whether the working directory is a Quarto project). Missing Python packages
are installed on demand: into the project's own environment when it is managed
by uv (`.venv/` plus `uv.lock`), with pip into the current interpreter
otherwise. The Quarto program itself cannot be installed this way; if it is
absent or broken the run stops with a pointer to the installer.
"""

from __future__ import annotations

import importlib
import importlib.util
import logging
import shutil
import subprocess
import sys
from collections.abc import Iterable
from pathlib import Path

from projr.scripts import ScriptKind

_log = logging.getLogger("projr.deps")

NOTEBOOK_PACKAGES = ("nbformat", "nbclient", "nbconvert", "ipykernel")
QUARTO_PACKAGES = ("nbformat", "nbclient", "ipykernel")

QUARTO_HELP = (
    "\nQuarto (the program, not the Python package) is not installed or not working.\n"
    "Install from https://quarto.org/docs/get-started/"
)


class ToolchainError(RuntimeError):
    pass


def uv_project_detected(root: Path) -> bool:
    return (root / ".venv").is_dir() and (root / "uv.lock").is_file()


class DependencyInstaller:
    def __init__(self, root: Path | None = None) -> None:
        self.root = (root or Path.cwd()).resolve()

    def is_installed(self, package: str) -> bool:
        return importlib.util.find_spec(package) is not None

    def install_command(self, package: str) -> list[str]:
        if uv_project_detected(self.root):
            uv = shutil.which("uv") or "uv"
            return [uv, "pip", "install", "--python", str(self.root / ".venv"), package]
        return [sys.executable, "-m", "pip", "install", package]

    def install(self, package: str) -> None:
        if self.is_installed(package):
            return
        _log.info("Installing package: %s", package)
        cmd = self.install_command(package)
        try:
            subprocess.run(cmd, cwd=self.root, check=True, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True)
        except (OSError, subprocess.CalledProcessError) as e:
            output = getattr(e, "stdout", None) or str(e)
            raise ToolchainError(f"Command failed: {' '.join(cmd)}\n\n{output}") from e
        importlib.invalidate_caches()

    def check_quarto(self) -> str:
        """Return the Quarto version, raising `ToolchainError` when the program is unusable."""
        try:
            p = subprocess.run(["quarto", "--version"], check=True, capture_output=True, text=True)
        except (OSError, subprocess.CalledProcessError) as e:
            raise ToolchainError(QUARTO_HELP) from e
        version = p.stdout.strip()
        _log.debug("Quarto version %s", version)
        return version


def required_packages(kinds: Iterable[ScriptKind], project: bool) -> list[str]:
    kinds = set(kinds)
    packages: list[str] = []
    if ScriptKind.QUARTO in kinds or project:
        packages.extend(QUARTO_PACKAGES)
    if ScriptKind.NOTEBOOK in kinds:
        packages.extend(NOTEBOOK_PACKAGES)
    return list(dict.fromkeys(packages))


def install_dependencies(kinds: Iterable[ScriptKind], project: bool, installer: DependencyInstaller) -> list[str]:
    """Install whatever the given kinds need. Returns the packages that were checked."""
    kinds = set(kinds)
    packages = required_packages(kinds, project)
    for package in packages:
        installer.install(package)
    if ScriptKind.QUARTO in kinds or project:
        installer.check_quarto()
    return packages
