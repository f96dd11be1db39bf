from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest
from conftest import FakeInstaller

from projr import deps
from projr.scripts import ScriptKind


def test_required_packages_by_kind() -> None:
    assert deps.required_packages([ScriptKind.SCRIPT], project=False) == []
    assert deps.required_packages([ScriptKind.NOTEBOOK], project=False) == list(deps.NOTEBOOK_PACKAGES)
    assert deps.required_packages([], project=True) == list(deps.QUARTO_PACKAGES)
    both = deps.required_packages([ScriptKind.QUARTO, ScriptKind.NOTEBOOK], project=False)
    assert len(both) == len(set(both))
    assert set(both) == set(deps.NOTEBOOK_PACKAGES) | set(deps.QUARTO_PACKAGES)


def test_install_dependencies_checks_quarto_only_when_needed() -> None:
    installer = FakeInstaller()
    deps.install_dependencies([ScriptKind.NOTEBOOK], False, installer)  # type: ignore[arg-type]
    assert installer.quarto_checks == 0

    deps.install_dependencies([ScriptKind.SCRIPT], True, installer)  # type: ignore[arg-type]
    assert installer.quarto_checks == 1


def test_install_command_prefers_uv_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    installer = deps.DependencyInstaller(tmp_path)
    assert installer.install_command("nbclient") == [sys.executable, "-m", "pip", "install", "nbclient"]

    (tmp_path / ".venv").mkdir()
    assert installer.install_command("nbclient")[1:3] == ["-m", "pip"]

    (tmp_path / "uv.lock").write_text("", encoding="utf-8")
    monkeypatch.setattr(deps.shutil, "which", lambda name: "/usr/bin/uv")
    assert installer.install_command("nbclient") == [
        "/usr/bin/uv",
        "pip",
        "install",
        "--python",
        str(tmp_path.resolve() / ".venv"),
        "nbclient",
    ]


def test_install_skips_present_packages(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    installer = deps.DependencyInstaller(tmp_path)
    monkeypatch.setattr(deps.subprocess, "run", lambda *a, **k: (_ for _ in ()).throw(AssertionError()))

    installer.install("pytest")


def test_install_runs_installer_for_missing_package(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    installer = deps.DependencyInstaller(tmp_path)
    monkeypatch.setattr(installer, "is_installed", lambda package: False)
    calls: list[list[str]] = []

    def fake_run(cmd: list[str], **kwargs: object) -> SimpleNamespace:
        calls.append(cmd)
        return SimpleNamespace(returncode=0, stdout="")

    monkeypatch.setattr(deps.subprocess, "run", fake_run)

    installer.install("nbconvert")

    assert calls == [[sys.executable, "-m", "pip", "install", "nbconvert"]]


def test_failed_install_raises_toolchain_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    installer = deps.DependencyInstaller(tmp_path)
    monkeypatch.setattr(installer, "is_installed", lambda package: False)

    def fake_run(cmd: list[str], **kwargs: object) -> None:
        raise subprocess.CalledProcessError(1, cmd, output="No matching distribution")

    monkeypatch.setattr(deps.subprocess, "run", fake_run)

    with pytest.raises(deps.ToolchainError, match="No matching distribution"):
        installer.install("nbconvert")


@pytest.mark.parametrize(
    "error",
    [FileNotFoundError("quarto"), subprocess.CalledProcessError(1, ["quarto", "--version"])],
)
def test_broken_quarto_is_fatal_with_remediation(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, error: Exception) -> None:
    def fake_run(cmd: list[str], **kwargs: object) -> None:
        raise error

    monkeypatch.setattr(deps.subprocess, "run", fake_run)

    with pytest.raises(deps.ToolchainError, match="quarto.org"):
        deps.DependencyInstaller(tmp_path).check_quarto()


def test_quarto_version_is_returned(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(deps.subprocess, "run", lambda cmd, **kwargs: SimpleNamespace(stdout="1.5.57\n"))
    assert deps.DependencyInstaller(tmp_path).check_quarto() == "1.5.57"
