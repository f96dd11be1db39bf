from __future__ import annotations

from pathlib import Path

import pytest

from projr.documents import Renderers


class FakeDocumentRenderer:
    """Writes `<stem>.html` (and optional resources) beside the document, like the real tools."""

    def __init__(self, resources: dict[str, str] | None = None, empty_resource_dir: bool = False) -> None:
        self.calls: list[tuple[Path, Path | None]] = []
        self.resources = resources or {}
        self.empty_resource_dir = empty_resource_dir

    def render(self, path: Path, *, execution_dir: Path | None = None) -> list[Path]:
        self.calls.append((path, execution_dir))
        out = path.parent / f"{path.stem}.html"
        out.write_text(f"<html>{path.name}</html>", encoding="utf-8")
        resource_dir = path.parent / f"{path.stem}_files"
        if self.empty_resource_dir:
            resource_dir.mkdir(exist_ok=True)
        for rel, content in self.resources.items():
            target = resource_dir / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return [out]


class FakeProjectRenderer:
    def __init__(self) -> None:
        self.calls = 0

    def render_project(self) -> None:
        self.calls += 1


class FakeInstaller:
    def __init__(self) -> None:
        self.installed: list[str] = []
        self.quarto_checks = 0

    def install(self, package: str) -> None:
        self.installed.append(package)

    def check_quarto(self) -> str:
        self.quarto_checks += 1
        return "1.5.0"


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def renderers() -> Renderers:
    return Renderers(
        notebook=FakeDocumentRenderer(),
        quarto=FakeDocumentRenderer(),
        project=FakeProjectRenderer(),
    )


@pytest.fixture
def installer() -> FakeInstaller:
    return FakeInstaller()
