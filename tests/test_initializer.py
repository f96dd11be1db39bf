from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from projr import initializer
from projr.directories import DirectoryRole, DirectorySpec
from projr.git_repo import GitRepository


class FakeGit:
    def __init__(self, root: Path, *, identity: bool = True, status: list[tuple[str, str]] | None = None) -> None:
        self.root = root
        self.initialized = False
        self.init_calls = 0
        self.config: dict[str, str] = {"user.name": "Ada", "user.email": "ada@example.org"} if identity else {}
        self.configured: list[tuple[str, str, str]] = []
        self._status = status if status is not None else []
        self.added: list[list[str]] = []
        self.commits: list[str] = []
        self.remotes: list[tuple[bool, str | None]] = []

    def is_initialized(self) -> bool:
        return self.initialized

    def init(self) -> None:
        self.init_calls += 1
        self.initialized = True

    def status(self) -> list[tuple[str, str]]:
        return list(self._status)

    def add(self, paths: list[str]) -> None:
        self.added.append(list(paths))

    def commit(self, message: str) -> None:
        self.commits.append(message)
        self._status = []

    def get_config(self, key: str) -> str | None:
        return self.config.get(key)

    def configure(self, key: str, value: str, *, scope: str = "global") -> None:
        self.configured.append((key, value, scope))
        self.config[key] = value

    def create_remote(self, *, private: bool, client: object, owner: str | None = None) -> None:
        self.remotes.append((private, owner))


class FakePrompter:
    def __init__(self, confirm: bool = True, answers: list[str] | None = None) -> None:
        self._confirm = confirm
        self.answers = list(answers or [])
        self.questions: list[str] = []

    def confirm(self, question: str) -> bool:
        self.questions.append(question)
        return self._confirm

    def ask(self, question: str) -> str:
        self.questions.append(question)
        return self.answers.pop(0)


def _no_github() -> object:
    raise AssertionError("GitHub should not be contacted")


def test_init_project_creates_everything_by_default(project: Path) -> None:
    git = FakeGit(project, status=[("README.md", "new"), ("analysis.py", "modified"), ("gone.py", "deleted")])

    assert initializer.init_project(git=git, prompter=FakePrompter(), github=_no_github)

    for name in ("_raw_data", "_tmp", "docs", "_output", "_reference"):
        assert (project / name).is_dir()
    assert (project / "README.md").exists()
    assert git.init_calls == 1
    assert git.added == [["README.md", "analysis.py"]]
    assert git.commits == [initializer.COMMIT_MESSAGE]
    gitignore = (project / ".gitignore").read_text(encoding="utf-8").splitlines()
    assert "_tmp" in gitignore
    assert git.remotes == []


def test_init_project_respects_skipped_directories_and_flags(project: Path) -> None:
    git = FakeGit(project)

    initializer.init_project(
        dir_raw_data=None,
        dir_cache=None,
        dir_output=None,
        dir_reference=None,
        init_git=False,
        init_readme=False,
        git=git,
        prompter=FakePrompter(),
        github=_no_github,
    )

    assert sorted(p.name for p in project.iterdir()) == ["docs"]
    assert git.init_calls == 0


def test_init_project_is_idempotent(project: Path) -> None:
    git = FakeGit(project)
    initializer.init_project(git=git, prompter=FakePrompter(), github=_no_github)
    (project / "_output" / "result.csv").write_text("x", encoding="utf-8")
    first_ignore = (project / ".gitignore").read_text(encoding="utf-8")

    initializer.init_project(git=git, prompter=FakePrompter(), github=_no_github)

    assert (project / "_output" / "result.csv").exists()
    assert (project / ".gitignore").read_text(encoding="utf-8") == first_ignore


def test_gitignore_merges_existing_lines_without_duplicates(tmp_path: Path) -> None:
    (tmp_path / ".gitignore").write_text("*.log\n.DS_Store\n*.log\n", encoding="utf-8")

    lines = initializer.write_gitignore(tmp_path, "_tmp")

    assert lines == ["*.log", ".DS_Store", *[p for p in initializer.BASELINE_IGNORES if p != ".DS_Store"], "_tmp"]
    assert (tmp_path / ".gitignore").read_text(encoding="utf-8") == "\n".join(lines) + "\n"


def test_gitignore_without_cache_has_only_baseline(tmp_path: Path) -> None:
    assert initializer.write_gitignore(tmp_path, None) == list(initializer.BASELINE_IGNORES)


def test_missing_identity_is_prompted_and_persisted(project: Path) -> None:
    git = FakeGit(project, identity=False)
    prompter = FakePrompter(answers=["Grace", "grace@example.org"])

    initializer.init_repository(True, "_tmp", False, git=git, prompter=prompter)

    assert git.configured == [
        ("user.name", "Grace", "global"),
        ("user.email", "grace@example.org", "global"),
    ]
    assert len(prompter.questions) == 4


def test_declined_identity_is_fatal(project: Path) -> None:
    git = FakeGit(project, identity=False)

    with pytest.raises(initializer.GitIdentityError, match="user.name"):
        initializer.init_repository(True, "_tmp", True, git=git, prompter=FakePrompter(confirm=False))

    assert git.commits == []


def test_empty_identity_is_fatal(project: Path) -> None:
    git = FakeGit(project, identity=False)
    git.config["user.name"] = "Ada"

    with pytest.raises(initializer.GitIdentityError, match="user.email"):
        initializer.init_repository(True, None, True, git=git, prompter=FakePrompter(answers=[""]))


def test_commit_all_is_a_no_op_without_changes(project: Path) -> None:
    git = FakeGit(project, status=[("old.py", "deleted")])
    git.initialized = True

    assert initializer.commit_all(git, FakePrompter()) is False
    assert git.commits == []


@pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
def test_commit_all_commits_files_staged_before_the_first_commit(project: Path) -> None:
    git = GitRepository(project)
    git.init()
    subprocess.run(["git", "config", "user.name", "Ada"], cwd=project, check=True)
    subprocess.run(["git", "config", "user.email", "ada@example.org"], cwd=project, check=True)
    (project / "staged.py").write_text("", encoding="utf-8")
    git.add(["staged.py"])

    assert initializer.commit_all(git, FakePrompter()) is True
    assert git.status() == []


def test_readme_is_rendered_and_overwritten(project: Path) -> None:
    (project / "README.md").write_text("old", encoding="utf-8")
    specs = [
        DirectorySpec(DirectoryRole.RAW_DATA, "data/raw"),
        DirectorySpec(DirectoryRole.CACHE, None),
        DirectorySpec(DirectoryRole.DOCS, "docs"),
    ]

    assert initializer.write_readme(True, specs)

    text = (project / "README.md").read_text(encoding="utf-8")
    assert text.startswith(f"# {project.name}\n")
    assert "## Reproducing the analysis" in text
    assert "- **`data/raw/`**: Raw, unprocessed data files." in text
    assert "`docs/`" in text
    assert "_tmp" not in text


def test_readme_disabled(project: Path) -> None:
    assert initializer.write_readme(False) is False
    assert not (project / "README.md").exists()


def test_connect_remote_initialises_git_when_missing(project: Path, caplog: pytest.LogCaptureFixture) -> None:
    git = FakeGit(project, status=[("a.py", "new")])
    clients: list[object] = []

    def github() -> object:
        clients.append(object())
        return clients[-1]

    with caplog.at_level("INFO", logger="projr.initializer"):
        initializer.connect_remote(True, "_tmp", True, True, git=git, prompter=FakePrompter(), github=github, owner="lab")

    assert git.init_calls == 1
    assert git.commits == [initializer.COMMIT_MESSAGE]
    assert git.remotes == [(True, "lab")]
    assert len(clients) == 1
    assert any("Collaborators" in message for message in caplog.messages)


def test_connect_remote_public_skips_reminder(project: Path, caplog: pytest.LogCaptureFixture) -> None:
    git = FakeGit(project)
    git.initialized = True

    with caplog.at_level("INFO", logger="projr.initializer"):
        initializer.connect_remote(True, None, False, False, git=git, prompter=FakePrompter(), github=object)

    assert git.init_calls == 0
    assert git.remotes == [(False, None)]
    assert not any("Collaborators" in message for message in caplog.messages)


def test_connect_remote_disabled(project: Path) -> None:
    git = FakeGit(project)
    assert initializer.connect_remote(False, "_tmp", True, True, git=git, github=_no_github) is False
    assert git.init_calls == 0
