"""
git_repo.py

Responsibility: the version-control capability used by the initializer.

Every method maps onto a single `git` invocation (or, for `create_remote`, a
GitHub lookup/creation followed by `git remote add` and `git push`), so callers
can reason about side effects. Commands run through `_git`, which raises
`GitError` with the captured output when git exits non-zero.

`status()` parses `git status --porcelain -z --untracked-files=all` into
`(path, state)` pairs. States:
- `new`: untracked (`??`) or added to the index but never committed (`A?`)
- `modified`: modified in the index or the worktree
- `deleted`, `renamed`: as reported by git
- `other`: anything else (type changes, copies, conflicts)
"""

from __future__ import annotations

import logging
import re
import subprocess
from collections.abc import Iterable
from pathlib import Path

from projr.github_client import GitHubClient, RepoInfo, tokenized_https_remote

_log = logging.getLogger("projr.git_repo")

_TOKEN_RE = re.compile(r"x-access-token:[^@]+@")


class GitError(RuntimeError):
    pass


_STATE_BY_CODE = {
    "M": "modified",
    "D": "deleted",
    "R": "renamed",
}


def _state_for(code: str) -> str:
    if code == "??" or code[0] == "A":
        return "new"
    if "M" in code:
        return "modified"
    for char in code:
        if char in _STATE_BY_CODE:
            return _STATE_BY_CODE[char]
    return "other"


def parse_porcelain_z(output: str) -> list[tuple[str, str]]:
    """Parse NUL-separated porcelain v1 output into (path, state) pairs."""
    entries = output.split("\0")
    result: list[tuple[str, str]] = []
    i = 0
    while i < len(entries):
        entry = entries[i]
        i += 1
        if len(entry) < 4:
            continue
        code, path = entry[:2], entry[3:]
        # Renames and copies carry the original path as the next entry.
        if code[0] in "RC" or code[1] in "RC":
            i += 1
        result.append((path, _state_for(code)))
    return result


class GitRepository:
    def __init__(self, root: Path | None = None) -> None:
        self.root = (root or Path.cwd()).resolve()

    def is_initialized(self) -> bool:
        return (self.root / ".git").exists()

    def init(self) -> None:
        self._git(["init"])

    def status(self) -> list[tuple[str, str]]:
        out = self._git(["status", "--porcelain", "-z", "--untracked-files=all"])
        return parse_porcelain_z(out)

    def add(self, paths: Iterable[str]) -> None:
        paths = list(paths)
        if not paths:
            return
        self._git(["add", "--", *paths])

    def commit(self, message: str) -> None:
        self._git(["commit", "-m", message])

    def get_config(self, key: str) -> str | None:
        p = subprocess.run(
            ["git", "config", "--get", key],
            cwd=self.root,
            text=True,
            check=False,
            capture_output=True,
        )
        if p.returncode != 0:
            return None
        return p.stdout.strip() or None

    def configure(self, key: str, value: str, *, scope: str = "global") -> None:
        self._git(["config", f"--{scope}", key, value])

    def current_branch(self) -> str:
        return self._git(["rev-parse", "--abbrev-ref", "HEAD"]).strip()

    def add_remote(self, name: str, url: str) -> None:
        self._git(["remote", "add", name, url])

    def remote_url(self, name: str) -> str | None:
        p = subprocess.run(
            ["git", "remote", "get-url", name],
            cwd=self.root,
            text=True,
            check=False,
            capture_output=True,
        )
        return p.stdout.strip() if p.returncode == 0 else None

    def push(self, target: str, refspec: str) -> None:
        self._git(["push", target, refspec])

    def create_remote(
        self,
        *,
        private: bool,
        client: GitHubClient,
        owner: str | None = None,
        name: str | None = None,
    ) -> RepoInfo:
        """
        Create (or reuse) `<owner>/<name>` on GitHub, register it as `origin`
        and push the current branch to it.

        `owner` defaults to the authenticated user and `name` to the
        repository directory name.
        """
        owner = owner or client.viewer_login()
        name = name or self.root.name

        repo = client.get_repo(owner, name)
        if repo is None:
            repo = client.create_repo(owner=owner, name=name, private=private)
        else:
            _log.info("Using existing GitHub repository %s", repo.html_url)

        if self.remote_url("origin") is None:
            self.add_remote("origin", repo.clone_url)

        branch = self.current_branch()
        self.push(tokenized_https_remote(repo.clone_url, client.token), f"HEAD:refs/heads/{branch}")
        _log.info("Pushed %s to %s", branch, repo.html_url)
        return repo

    def _git(self, args: list[str]) -> str:
        cmd = ["git", *args]
        shown = _TOKEN_RE.sub("x-access-token:***@", " ".join(cmd))
        _log.debug("%s", shown)
        try:
            p = subprocess.run(cmd, cwd=self.root, text=True, check=True, capture_output=True)
        except subprocess.CalledProcessError as e:
            raise GitError(f"Command failed: {shown}\n\n{e.stdout}{e.stderr}") from e
        return p.stdout
