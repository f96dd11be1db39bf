"""
initializer.py

Responsibility: scaffold a new analysis project in the working directory.

Pipeline (`init_project`):
1) create the standard directories
2) initialise git, write `.gitignore`, make sure a git identity exists and
   optionally commit everything
3) write `README.md`
4) optionally create a GitHub repository and push to it

Each step is a no-op when its flag is off. A missing git identity that the user
will not supply is the only fatal condition: committing is impossible without it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from projr.directories import DESCRIPTIONS, DirectoryRole, DirectorySpec, create_directories, default_specs
from projr.git_repo import GitRepository
from projr.github_client import GitHubClient
from projr.interactive import ConsolePrompter, Prompter
from projr.templating import write_template

_log = logging.getLogger("projr.initializer")

GITIGNORE = ".gitignore"
README = "README.md"
COMMIT_MESSAGE = "Add and commit all changes"

BASELINE_IGNORES = (
    ".idea",
    ".vscode",
    ".ipynb_checkpoints",
    "__pycache__",
    ".DS_Store",
    ".quarto",
)


class GitIdentityError(RuntimeError):
    pass


def write_gitignore(root: Path, cache_path: str | None) -> list[str]:
    """Merge the baseline patterns (and `cache_path`) into `.gitignore`, dropping duplicates."""
    path = root / GITIGNORE
    lines = path.read_text(encoding="utf-8").splitlines() if path.exists() else []
    lines.extend(BASELINE_IGNORES)
    if cache_path is not None:
        lines.append(Path(cache_path).as_posix())
    unique = list(dict.fromkeys(lines))
    path.write_text("\n".join(unique) + "\n", encoding="utf-8")
    if cache_path is not None:
        _log.info("Added '%s' to %s.", cache_path, GITIGNORE)
    return unique


def _ensure_identity_value(git: GitRepository, prompter: Prompter, key: str, label: str) -> None:
    if git.get_config(key):
        return
    if not prompter.confirm(f"Your Git {label} is not set. Would you like to set it now?"):
        raise GitIdentityError(f"Git {key} is required. Please configure it and try again.")
    value = prompter.ask(f"Please enter your Git {label}:")
    if not value:
        raise GitIdentityError(f"Git {key} is required for committing changes.")
    git.configure(key, value, scope="global")
    _log.info("Git %s set to: %s", key, value)


def ensure_identity(git: GitRepository, prompter: Prompter) -> None:
    _ensure_identity_value(git, prompter, "user.name", "user name")
    _ensure_identity_value(git, prompter, "user.email", "user email")


def commit_all(git: GitRepository, prompter: Prompter, enabled: bool = True) -> bool:
    """Stage every modified or new file and commit them. Returns whether a commit was made."""
    if not enabled or not git.is_initialized():
        return False
    ensure_identity(git, prompter)
    paths = [path for path, state in git.status() if state in ("modified", "new")]
    if not paths:
        return False
    _log.info("Adding and committing all changes...")
    git.add(paths)
    git.commit(COMMIT_MESSAGE)
    _log.info("Committed changes.")
    return True


def init_repository(
    enabled: bool,
    cache_path: str | None,
    commit: bool,
    *,
    git: GitRepository | None = None,
    prompter: Prompter | None = None,
) -> bool:
    if not enabled:
        return False
    git = git or GitRepository()
    prompter = prompter or ConsolePrompter()
    _log.info("Initialising Git repository...")
    git.init()
    write_gitignore(git.root, cache_path)
    ensure_identity(git, prompter)
    commit_all(git, prompter, commit)
    return True


def write_readme(enabled: bool, directories: Iterable[DirectorySpec] | None = None, *, root: Path | None = None) -> bool:
    if not enabled:
        return False
    root = (root or Path.cwd()).resolve()
    specs = {spec.role: spec for spec in (default_specs() if directories is None else directories)}
    listed = [specs[role] for role in DESCRIPTIONS if role in specs and not specs[role].absent]
    write_template(f"{README}.j2", root / README, {"project_name": root.name, "directories": listed})
    _log.info("Created %s.", README)
    return True


def connect_remote(
    enabled: bool,
    cache_path: str | None,
    commit: bool,
    private: bool,
    *,
    git: GitRepository | None = None,
    prompter: Prompter | None = None,
    github: Callable[[], GitHubClient] = GitHubClient.from_env,
    owner: str | None = None,
) -> bool:
    if not enabled:
        return False
    git = git or GitRepository()
    prompter = prompter or ConsolePrompter()
    if not git.is_initialized():
        _log.info("Git repository not initialised. Initialising now...")
        init_repository(True, cache_path, commit, git=git, prompter=prompter)
    commit_all(git, prompter, commit)
    _log.info("Connecting to GitHub...")
    git.create_remote(private=private, client=github(), owner=owner)
    if private:
        _log.info(
            "The repository is private. To add collaborators, please go to the repo on GitHub, "
            "choose 'Settings' and then 'Collaborators'."
        )
    return True


def init_project(
    dir_raw_data: str | None = "_raw_data",
    dir_cache: str | None = "_tmp",
    dir_docs: str | None = "docs",
    dir_output: str | None = "_output",
    dir_reference: str | None = "_reference",
    init_git: bool = True,
    commit_all_changes: bool = True,
    init_readme: bool = True,
    init_remote: bool = False,
    remote_private: bool = True,
    *,
    git: GitRepository | None = None,
    prompter: Prompter | None = None,
    github: Callable[[], GitHubClient] = GitHubClient.from_env,
    github_owner: str | None = None,
) -> bool:
    """
    Create the standard directories, initialise git, write a README and
    optionally connect the project to GitHub.

    Pass `None` for a directory to skip it.
    """
    specs = [
        DirectorySpec(role, path)
        for role, path in zip(DirectoryRole, (dir_raw_data, dir_cache, dir_docs, dir_output, dir_reference))
    ]
    git = git or GitRepository()
    prompter = prompter or ConsolePrompter()

    create_directories(specs)
    init_repository(init_git, dir_cache, commit_all_changes, git=git, prompter=prompter)
    write_readme(init_readme, specs, root=git.root)
    connect_remote(
        init_remote,
        dir_cache,
        commit_all_changes,
        remote_private,
        git=git,
        prompter=prompter,
        github=github,
        owner=github_owner,
    )
    return True
