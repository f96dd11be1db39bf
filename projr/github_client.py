"""
github_client.py

Responsibility: Isolate all direct GitHub REST API interaction.

This module must be the only place that:
- Constructs GitHub REST endpoints
- Sends HTTP requests to api.github.com
- Interprets GitHub API responses / error payloads

`git_repo.GitRepository.create_remote` uses this client to find or create the
hosted repository; pushing is plain git and stays out of here.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any

import requests

_log = logging.getLogger("projr.github_client")


class GitHubError(RuntimeError):
    pass


@dataclass(frozen=True)
class RepoInfo:
    owner: str
    name: str
    html_url: str
    clone_url: str
    default_branch: str
    private: bool


class GitHubClient:
    def __init__(self, token: str, api_base: str = "https://api.github.com") -> None:
        if not token.strip():
            raise GitHubError("GitHub token is required (use --github-token or set GITHUB_TOKEN).")
        self._token = token
        self._api_base = api_base.rstrip("/")

    @classmethod
    def from_env(cls, token: str | None = None) -> GitHubClient:
        return cls(token or os.environ.get("GITHUB_TOKEN") or "")

    @property
    def token(self) -> str:
        return self._token

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self._token}",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "projr",
        }

    def _request(self, method: str, path: str, *, json_body: dict[str, Any] | None = None) -> Any:
        url = f"{self._api_base}{path}"
        _log.debug("%s %s", method, url)
        r = requests.request(method, url, headers=self._headers(), json=json_body, timeout=30)
        if r.status_code >= 400:
            try:
                payload = r.json()
            except ValueError:
                payload = {"message": r.text}
            raise GitHubError(f"GitHub API error {r.status_code} {method} {path}: {payload.get('message', payload)}")
        if r.status_code == 204:
            return None
        return r.json()

    def viewer_login(self) -> str:
        viewer = self._request("GET", "/user")
        return str(viewer.get("login") or "")

    def get_repo(self, owner: str, name: str) -> RepoInfo | None:
        """
        Return RepoInfo if the repo exists and is accessible; otherwise None.
        """
        try:
            data = self._request("GET", f"/repos/{owner}/{name}")
        except GitHubError as e:
            if " 404 " in str(e):
                return None
            raise
        return _repo_info(owner, name, data)

    def create_repo(
        self,
        *,
        owner: str,
        name: str,
        private: bool,
        description: str = "",
    ) -> RepoInfo:
        """
        Create `<owner>/<name>` on GitHub and return its info.

        The repository goes under the authenticated account when `owner` is the
        viewer, otherwise under the organisation `owner`. Nothing is pushed here.
        """
        body = {"name": name, "private": private, "description": description}
        path = "/user/repos" if owner == self.viewer_login() else f"/orgs/{owner}/repos"
        data = self._request("POST", path, json_body=body)

        _log.info("Created GitHub repository %s/%s (%s)", owner, name, "private" if private else "public")
        return _repo_info(owner, name, data)


def _repo_info(owner: str, name: str, data: dict[str, Any]) -> RepoInfo:
    return RepoInfo(
        owner=owner,
        name=name,
        html_url=data["html_url"],
        clone_url=data["clone_url"],
        default_branch=data.get("default_branch") or "main",
        private=bool(data.get("private", False)),
    )


def tokenized_https_remote(clone_url: str, token: str) -> str:
    """
    Convert https://github.com/owner/name.git into an HTTPS URL carrying a token.

    Only used as a one-off push target; the `origin` remote keeps the clean URL.
    """
    return clone_url.replace("https://", f"https://x-access-token:{token}@", 1)
