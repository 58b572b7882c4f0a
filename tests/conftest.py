"""Shared fixtures for vimflavor tests.

``fake_cache`` stands in for ``RepositoryCache`` without git: repositories
are dictionaries of ``version -> {relative path: content}``. Tests that
need real repositories use ``git_repo`` and are skipped when ``git`` is
not installed.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path
from typing import Callable

import pytest

from vimflavor.core.flavor import zap
from vimflavor.core.version import Version
from vimflavor.exceptions import BackendError


class FakeRepositoryCache:
    """In-memory repository cache recording every call it receives."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.repos: dict[str, dict[str, dict[str, str]]] = {}
        self.failing: set[str] = set()
        self.calls: list[tuple[str, str]] = []

    def publish(self, repo_uri: str, version: str, files: dict[str, str] | None = None) -> None:
        """Add a tag to a repository, creating the repository if needed."""
        if files is None:
            files = {"plugin/main.vim": f'" {repo_uri} {version}\n'}
        self.repos.setdefault(repo_uri, {})[version] = files

    def path_for(self, repo_uri: str) -> Path:
        return self.root / "repos" / zap(repo_uri)

    def _uri_of(self, local_path: Path) -> str:
        for uri in self.repos:
            if self.path_for(uri) == local_path:
                return uri
        raise AssertionError(f"unknown clone {local_path}")

    def _check(self, repo_uri: str) -> None:
        if repo_uri in self.failing or repo_uri not in self.repos:
            raise BackendError(["git", "clone", repo_uri], "repository not found")

    def ensure_cloned(self, repo_uri: str) -> Path:
        self.calls.append(("ensure_cloned", repo_uri))
        self._check(repo_uri)
        return self.path_for(repo_uri)

    def refresh(self, repo_uri: str) -> Path:
        self.calls.append(("refresh", repo_uri))
        self._check(repo_uri)
        return self.path_for(repo_uri)

    def list_versions(self, local_path: Path) -> set[Version]:
        uri = self._uri_of(local_path)
        self.calls.append(("list_versions", uri))
        parsed = (Version.try_parse(tag) for tag in self.repos[uri])
        return {v for v in parsed if v is not None}

    def checkout_snapshot(self, local_path: Path, version: Version) -> Path:
        uri = self._uri_of(local_path)
        self.calls.append(("checkout_snapshot", uri))
        snapshot = self.root / "snapshots" / zap(uri) / version.text
        if snapshot.exists():
            shutil.rmtree(snapshot)
        for relative, content in self.repos[uri][version.text].items():
            target = snapshot / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
        (snapshot / ".git").mkdir(parents=True, exist_ok=True)
        (snapshot / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
        return snapshot

    def network_calls(self) -> list[tuple[str, str]]:
        return [c for c in self.calls if c[0] == "refresh"]


@pytest.fixture
def fake_cache(tmp_path: Path) -> FakeRepositoryCache:
    """A fresh in-memory repository cache rooted in a temp directory."""
    return FakeRepositoryCache(tmp_path / "cache")


# ---------------------------------------------------------------------------
# Real git repositories
# ---------------------------------------------------------------------------


_GIT_ENV = {
    "GIT_AUTHOR_NAME": "Test",
    "GIT_AUTHOR_EMAIL": "test@example.com",
    "GIT_COMMITTER_NAME": "Test",
    "GIT_COMMITTER_EMAIL": "test@example.com",
    "GIT_CONFIG_NOSYSTEM": "1",
    "GIT_CONFIG_GLOBAL": os.devnull,
}


def git(repo: Path, *args: str) -> str:
    """Run git inside *repo* and return stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=repo,
        env=dict(os.environ, **_GIT_ENV),
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout


class GitRepo:
    """A local origin repository that tests can commit and tag into."""

    def __init__(self, path: Path) -> None:
        self.path = path
        path.mkdir(parents=True)
        git(path, "init", "--quiet")

    @property
    def uri(self) -> str:
        return str(self.path)

    def commit_and_tag(self, tag: str, files: dict[str, str] | None = None) -> None:
        if files is None:
            files = {"plugin/main.vim": f'" version {tag}\n'}
        for relative, content in files.items():
            target = self.path / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
        git(self.path, "add", "--all")
        git(self.path, "commit", "--quiet", "--allow-empty", "-m", f"Release {tag}")
        git(self.path, "tag", tag)


@pytest.fixture
def git_repo(tmp_path: Path) -> Callable[[str], GitRepo]:
    """Factory creating origin repositories under ``tmp_path/origins``.

    Skips the requesting test when ``git`` is not installed.
    """
    if shutil.which("git") is None:
        pytest.skip("git not installed")

    def _make(name: str) -> GitRepo:
        return GitRepo(tmp_path / "origins" / name)

    return _make
