"""Local cache of flavor repositories, backed by the ``git`` executable.

Every repository location gets one clone under the cache root. The clone
is reused across runs: resolution only fetches tags into it, and
deployment checks out the locked tag and copies the working tree out.

Git is driven with ``subprocess.run``. A failing command, or a missing
``git`` executable, raises ``BackendError`` and aborts the whole operation;
nothing is retried except the single tag fetch ``checkout_snapshot`` does
when the requested tag is not known locally.

Thread safety: none. Two processes sharing a cache root may race.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path

from vimflavor.config import default_cache_root
from vimflavor.core.flavor.models import zap
from vimflavor.core.version import Version
from vimflavor.exceptions import BackendError

logger = logging.getLogger(__name__)


def _run_git(args: list[str], cwd: Path | None = None) -> subprocess.CompletedProcess:
    """Run a git command, raising ``BackendError`` on failure."""
    command = ["git", *args]
    logger.debug("Running %s (cwd=%s)", " ".join(command), cwd)
    env = dict(os.environ, GIT_TERMINAL_PROMPT="0")
    try:
        result = subprocess.run(
            command,
            cwd=str(cwd) if cwd else None,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            env=env,
        )
    except OSError as exc:
        raise BackendError(command, str(exc)) from exc
    if result.returncode != 0:
        raise BackendError(command, result.stderr)
    return result


class RepositoryCache:
    """Clones of flavor repositories under a shared root directory.

    Args:
        root: Cache root. Defaults to ``config.default_cache_root()``.
    """

    def __init__(self, root: Path | None = None) -> None:
        self.root = root if root is not None else default_cache_root()

    def path_for(self, repo_uri: str) -> Path:
        """Return the clone location for *repo_uri* (which may not exist yet)."""
        return self.root / zap(repo_uri)

    def is_cloned(self, repo_uri: str) -> bool:
        return (self.path_for(repo_uri) / ".git").is_dir()

    def ensure_cloned(self, repo_uri: str) -> Path:
        """Clone *repo_uri* on first use; afterwards reuse the existing clone."""
        path = self.path_for(repo_uri)
        if self.is_cloned(repo_uri):
            return path
        try:
            if path.exists():
                # Leftover of an interrupted clone.
                shutil.rmtree(path)
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise BackendError(["git", "clone", repo_uri, str(path)], str(exc)) from exc
        logger.info("Cloning %s", repo_uri)
        _run_git(["clone", "--quiet", repo_uri, str(path)])
        return path

    def fetch_tags(self, local_path: Path) -> None:
        """Update the tags of an existing clone from its origin."""
        logger.info("Fetching tags into %s", local_path)
        _run_git(["fetch", "--tags", "--force", "--quiet"], cwd=local_path)

    def refresh(self, repo_uri: str) -> Path:
        """Make sure the clone exists and knows the latest published tags."""
        if self.is_cloned(repo_uri):
            path = self.path_for(repo_uri)
            self.fetch_tags(path)
            return path
        return self.ensure_cloned(repo_uri)

    def list_versions(self, local_path: Path) -> set[Version]:
        """Return every tag that parses as a version. Other tags are ignored."""
        result = _run_git(["tag", "--list"], cwd=local_path)
        versions: set[Version] = set()
        for line in result.stdout.splitlines():
            version = Version.try_parse(line)
            if version is not None:
                versions.add(version)
        return versions

    def _has_tag(self, local_path: Path, tag: str) -> bool:
        try:
            _run_git(
                ["rev-parse", "--verify", "--quiet", f"refs/tags/{tag}^{{commit}}"],
                cwd=local_path,
            )
        except BackendError:
            return False
        return True

    def checkout_snapshot(self, local_path: Path, version: Version) -> Path:
        """Check out exactly *version* and return the directory holding its files.

        The returned tree still contains git metadata (``.git``); callers
        copying it elsewhere are expected to leave that out.
        """
        tag = version.text
        if not self._has_tag(local_path, tag):
            self.fetch_tags(local_path)
        _run_git(["checkout", "--force", "--quiet", f"refs/tags/{tag}"], cwd=local_path)
        _run_git(["clean", "-d", "-x", "--force", "--quiet"], cwd=local_path)
        return local_path
