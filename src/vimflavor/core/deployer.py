"""Deployment of locked flavors into a vimfiles directory.

Layout produced under the target (``~/.vim`` by default)::

    <vimfiles>/flavors/<deploy name>/...     one directory per flavor
    <vimfiles>/flavors/bootstrap.vim         see ``core.bootstrap``

The ``flavors`` directory is owned by vim-flavor: every deployment
replaces each flavor's directory with a fresh copy of its locked tag and
deletes anything else found there. Nothing outside ``flavors`` is written
or removed, apart from creating ``<vimfiles>`` itself when missing.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any, Iterable

from vimflavor.core.bootstrap import FLAVORS_DIRNAME, write_bootstrap
from vimflavor.core.flavor.models import (
    BOOTSTRAP_FILENAME,
    LockedFlavor,
    deploy_dir_names,
)
from vimflavor.exceptions import DeploymentError

logger = logging.getLogger(__name__)

_GIT_METADATA = shutil.ignore_patterns(".git")


def flavors_path_of(vimfiles_path: Path) -> Path:
    """Return the managed ``flavors`` directory under *vimfiles_path*."""
    return vimfiles_path / FLAVORS_DIRNAME


def _remove(path: Path) -> None:
    if path.is_symlink() or not path.is_dir():
        path.unlink()
    else:
        shutil.rmtree(path)


class Deployer:
    """Materializes locked flavors from the repository cache.

    Args:
        cache: A ``RepositoryCache`` (or any object with the same
            ``ensure_cloned`` and ``checkout_snapshot`` methods).
    """

    def __init__(self, cache: Any) -> None:
        self._cache = cache

    def deploy(
        self, flavors: Iterable[LockedFlavor], vimfiles_path: Path
    ) -> dict[str, Path]:
        """Deploy *flavors* into ``<vimfiles_path>/flavors``.

        Returns:
            Mapping of ``repo_uri`` to the directory the flavor was deployed to.

        Raises:
            DeploymentError: On filesystem errors. Already deployed flavors
                are left in place.
            BackendError: If a locked tag cannot be checked out.
        """
        flavors = sorted(flavors, key=lambda f: f.repo_uri)
        names = deploy_dir_names(flavors)
        flavors_path = flavors_path_of(vimfiles_path)

        try:
            flavors_path.mkdir(parents=True, exist_ok=True)

            deployed: dict[str, Path] = {}
            for flavor in flavors:
                deployed[flavor.repo_uri] = self._deploy_one(
                    flavor, flavors_path / names[flavor.repo_uri]
                )

            self._prune(flavors_path, set(names.values()))
            write_bootstrap(flavors_path, names.values())
        except OSError as exc:
            raise DeploymentError(
                f"Failed to deploy into {flavors_path}: {exc}"
            ) from exc

        logger.info("Deployed %d flavor(s) into %s", len(deployed), flavors_path)
        return deployed

    def _deploy_one(self, flavor: LockedFlavor, destination: Path) -> Path:
        local_path = self._cache.ensure_cloned(flavor.repo_uri)
        files_path = self._cache.checkout_snapshot(local_path, flavor.locked_version)
        if destination.exists() or destination.is_symlink():
            _remove(destination)
        shutil.copytree(files_path, destination, symlinks=True, ignore=_GIT_METADATA)
        logger.debug(
            "Deployed %s %s to %s", flavor.repo_name, flavor.locked_version, destination
        )
        return destination

    @staticmethod
    def _prune(flavors_path: Path, keep: set[str]) -> None:
        """Delete every entry of *flavors_path* that is not a current flavor."""
        for child in sorted(flavors_path.iterdir()):
            if child.name in keep or child.name == BOOTSTRAP_FILENAME:
                continue
            logger.info("Removing stale %s", child)
            _remove(child)
