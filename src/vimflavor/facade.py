"""The Facade --- load, resolve, deploy, save.

``Facade`` is the single entry point used by the ``install`` and
``upgrade`` commands::

    facade = Facade()
    facade.install()          # VimFlavor + VimFlavor.lock in the cwd, ~/.vim

Ordering guarantees: the lockfile is written only after every flavor has
been resolved, and deployment starts only after the lockfile is written.
A resolution failure therefore leaves both the lockfile and the vimfiles
directory as they were.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

from vimflavor.config import (
    default_flavorfile_path,
    default_lockfile_path,
    default_vimfiles_path,
)
from vimflavor.core.bootstrap import write_bootstrap
from vimflavor.core.cache import RepositoryCache
from vimflavor.core.deployer import Deployer, flavors_path_of
from vimflavor.core.flavor.models import LockedFlavor
from vimflavor.core.flavorfile import Flavorfile
from vimflavor.core.lockfile import Lockfile
from vimflavor.core.resolver import ResolutionPolicy, Resolver
from vimflavor.exceptions import VimFlavorError

logger = logging.getLogger(__name__)


class Facade:
    """Owns the Flavorfile and Lockfile of one run and drives the pipeline.

    Args:
        flavorfile_path: VimFlavor file. Defaults to ``<cwd>/VimFlavor``.
        lockfile_path: Lockfile. Defaults to ``<cwd>/VimFlavor.lock``.
        cache: Repository cache. Defaults to ``RepositoryCache()``.

    Attributes:
        flavorfile: Declared flavors; None until ``load()``.
        lockfile: Locked flavors; None until ``load()``.
    """

    def __init__(
        self,
        flavorfile_path: Path | None = None,
        lockfile_path: Path | None = None,
        cache: Any | None = None,
    ) -> None:
        self.flavorfile_path = flavorfile_path or default_flavorfile_path()
        self.lockfile_path = lockfile_path or default_lockfile_path()
        self.cache = cache if cache is not None else RepositoryCache()
        self.flavorfile: Flavorfile | None = None
        self.lockfile: Lockfile | None = None

    def load(self) -> None:
        """Read the VimFlavor file and the lockfile.

        Raises:
            FlavorfileNotFoundError: If the VimFlavor file does not exist.
            FlavorfileError: If it is malformed.
            LockfileError: If the lockfile exists but is malformed.
        """
        self.flavorfile = Flavorfile.read(self.flavorfile_path)
        self.lockfile = Lockfile.read(self.lockfile_path)

    def save_lockfile(self) -> None:
        """Write the current lockfile to ``lockfile_path``."""
        if self.lockfile is None:
            raise VimFlavorError("Nothing to save: the lockfile has not been loaded")
        self.lockfile.write(self.lockfile_path)
        logger.debug("Wrote %s", self.lockfile_path)

    def install(
        self, vimfiles_path: Path | None = None, groups: Iterable[str] | None = None
    ) -> dict[str, Any]:
        """Deploy locked versions, resolving only what is new or invalidated.

        Returns:
            The diff between the previous and the new lockfile.
        """
        return self._refresh(vimfiles_path, groups, ResolutionPolicy.PREFER_LOCKED)

    def upgrade(
        self, vimfiles_path: Path | None = None, groups: Iterable[str] | None = None
    ) -> dict[str, Any]:
        """Re-resolve every flavor to its newest satisfying version and deploy.

        Returns:
            The diff between the previous and the new lockfile.
        """
        return self._refresh(vimfiles_path, groups, ResolutionPolicy.FORCE_LATEST)

    def _refresh(
        self,
        vimfiles_path: Path | None,
        groups: Iterable[str] | None,
        policy: ResolutionPolicy,
    ) -> dict[str, Any]:
        self.load()

        previous = self.lockfile
        self.lockfile = Resolver(self.cache).resolve(self.flavorfile, previous, policy)
        self.save_lockfile()

        self.deploy_flavors(
            self.select_flavors(self.lockfile, groups),
            vimfiles_path or default_vimfiles_path(),
        )
        return previous.diff(self.lockfile)

    @staticmethod
    def select_flavors(
        lockfile: Lockfile, groups: Iterable[str] | None = None
    ) -> list[LockedFlavor]:
        """Return the locked flavors belonging to any of *groups* (all if None)."""
        if groups is None:
            return list(lockfile)
        wanted = set(groups)
        return [f for f in lockfile if wanted.intersection(f.groups)]

    def deploy_flavors(
        self, flavors: Iterable[LockedFlavor], vimfiles_path: Path
    ) -> dict[str, Path]:
        """Deploy *flavors* into *vimfiles_path* (see ``Deployer.deploy``)."""
        return Deployer(self.cache).deploy(flavors, vimfiles_path)

    def create_vim_script_for_bootstrap(self, vimfiles_path: Path) -> Path:
        """Write the bootstrap script without deploying anything."""
        flavors_path = flavors_path_of(vimfiles_path)
        flavors_path.mkdir(parents=True, exist_ok=True)
        names = [p.name for p in flavors_path.iterdir() if p.is_dir()]
        return write_bootstrap(flavors_path, names)
