"""Flavor resolution --- from declared constraints to a lockfile.

Each declared flavor is resolved on its own: there are no inter-flavor
dependencies, so resolution is a per-flavor choice of the highest tag that
satisfies the flavor's constraint.

Two policies exist:

- ``PREFER_LOCKED`` (``install``): keep the locked version when it still
  satisfies the current constraint; only unlocked or invalidated flavors
  touch the network.
- ``FORCE_LATEST`` (``upgrade``): always fetch tags and pick the best match.

The result contains exactly the declared flavors. Lock entries for
flavors no longer declared are dropped. Resolution either succeeds for
every flavor or raises; the input lockfile is never modified.
"""

from __future__ import annotations

import enum
import logging
from typing import Any

from vimflavor.core.flavor.models import Flavor, LockedFlavor
from vimflavor.core.flavorfile import Flavorfile
from vimflavor.core.lockfile import Lockfile
from vimflavor.exceptions import ResolutionError

logger = logging.getLogger(__name__)


class ResolutionPolicy(enum.Enum):
    """How to treat versions already recorded in the lockfile."""

    PREFER_LOCKED = "prefer-locked"
    FORCE_LATEST = "force-latest"


class Resolver:
    """Resolves a Flavorfile against published tags.

    Args:
        cache: A ``RepositoryCache`` (or any object with the same
            ``refresh``, ``list_versions`` and ``path_for`` methods).
    """

    def __init__(self, cache: Any) -> None:
        self._cache = cache

    def resolve(
        self,
        flavorfile: Flavorfile,
        lockfile: Lockfile,
        policy: ResolutionPolicy = ResolutionPolicy.PREFER_LOCKED,
    ) -> Lockfile:
        """Compute the lockfile for *flavorfile*.

        Args:
            flavorfile: Declared flavors.
            lockfile: The currently persisted lock; read, never modified.
            policy: Whether to keep still-valid locked versions.

        Returns:
            A new ``Lockfile`` with one entry per declared flavor.

        Raises:
            ResolutionError: If a flavor has no satisfying version.
            BackendError: If cloning or fetching a repository fails.
        """
        resolved = Lockfile()
        for flavor in flavorfile:
            locked = lockfile.get_flavor(flavor.repo_uri)
            if policy is ResolutionPolicy.PREFER_LOCKED and self._still_valid(
                flavor, locked
            ):
                logger.debug(
                    "Keeping %s at %s", flavor.repo_name, locked.locked_version
                )
                resolved.add_flavor(self._carry_over(flavor, locked))
            else:
                resolved.add_flavor(self._resolve_latest(flavor))

        dropped = sorted(set(lockfile.flavors) - set(resolved.flavors))
        for uri in dropped:
            logger.info("Dropping %s from the lock: no longer declared", uri)
        return resolved

    @staticmethod
    def _still_valid(flavor: Flavor, locked: LockedFlavor | None) -> bool:
        if locked is None:
            return False
        return flavor.constraint.satisfies(locked.locked_version)

    def _carry_over(self, flavor: Flavor, locked: LockedFlavor) -> LockedFlavor:
        """Reuse a locked version unchanged, without touching the network.

        Name, groups and constraint are taken from the current declaration
        so that edits to them are reflected in the lock.
        """
        cache_path = locked.cache_path or self._cache.path_for(flavor.repo_uri)
        return LockedFlavor.from_flavor(flavor, locked.locked_version, cache_path)

    def _resolve_latest(self, flavor: Flavor) -> LockedFlavor:
        local_path = self._cache.refresh(flavor.repo_uri)
        versions = self._cache.list_versions(local_path)
        best = flavor.constraint.best_match(versions)
        if best is None:
            raise ResolutionError(
                flavor.repo_name,
                flavor.version_constraint,
                [v.text for v in sorted(versions, reverse=True)],
            )
        logger.info(
            "Resolved %s %s to %s", flavor.repo_name, flavor.version_constraint, best
        )
        return LockedFlavor.from_flavor(flavor, best, local_path)
