"""Lockfile core class --- locked flavor management and serialization.

The ``Lockfile`` class is the in-memory form of a ``VimFlavor.lock`` file.
It provides:

- **Entry management:** add, get, count, and list locked flavors.
- **Serialization:** deterministic ``to_dict``, ``to_yaml``, and ``write``.

Determinism guarantee: ``to_yaml()`` sorts entries by repository location
and all keys alphabetically, and records nothing time-dependent. Two
lockfiles with the same entries always produce byte-identical YAML, so a
re-resolution that changes nothing leaves the file untouched in diffs.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator

import yaml

from vimflavor.core.flavor.models import LockedFlavor

LOCKFILE_SUFFIX = ".lock"


class Lockfile:
    """Resolved flavors, keyed by ``repo_uri``.

    Example::

        lf = Lockfile()
        lf.add_flavor(LockedFlavor(
            repo_name="kana/vim-smartinput",
            repo_uri="https://github.com/kana/vim-smartinput.git",
            groups=("default",),
            version_constraint=">= 0",
            locked_version=Version.parse("1.2.3"),
        ))
        lf.write(Path("VimFlavor.lock"))
    """

    def __init__(self, flavors: list[LockedFlavor] | None = None) -> None:
        self._flavors: dict[str, LockedFlavor] = {}
        for flavor in flavors or []:
            self.add_flavor(flavor)

    # -- Entry management ---------------------------------------------------

    def add_flavor(self, flavor: LockedFlavor) -> None:
        """Add a locked flavor, replacing any entry for the same repository."""
        self._flavors[flavor.repo_uri] = flavor

    def get_flavor(self, repo_uri: str) -> LockedFlavor | None:
        """Return the entry for *repo_uri*, or None."""
        return self._flavors.get(repo_uri)

    @property
    def flavors(self) -> dict[str, LockedFlavor]:
        """Mapping of ``repo_uri`` to locked flavor."""
        return dict(self._flavors)

    @property
    def flavor_count(self) -> int:
        """Return the number of locked flavors."""
        return len(self._flavors)

    def __iter__(self) -> Iterator[LockedFlavor]:
        for uri in sorted(self._flavors):
            yield self._flavors[uri]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Lockfile):
            return NotImplemented
        return self._flavors == other._flavors

    # -- Serialization ------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialize to plain data. Cache paths are not included."""
        flavors: dict[str, Any] = {}
        for uri in sorted(self._flavors):
            flavor = self._flavors[uri]
            flavors[uri] = {
                "groups": list(flavor.groups),
                "locked_version": flavor.locked_version.text,
                "repo_name": flavor.repo_name,
                "version_constraint": flavor.version_constraint,
            }
        return {"flavors": flavors}

    def to_yaml(self) -> str:
        """Serialize to deterministic YAML text."""
        return yaml.safe_dump(
            self.to_dict(), default_flow_style=False, sort_keys=True
        )

    def write(self, path: Path) -> None:
        """Write the lockfile to disk.

        Creates parent directories if they do not exist.
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_yaml(), encoding="utf-8")
