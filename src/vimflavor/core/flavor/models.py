"""Flavor data models --- declared flavors and their locked state.

A ``Flavor`` is one line of a VimFlavor file: a repository, the name it is
known by, the groups it belongs to and the constraint its version must
satisfy. A ``LockedFlavor`` is the same flavor after resolution, carrying
the chosen version and the local clone it came from.

Both are keyed by ``repo_uri``. Deploy directory names are derived from
``repo_name`` only (see ``deploy_dir_names``), so deployments do not depend
on declaration order or on when resolution ran.
"""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Iterable

from vimflavor.core.version import DEFAULT_CONSTRAINT, Version, VersionConstraint

DEFAULT_GROUP = "default"

BOOTSTRAP_FILENAME = "bootstrap.vim"

_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9._-]")
_GITHUB_USER_REPO_RE = re.compile(r"^(?P<user>[A-Za-z0-9_-]+)/(?P<repo>[^/]+)$")
_VIM_SCRIPTS_REPO_RE = re.compile(r"^(?P<repo>[^/:]+)$")


def zap(text: str) -> str:
    """Make *text* usable as a single path component.

    Every character outside ``[A-Za-z0-9._-]`` becomes ``_``. Names made of
    dots only (``.``, ``..``) are turned into underscores so that the result
    can never point at a parent directory.
    """
    zapped = _UNSAFE_CHARS_RE.sub("_", text)
    if zapped and set(zapped) == {"."}:
        zapped = "_" * len(zapped)
    return zapped or "_"


def repo_uri_from_name(repo_name: str) -> str:
    """Map a VimFlavor repository shorthand to a clonable location.

    - ``name`` -> ``https://github.com/vim-scripts/name.git``
    - ``user/name`` -> ``https://github.com/user/name.git``
    - anything else (URL, path, ``git@host:...``) is returned unchanged.
    """
    m = _VIM_SCRIPTS_REPO_RE.match(repo_name)
    if m:
        return f"https://github.com/vim-scripts/{m.group('repo')}.git"
    m = _GITHUB_USER_REPO_RE.match(repo_name)
    if m:
        return f"https://github.com/{m.group('user')}/{m.group('repo')}.git"
    return repo_name


# ---------------------------------------------------------------------------
# Flavor: one declared dependency
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Flavor:
    """A declared flavor.

    Attributes:
        repo_name: Stable name, as written in the VimFlavor file
            (e.g. "kana/vim-smartinput") or given via ``name:``.
        repo_uri: Repository location. The key of the flavor.
        groups: Usage groups, sorted (e.g. ("default",)).
        version_constraint: Constraint expression as declared.
    """

    repo_name: str
    repo_uri: str
    groups: tuple[str, ...] = (DEFAULT_GROUP,)
    version_constraint: str = DEFAULT_CONSTRAINT

    def __post_init__(self) -> None:
        object.__setattr__(self, "groups", tuple(sorted(set(self.groups))))

    @property
    def constraint(self) -> VersionConstraint:
        """The parsed version constraint."""
        return VersionConstraint.parse(self.version_constraint)


# ---------------------------------------------------------------------------
# LockedFlavor: a resolved flavor
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LockedFlavor:
    """A flavor pinned to a concrete version.

    Attributes:
        repo_name: Stable name of the flavor.
        repo_uri: Repository location. The key of the lock entry.
        groups: Usage groups, sorted.
        version_constraint: Constraint expression in effect when locked.
        locked_version: The resolved version.
        cache_path: Local clone that produced the version. Derived from the
            repository cache, never persisted.
    """

    repo_name: str
    repo_uri: str
    groups: tuple[str, ...]
    version_constraint: str
    locked_version: Version
    cache_path: Path | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "groups", tuple(sorted(set(self.groups))))

    @classmethod
    def from_flavor(
        cls, flavor: Flavor, version: Version, cache_path: Path | None = None
    ) -> LockedFlavor:
        """Pin a declared flavor to *version*."""
        return cls(
            repo_name=flavor.repo_name,
            repo_uri=flavor.repo_uri,
            groups=flavor.groups,
            version_constraint=flavor.version_constraint,
            locked_version=version,
            cache_path=cache_path,
        )

    def with_cache_path(self, cache_path: Path) -> LockedFlavor:
        """Return a copy pointing at *cache_path*."""
        return replace(self, cache_path=cache_path)


# ---------------------------------------------------------------------------
# Deploy paths
# ---------------------------------------------------------------------------


def deploy_dir_names(flavors: Iterable[LockedFlavor]) -> dict[str, str]:
    """Compute the deploy directory name of each flavor, keyed by repo_uri.

    The name is ``zap(repo_name)``. When several flavors share a name, each
    of them gets a ``-<sha1 prefix of repo_uri>`` suffix, so the result only
    depends on the set of flavors, never on their order.
    """
    by_name: dict[str, list[str]] = {}
    for flavor in flavors:
        name = zap(flavor.repo_name)
        if name == BOOTSTRAP_FILENAME:
            name = f"_{name}"
        by_name.setdefault(name, []).append(flavor.repo_uri)

    result: dict[str, str] = {}
    for name, uris in by_name.items():
        if len(uris) == 1:
            result[uris[0]] = name
            continue
        for uri in uris:
            digest = hashlib.sha1(uri.encode("utf-8")).hexdigest()[:8]
            result[uri] = f"{name}-{digest}"
    return result
