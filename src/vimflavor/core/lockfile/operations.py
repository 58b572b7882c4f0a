"""Lockfile operations --- deserialization and diffing.

This module extends the ``Lockfile`` class (defined in ``lockfile.py``) with
classmethods and instance methods for:

- **Deserialization:** ``from_dict``, ``from_yaml``, ``read`` (disk).
- **Diffing:** structured comparison of two lockfiles.

These are attached to the ``Lockfile`` class at import time (in
``__init__.py``).

Lockfiles are loaded with PyYAML's ``BaseLoader``, which leaves every scalar
a string, so versions such as ``1.10`` are never read back as floats.
Legacy symbol-keyed files (``:flavors:``, ``- :default``) and the legacy
``version_contraint`` key are accepted and normalized.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from vimflavor.core.flavor.models import DEFAULT_GROUP, LockedFlavor
from vimflavor.core.version import DEFAULT_CONSTRAINT, Version
from vimflavor.exceptions import LockfileError

logger = logging.getLogger(__name__)

_LEGACY_KEYS = {"version_contraint": "version_constraint"}

# Legacy writers left constraints unquoted (``:version_contraint: >= 0``),
# which YAML reads as the start of a block scalar.
_BARE_CONSTRAINT_RE = re.compile(
    r"^(?P<key>[ \t]*:?version_cons?traint:[ \t]+)(?P<value>[<>=~][^'\"\n]*?)[ \t]*$",
    re.MULTILINE,
)


def _quote_bare_constraints(text: str) -> str:
    return _BARE_CONSTRAINT_RE.sub(r"\g<key>'\g<value>'", text)


def _symbol_free(value: str) -> str:
    return value[1:] if value.startswith(":") else value


def _normalize_keys(entry: dict[str, Any]) -> dict[str, Any]:
    normalized: dict[str, Any] = {}
    for key, value in entry.items():
        key = _symbol_free(key)
        normalized[_LEGACY_KEYS.get(key, key)] = value
    return normalized


def _from_dict(cls: type, data: dict[str, Any]) -> Any:
    """Deserialize a lockfile from parsed YAML data.

    Raises:
        LockfileError: If the structure or a version is invalid.
    """
    if not isinstance(data, dict):
        raise LockfileError("Lockfile must be a mapping")
    data = _normalize_keys(data)
    flavors_data = data.get("flavors") or {}
    if not isinstance(flavors_data, dict):
        raise LockfileError("Lockfile 'flavors' must be a mapping")

    lf = cls()
    for uri, raw_entry in flavors_data.items():
        if not isinstance(raw_entry, dict):
            raise LockfileError(f"Lock entry for {uri!r} must be a mapping")
        entry = _normalize_keys(raw_entry)
        raw_version = entry.get("locked_version")
        if not raw_version:
            raise LockfileError(f"Lock entry for {uri!r} has no locked_version")
        try:
            version = Version.parse(str(raw_version))
        except ValueError as exc:
            raise LockfileError(f"Lock entry for {uri!r}: {exc}") from exc
        groups = entry.get("groups") or [DEFAULT_GROUP]
        if isinstance(groups, str):
            groups = [groups]
        lf.add_flavor(
            LockedFlavor(
                repo_name=entry.get("repo_name") or uri,
                repo_uri=uri,
                groups=tuple(_symbol_free(str(g)) for g in groups),
                version_constraint=entry.get("version_constraint") or DEFAULT_CONSTRAINT,
                locked_version=version,
            )
        )
    return lf


def _from_yaml(cls: type, text: str) -> Any:
    """Deserialize from YAML text.

    Raises:
        LockfileError: If the text is not valid YAML or not a lockfile.
    """
    try:
        data = yaml.load(_quote_bare_constraints(text), Loader=yaml.BaseLoader)
    except yaml.YAMLError as exc:
        raise LockfileError(f"Invalid lockfile YAML: {exc}") from exc
    if data is None or data == "":
        return cls()
    return cls.from_dict(data)


def _read(cls: type, path: Path) -> Any:
    """Read a lockfile from disk.

    A missing file is not an error: it yields an empty lockfile.

    Raises:
        LockfileError: If the file exists but is malformed.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No lockfile at %s; starting from an empty lock", path)
        return cls()
    return cls.from_yaml(text)


def _diff(self: Any, other: Any) -> dict[str, Any]:
    """Compare two lockfiles and return differences.

    - **added**: repositories present in ``other`` but not in ``self``.
    - **removed**: repositories present in ``self`` but not in ``other``.
    - **changed**: repositories present in both with a different version.

    Args:
        other: The lockfile to compare against (typically the newer one).

    Returns:
        Dict with keys 'added', 'removed', 'changed'.
    """
    self_uris = set(self._flavors)
    other_uris = set(other._flavors)

    changes: list[dict[str, Any]] = []
    for uri in sorted(self_uris & other_uris):
        old = self._flavors[uri].locked_version
        new = other._flavors[uri].locked_version
        if old.text != new.text:
            changes.append({"repo_uri": uri, "old": old.text, "new": new.text})

    return {
        "added": sorted(other_uris - self_uris),
        "removed": sorted(self_uris - other_uris),
        "changed": changes,
    }
