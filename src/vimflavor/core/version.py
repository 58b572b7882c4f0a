"""Versions and version constraints for flavor resolution.

Flavors are versioned by the tags of their git repositories. A tag is a
candidate version when it is a dot-separated list of non-negative integers,
optionally prefixed with ``v`` (``1``, ``1.2``, ``v1.2.3``). Anything else
(``nightly``, ``1.0-rc1``) is not a version and is ignored by resolution.

Three constraint operators are supported:

- Minimum (inclusive): ``>= 1.2``
- Pessimistic: ``~> 1.2.3`` (any ``1.2.x`` with ``x >= 3``)
- Exact: ``== 1.2.3`` (``= 1.2.3`` is accepted as an alias)

The pessimistic operator pins a number of leading segments that depends on
how many segments the constraint's version has. The mapping is kept as an
explicit table, ``_PESSIMISTIC_PINNED_SEGMENTS``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable

from vimflavor.exceptions import ConstraintError


# ---------------------------------------------------------------------------
# Version: a parsed tag
# ---------------------------------------------------------------------------

_VERSION_RE = re.compile(r"^v?(?P<segments>\d+(?:\.\d+)*)$")


def _normalize(segments: tuple[int, ...]) -> tuple[int, ...]:
    """Strip trailing zero segments so that ``1.0`` and ``1.0.0`` compare equal."""
    end = len(segments)
    while end > 1 and segments[end - 1] == 0:
        end -= 1
    return segments[:end]


@dataclass(frozen=True, order=True)
class Version:
    """A multi-segment numeric version.

    Ordering and equality use the numeric segments with trailing zeros
    ignored. ``text`` keeps the tag exactly as published, which is what gets
    checked out and what the lockfile records.

    Attributes:
        key: Normalized segments used for comparison.
        segments: Segments as written (``v1.2.0`` -> ``(1, 2, 0)``).
        text: The tag text (``v1.2.0``).
    """

    key: tuple[int, ...]
    segments: tuple[int, ...] = field(compare=False)
    text: str = field(compare=False)

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse a tag or version string.

        Raises:
            ValueError: If *text* is not a numeric dotted version.
        """
        stripped = text.strip()
        m = _VERSION_RE.match(stripped)
        if not m:
            raise ValueError(f"Invalid version: {text!r}")
        segments = tuple(int(s) for s in m.group("segments").split("."))
        return cls(key=_normalize(segments), segments=segments, text=stripped)

    @classmethod
    def try_parse(cls, text: str) -> Version | None:
        """Like ``parse`` but returns None for non-version text."""
        try:
            return cls.parse(text)
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"Version({self.text!r})"


# ---------------------------------------------------------------------------
# VersionConstraint
# ---------------------------------------------------------------------------

AT_LEAST = ">="
PESSIMISTIC = "~>"
EXACT = "=="

_CONSTRAINT_RE = re.compile(
    r"^\s*(?P<op>>=|~>|==|=)\s*(?P<ver>v?\d+(?:\.\d+)*)\s*$"
)

# Number of leading segments a ``~>`` constraint pins, by the segment count
# of its version. Segment counts beyond the table pin all but the last.
_PESSIMISTIC_PINNED_SEGMENTS: dict[int, int] = {
    1: 1,
    2: 1,
    3: 2,
}


def pinned_segment_count(segment_count: int) -> int:
    """Return how many leading segments ``~>`` fixes for a version of that length."""
    if segment_count in _PESSIMISTIC_PINNED_SEGMENTS:
        return _PESSIMISTIC_PINNED_SEGMENTS[segment_count]
    return segment_count - 1


@dataclass(frozen=True)
class VersionConstraint:
    """A parsed ``<operator> <version>`` requirement.

    Attributes:
        operator: One of ``>=``, ``~>``, ``==``.
        version: The version operand.
    """

    operator: str
    version: Version

    @classmethod
    def parse(cls, raw: str) -> VersionConstraint:
        """Parse a constraint expression such as ``'~> 1.2'``.

        Raises:
            ConstraintError: If the expression is not one of the supported forms.
        """
        m = _CONSTRAINT_RE.match(raw)
        if not m:
            raise ConstraintError(f"Invalid version constraint: {raw!r}")
        op = m.group("op")
        if op == "=":
            op = EXACT
        return cls(operator=op, version=Version.parse(m.group("ver")))

    def satisfies(self, version: Version) -> bool:
        """Check whether *version* meets this constraint."""
        if self.operator == AT_LEAST:
            return version >= self.version
        if self.operator == EXACT:
            return version == self.version
        if self.operator == PESSIMISTIC:
            if version < self.version:
                return False
            pinned = pinned_segment_count(len(self.version.segments))
            return _padded(version.segments, pinned) == _padded(
                self.version.segments, pinned
            )
        raise ValueError(f"Unknown operator: {self.operator!r}")  # pragma: no cover

    def best_match(self, candidates: Iterable[Version]) -> Version | None:
        """Return the highest candidate satisfying this constraint, or None."""
        satisfying = [v for v in candidates if self.satisfies(v)]
        return max(satisfying) if satisfying else None

    def __str__(self) -> str:
        return f"{self.operator} {self.version.text}"

    def __repr__(self) -> str:
        return f"VersionConstraint({str(self)!r})"


def _padded(segments: tuple[int, ...], length: int) -> tuple[int, ...]:
    """Return the first *length* segments, zero-padded when too short."""
    head = segments[:length]
    return head + (0,) * (length - len(head))


def satisfies(constraint: VersionConstraint | str, version: Version | str) -> bool:
    """Functional form of ``VersionConstraint.satisfies`` accepting raw strings."""
    if isinstance(constraint, str):
        constraint = VersionConstraint.parse(constraint)
    if isinstance(version, str):
        version = Version.parse(version)
    return constraint.satisfies(version)


def best_match(
    constraint: VersionConstraint | str, candidates: Iterable[Version | str]
) -> Version | None:
    """Functional form of ``VersionConstraint.best_match`` accepting raw strings."""
    if isinstance(constraint, str):
        constraint = VersionConstraint.parse(constraint)
    parsed = [Version.parse(c) if isinstance(c, str) else c for c in candidates]
    return constraint.best_match(parsed)


DEFAULT_CONSTRAINT = ">= 0"
