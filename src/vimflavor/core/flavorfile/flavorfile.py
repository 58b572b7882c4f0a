"""The Flavorfile --- the ordered set of declared flavors.

Flavors are keyed by repository location and kept in declaration order.
Each repository may be declared once: there is no merging of constraints
from several declarations.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from vimflavor.core.flavor.models import Flavor
from vimflavor.core.flavorfile.parser import parse_flavors
from vimflavor.exceptions import FlavorfileError, FlavorfileNotFoundError

logger = logging.getLogger(__name__)

FLAVORFILE_NAME = "VimFlavor"


class Flavorfile:
    """Declared flavors, keyed by ``repo_uri`` in declaration order.

    Example::

        ff = Flavorfile.read(Path("VimFlavor"))
        for flavor in ff:
            print(flavor.repo_name, flavor.version_constraint)
    """

    def __init__(self, flavors: list[Flavor] | None = None) -> None:
        self._flavors: dict[str, Flavor] = {}
        for flavor in flavors or []:
            self.add_flavor(flavor)

    def add_flavor(self, flavor: Flavor) -> None:
        """Append a flavor.

        Raises:
            FlavorfileError: If the repository is already declared.
        """
        if flavor.repo_uri in self._flavors:
            raise FlavorfileError(
                f"Flavor {flavor.repo_name!r} is declared more than once"
            )
        self._flavors[flavor.repo_uri] = flavor

    @property
    def flavors(self) -> dict[str, Flavor]:
        """Mapping of ``repo_uri`` to flavor, in declaration order."""
        return dict(self._flavors)

    def __iter__(self) -> Iterator[Flavor]:
        return iter(self._flavors.values())

    def __len__(self) -> int:
        return len(self._flavors)

    @classmethod
    def parse(cls, text: str, source: str = FLAVORFILE_NAME) -> Flavorfile:
        """Build a Flavorfile from VimFlavor text."""
        return cls(parse_flavors(text, source))

    @classmethod
    def read(cls, path: Path) -> Flavorfile:
        """Read and parse a VimFlavor file.

        Raises:
            FlavorfileNotFoundError: If *path* does not exist.
            FlavorfileError: If the file is malformed.
        """
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise FlavorfileNotFoundError(f"{path} does not exist") from exc
        flavorfile = cls.parse(text, source=str(path))
        logger.debug("Read %d flavor(s) from %s", len(flavorfile), path)
        return flavorfile
