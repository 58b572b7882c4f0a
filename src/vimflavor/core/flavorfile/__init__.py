"""VimFlavor declaration file: parsing and the ordered flavor set."""

from vimflavor.core.flavorfile.flavorfile import FLAVORFILE_NAME, Flavorfile
from vimflavor.core.flavorfile.parser import parse_flavors

__all__ = [
    "FLAVORFILE_NAME",
    "Flavorfile",
    "parse_flavors",
]
