"""VimFlavor.lock --- reproducible flavor installations.

The package is split into focused submodules:

- ``lockfile``: The ``Lockfile`` class with entry management and
  deterministic YAML serialization.
- ``operations``: Deserialization (``from_dict``, ``from_yaml``, ``read``)
  and diffing.

All public names are re-exported here so that imports like
``from vimflavor.core.lockfile import Lockfile`` work.
"""

from vimflavor.core.lockfile.lockfile import LOCKFILE_SUFFIX, Lockfile

# Attach operations to Lockfile as methods/classmethods
from vimflavor.core.lockfile import operations as _ops

Lockfile.from_dict = classmethod(_ops._from_dict)
Lockfile.from_yaml = classmethod(_ops._from_yaml)
Lockfile.read = classmethod(_ops._read)
Lockfile.diff = _ops._diff

__all__ = [
    "LOCKFILE_SUFFIX",
    "Lockfile",
]
