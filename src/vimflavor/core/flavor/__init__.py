"""Declared and locked flavor models.

All public names are re-exported here so that callers can write
``from vimflavor.core.flavor import Flavor``.
"""

from vimflavor.core.flavor.models import (
    BOOTSTRAP_FILENAME,
    DEFAULT_GROUP,
    Flavor,
    LockedFlavor,
    deploy_dir_names,
    repo_uri_from_name,
    zap,
)

__all__ = [
    "BOOTSTRAP_FILENAME",
    "DEFAULT_GROUP",
    "Flavor",
    "LockedFlavor",
    "deploy_dir_names",
    "repo_uri_from_name",
    "zap",
]
