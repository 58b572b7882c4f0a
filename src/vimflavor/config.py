"""Default locations for vim-flavor.

There is no configuration file. Locations come from the environment and
can be overridden by CLI options or constructor arguments:

- ``VIM_FLAVOR_HOME``: root of vim-flavor's own state (default
  ``~/.vim-flavor``); repositories are cached under ``<root>/repos``.
- ``HOME``: the default vimfiles path is ``$HOME/.vim``.
- The VimFlavor file and its lockfile live in the current directory.
"""

from __future__ import annotations

import os
from pathlib import Path

from vimflavor.core.flavorfile import FLAVORFILE_NAME
from vimflavor.core.lockfile import LOCKFILE_SUFFIX

HOME_ENV = "VIM_FLAVOR_HOME"
VIMFILES_DIRNAME = ".vim"


def _home() -> Path:
    home = os.environ.get("HOME")
    return Path(home) if home else Path.home()


def vim_flavor_home() -> Path:
    """Return vim-flavor's state directory."""
    override = os.environ.get(HOME_ENV)
    if override:
        return Path(override).expanduser()
    return _home() / ".vim-flavor"


def default_cache_root() -> Path:
    """Return the directory holding cached repository clones."""
    return vim_flavor_home() / "repos"


def default_vimfiles_path() -> Path:
    """Return the deployment target used when none is given."""
    return _home() / VIMFILES_DIRNAME


def default_flavorfile_path(cwd: Path | None = None) -> Path:
    """Return ``<cwd>/VimFlavor``."""
    return (cwd or Path.cwd()) / FLAVORFILE_NAME


def default_lockfile_path(cwd: Path | None = None) -> Path:
    """Return ``<cwd>/VimFlavor.lock``."""
    return (cwd or Path.cwd()) / f"{FLAVORFILE_NAME}{LOCKFILE_SUFFIX}"
