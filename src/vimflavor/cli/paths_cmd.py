"""``vim-flavor paths`` --- show the runtimepath the bootstrap script builds.

Reads the flavors currently deployed under VIMFILES_PATH and prints the
runtimepath entries in the order ``flavors/bootstrap.vim`` will set them.
"""

from __future__ import annotations

from pathlib import Path

import click

from vimflavor.cli.output import print_runtimepath
from vimflavor.config import default_vimfiles_path
from vimflavor.core.bootstrap import runtimepath_order
from vimflavor.core.deployer import flavors_path_of


@click.command("paths")
@click.argument("vimfiles_path", required=False, type=click.Path(path_type=Path))
def paths_command(vimfiles_path: Path | None) -> None:
    """Print the runtimepath order for flavors deployed in VIMFILES_PATH."""
    vimfiles_path = vimfiles_path or default_vimfiles_path()
    flavors_path = flavors_path_of(vimfiles_path)
    names = []
    if flavors_path.is_dir():
        names = [p.name for p in flavors_path.iterdir() if p.is_dir()]
    print_runtimepath(runtimepath_order(vimfiles_path, names))
