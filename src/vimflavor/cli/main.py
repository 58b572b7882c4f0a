"""vim-flavor CLI --- a version-locking plugin manager for Vim.

Entry point for the ``vim-flavor`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    install --- Deploy flavors at their locked versions.
    upgrade --- Move flavors to their newest satisfying versions.
    paths   --- Show the runtimepath order of deployed flavors.

Usage::

    vim-flavor install                 # ./VimFlavor into ~/.vim
    vim-flavor install ~/dotfiles/vim  # Another vimfiles path
    vim-flavor upgrade
    vim-flavor paths
"""

from __future__ import annotations

import logging

import click

from vimflavor import __version__
from vimflavor.cli.install_cmd import install_command, upgrade_command
from vimflavor.cli.paths_cmd import paths_command


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Log git commands and decisions.")
def cli(verbose: bool) -> None:
    """vim-flavor: install Vim plugins at locked, constraint-checked versions.

    Declare plugins in ./VimFlavor, run ``vim-flavor install``, and add
    ``runtime flavors/bootstrap.vim`` to your vimrc.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register all subcommands
cli.add_command(install_command)
cli.add_command(upgrade_command)
cli.add_command(paths_command)
