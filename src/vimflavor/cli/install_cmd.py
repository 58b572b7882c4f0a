"""``vim-flavor install`` and ``vim-flavor upgrade``.

Both read ``VimFlavor`` and ``VimFlavor.lock``, resolve, write the
lockfile and deploy into the vimfiles path (``~/.vim`` by default).

- ``install`` keeps locked versions that still satisfy their constraints.
- ``upgrade`` moves every flavor to its newest satisfying version.

Exit Codes:
    0 --- Flavors resolved and deployed.
    1 --- Resolution, git or deployment failure (nothing is half-locked).
    2 --- Usage error.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import click

from vimflavor.cli.output import print_error, print_lock_summary
from vimflavor.core.cache import RepositoryCache
from vimflavor.exceptions import VimFlavorError
from vimflavor.facade import Facade

_path = click.Path(path_type=Path)


def _common_options(func: Callable) -> Callable:
    """Options shared by ``install`` and ``upgrade``."""
    decorators = [
        click.argument("vimfiles_path", required=False, type=_path),
        click.option(
            "--flavorfile",
            type=_path,
            default=None,
            help="VimFlavor file to read (default: ./VimFlavor).",
        ),
        click.option(
            "--lockfile",
            type=_path,
            default=None,
            help="Lockfile to read and write (default: ./VimFlavor.lock).",
        ),
        click.option(
            "--cache-dir",
            type=_path,
            default=None,
            help="Where repositories are cloned (default: ~/.vim-flavor/repos).",
        ),
        click.option(
            "--group",
            "groups",
            multiple=True,
            help="Only deploy flavors in this group. Repeatable. Default: all.",
        ),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def _run(
    operation: str,
    vimfiles_path: Path | None,
    flavorfile: Path | None,
    lockfile: Path | None,
    cache_dir: Path | None,
    groups: tuple[str, ...],
) -> None:
    facade = Facade(
        flavorfile_path=flavorfile,
        lockfile_path=lockfile,
        cache=RepositoryCache(cache_dir) if cache_dir else None,
    )
    try:
        diff = getattr(facade, operation)(vimfiles_path, groups or None)
    except VimFlavorError as exc:
        print_error(str(exc))
        sys.exit(1)

    print_lock_summary(facade.lockfile, diff)
    click.echo("Completed.")


@click.command("install")
@_common_options
def install_command(vimfiles_path, flavorfile, lockfile, cache_dir, groups) -> None:
    """Install flavors at their locked versions into VIMFILES_PATH.

    Flavors missing from the lockfile, or whose locked version no longer
    satisfies the VimFlavor constraint, are resolved to the newest
    satisfying tag. VIMFILES_PATH defaults to ~/.vim.
    """
    _run("install", vimfiles_path, flavorfile, lockfile, cache_dir, groups)


@click.command("upgrade")
@_common_options
def upgrade_command(vimfiles_path, flavorfile, lockfile, cache_dir, groups) -> None:
    """Upgrade every flavor to its newest satisfying version.

    VIMFILES_PATH defaults to ~/.vim.
    """
    _run("upgrade", vimfiles_path, flavorfile, lockfile, cache_dir, groups)
