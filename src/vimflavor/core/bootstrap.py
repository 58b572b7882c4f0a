"""Bootstrap script generation.

The bootstrap script lives at ``<vimfiles>/flavors/bootstrap.vim`` and is
loaded from the user's vimrc with ``runtime flavors/bootstrap.vim``. When
sourced it rewrites ``&runtimepath`` to::

    <vimfiles>
    <vimfiles>/flavors/<a> ... <vimfiles>/flavors/<z>          (sorted)
    <vimfiles>/flavors/<z>/after ... <vimfiles>/flavors/<a>/after
    <vimfiles>/after

The flavor directories are globbed when the script runs, not when it is
generated, so the same script stays correct if the flavors directory
changes between deployments. Sourcing it twice gives the same result as
sourcing it once.

``runtimepath_order`` states the same ordering in Python.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from vimflavor.core.flavor.models import BOOTSTRAP_FILENAME

logger = logging.getLogger(__name__)

FLAVORS_DIRNAME = "flavors"
AFTER_DIRNAME = "after"

_HEADER = """\
" Generated by vim-flavor. Do not edit; it is rewritten on every deployment.
" Load it from your vimrc with:  runtime flavors/bootstrap.vim
"""

_BODY = r"""
let s:vimfiles_path = expand('<sfile>:p:h:h')

function! s:normalize(path)
  return substitute(fnamemodify(expand(a:path), ':p'), '[/\\]\+$', '', '')
endfunction

function! s:bootstrap()
  let flavors_path = s:vimfiles_path . '/flavors'
  let flavors_prefix = s:normalize(flavors_path) . '/'
  let flavor_paths = split(glob(flavors_path . '/*'), "\n")
  let flavor_paths = sort(filter(flavor_paths, 'isdirectory(v:val)'))
  let after_paths = reverse(map(copy(flavor_paths), 'v:val . "/after"'))

  let rtps = split(&runtimepath, '\\\@<!,')
  call filter(rtps, 'stridx(s:normalize(v:val) . "/", flavors_prefix) != 0')
  let normalized = map(copy(rtps), 's:normalize(v:val)')
  let base = index(normalized, s:normalize(s:vimfiles_path))
  let base_after = index(normalized, s:normalize(s:vimfiles_path . '/after'))

  call map(flavor_paths, 'escape(v:val, ",")')
  call map(after_paths, 'escape(v:val, ",")')
  if base_after < 0
    call extend(rtps, after_paths)
  else
    call extend(rtps, after_paths, base_after)
  endif
  call extend(rtps, flavor_paths, base + 1)

  let &runtimepath = join(rtps, ',')
endfunction

call s:bootstrap()
"""


def generate(deployed_names: Iterable[str] = ()) -> str:
    """Return the text of the bootstrap script.

    Args:
        deployed_names: Names deployed alongside this script. They are only
            listed in a comment; the script discovers flavors itself.
    """
    names = sorted(deployed_names)
    listing = f'" Flavors at generation time: {", ".join(names) or "(none)"}\n'
    return _HEADER + listing + _BODY


def write_bootstrap(flavors_path: Path, deployed_names: Iterable[str] = ()) -> Path:
    """Write the bootstrap script into *flavors_path* and return its path."""
    path = flavors_path / BOOTSTRAP_FILENAME
    path.write_text(generate(deployed_names), encoding="utf-8")
    logger.debug("Wrote %s", path)
    return path


def runtimepath_order(
    vimfiles_path: Path,
    deployed_names: Iterable[str],
    runtimepath: list[str] | None = None,
) -> list[str]:
    """Compute the runtimepath the bootstrap script produces.

    Args:
        vimfiles_path: The deployment target (``~/.vim``).
        deployed_names: Directory names under ``<vimfiles>/flavors``.
        runtimepath: Entries before bootstrapping. Defaults to
            ``[<vimfiles>, <vimfiles>/after]``.

    Returns:
        The new runtimepath entries, in order.
    """
    base = str(vimfiles_path)
    base_after = f"{base}/{AFTER_DIRNAME}"
    flavors_prefix = f"{base}/{FLAVORS_DIRNAME}/"
    if runtimepath is None:
        runtimepath = [base, base_after]

    flavor_paths = [f"{flavors_prefix}{name}" for name in sorted(deployed_names)]
    after_paths = [f"{p}/{AFTER_DIRNAME}" for p in reversed(flavor_paths)]

    rtps = [p for p in runtimepath if not p.startswith(flavors_prefix)]
    if base_after in rtps:
        i = rtps.index(base_after)
        rtps[i:i] = after_paths
    else:
        rtps.extend(after_paths)
    i = rtps.index(base) + 1 if base in rtps else 0
    rtps[i:i] = flavor_paths
    return rtps
