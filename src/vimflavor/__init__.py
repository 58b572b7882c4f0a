"""vim-flavor: A version-locking plugin manager for Vim."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
