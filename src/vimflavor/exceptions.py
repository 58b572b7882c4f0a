"""vim-flavor exception hierarchy.

All public exceptions inherit from VimFlavorError, giving callers a single
base class to catch when they want to handle any vim-flavor failure
without swallowing unrelated errors. Every one of them is fatal for the
operation that raised it: nothing is retried or downgraded.
"""

from __future__ import annotations


class VimFlavorError(Exception):
    """Base exception for all vim-flavor errors."""


class ConstraintError(VimFlavorError, ValueError):
    """Raised when a version constraint expression cannot be parsed."""


class ResolutionError(VimFlavorError):
    """Raised when no published version satisfies a flavor's constraint.

    Attributes:
        flavor: Stable name of the flavor that failed to resolve.
        constraint: The constraint expression as declared.
        available: Versions that were considered, newest first.
    """

    def __init__(
        self, flavor: str, constraint: str, available: list[str] | None = None
    ) -> None:
        self.flavor = flavor
        self.constraint = constraint
        self.available = list(available or [])
        if self.available:
            detail = f"available: {', '.join(self.available)}"
        else:
            detail = "no version tags found"
        super().__init__(
            f"No version of {flavor!r} satisfies {constraint!r} ({detail})"
        )


class BackendError(VimFlavorError):
    """Raised when a git operation (clone, fetch, tag list, checkout) fails.

    Attributes:
        command: The command line that failed.
        stderr: Whatever the backend wrote to stderr, stripped.
    """

    def __init__(self, command: list[str], stderr: str = "") -> None:
        self.command = list(command)
        self.stderr = stderr.strip()
        message = f"Command failed: {' '.join(self.command)}"
        if self.stderr:
            message += f"\n{self.stderr}"
        super().__init__(message)


class FlavorfileError(VimFlavorError):
    """Raised when a VimFlavor file is malformed.

    Covers syntax errors, unknown options and duplicate declarations.
    The message names the file and line where possible.
    """


class FlavorfileNotFoundError(FlavorfileError):
    """Raised when an operation needs a VimFlavor file that does not exist."""


class LockfileError(VimFlavorError):
    """Raised when a VimFlavor.lock file exists but cannot be understood."""


class DeploymentError(VimFlavorError):
    """Raised for filesystem failures while deploying flavors.

    Partially written state under the flavors directory may remain; there
    is no rollback.
    """
