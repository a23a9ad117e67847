"""Internal fault types for Prism.

Policy and structural outcomes are never raised; they travel as reason codes
inside a Decision. These exceptions cover the opaque failures that must end a
run without a verdict.
"""

from __future__ import annotations


class PrismError(RuntimeError):
    """Root of internal faults that abort a gate run fail-closed."""


class RegistryError(PrismError, ValueError):
    """The action surface registry is unreadable or malformed."""


class DeclarationLoadError(PrismError):
    """The declaration document could not be read or decoded as JSON."""


class GitCommandError(PrismError):
    """A required (non best-effort) git command failed."""

    def __init__(self, command: list[str], message: str):
        super().__init__(message)
        self.command = tuple(command)


class LockSealError(PrismError):
    """The bootstrap lock could not be sealed for the given decision."""
