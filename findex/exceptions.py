"""
Custom exception hierarchy for findex.

Entry-level errors stay inside the scanner; everything else propagates to
the command line entry point, which prints a one-line diagnostic.
"""
from pathlib import Path
from typing import Optional


class FindexError(Exception):
    """Base exception for all findex errors."""
    pass


class ConfigurationError(FindexError):
    """Raised for unusable options: no roots, empty query, bad time window."""
    pass


class TransientEntryError(FindexError):
    """Raised when a single file or directory cannot be read during a walk."""

    def __init__(self, path: Path, cause: Optional[BaseException] = None):
        self.path = path
        self.cause = cause
        super().__init__(f"{path}: {cause}" if cause else str(path))


class RootUnavailableError(FindexError):
    """Raised when an index root does not exist or cannot be read."""

    def __init__(self, root: Path, reason: str):
        self.root = root
        self.reason = reason
        super().__init__(f"skip root {root}: {reason}")


class StoreError(FindexError):
    """Raised when the catalog cannot be opened, queried or committed."""
    pass


class CollaboratorUnavailable(FindexError):
    """Raised when an external helper program (e.g. fzf) is not installed."""
    pass
