"""
Exceptions raised by the synchronization engine.
"""

from __future__ import annotations

from typing import Iterable


class SyncError(Exception):
    """Base class for synchronization errors."""
    pass


class MissingSourceFilesError(SyncError):
    """
    Raised before a run starts when planned source files no longer exist.

    Lists every missing path at once; nothing has been copied.
    """

    def __init__(self, missing_paths: Iterable[str]):
        self.missing_paths = tuple(missing_paths)
        lines = ["Unable to start the syncing process because the following files are missing:"]
        lines.extend(self.missing_paths)
        super().__init__("\n".join(lines))


class VerificationError(SyncError):
    """Raised when a copied file does not match its source byte for byte."""

    def __init__(self, source_path: str, target_path: str):
        self.source_path = source_path
        self.target_path = target_path
        super().__init__(f"Synced file `{target_path}` not equal to `{source_path}`")


class SyncCancelledError(SyncError):
    """Raised when a background operation is cancelled."""
    pass
