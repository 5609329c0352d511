"""
Directory scanner for synchronization planning.

Provides tolerant, deterministic directory traversal with:
- Recursive scanning of regular files
- Sorted ordering for reproducible plans
- Error resilience (unreadable entries are skipped and recorded)
"""

from __future__ import annotations

import logging
import os
import stat
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator, Optional

from dirsyncer.core.models import FileMetadata


@dataclass
class ScanOptions:
    """Options for directory scanning."""
    follow_symlinks: bool = False  # Descend into symlinked directories

    # Error handling
    ignore_permission_errors: bool = True


@dataclass
class ScanProgress:
    """Progress information for scanning."""
    current_path: str
    files_found: int
    errors: int


@dataclass
class ScanResult:
    """Result of a directory scan."""
    root_path: Path
    files: dict[str, FileMetadata]  # Relative path -> metadata
    errors: list[tuple[str, str]] = field(default_factory=list)  # (path, error message)
    scan_time: float = 0.0

    @property
    def file_count(self) -> int:
        return len(self.files)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def total_size(self) -> int:
        return sum(metadata.size for metadata in self.files.values())

    def __contains__(self, relative_path: str) -> bool:
        return relative_path in self.files

    def get_metadata(self, relative_path: str) -> Optional[FileMetadata]:
        """Get metadata for a path."""
        return self.files.get(relative_path)

    def iter_files(self) -> Iterator[tuple[str, FileMetadata]]:
        """Iterate over all files in scan order."""
        yield from self.files.items()


class FolderScanner:
    """
    Scans a directory tree for regular files.

    Directories are not recorded as entities, only the files below them.
    Hidden files are included. A subtree that cannot be read is skipped
    without aborting the walk.
    """

    def __init__(self, options: Optional[ScanOptions] = None):
        self.options = options or ScanOptions()

    def scan(
        self,
        root_path: Path | str,
        progress_callback: Optional[Callable[[ScanProgress], None]] = None
    ) -> ScanResult:
        """
        Scan a directory tree.

        Args:
            root_path: Root directory to scan
            progress_callback: Called once per visited directory

        Returns:
            ScanResult with all regular files, keyed by relative path

        Raises:
            FileNotFoundError: If the root does not exist
            NotADirectoryError: If the root is not a directory
        """
        start_time = time.time()

        root = Path(root_path)

        if not root.exists():
            logging.error(f"FolderScanner - Root path not found: {root}")
            raise FileNotFoundError(f"Directory not found: {root}")

        if not root.is_dir():
            logging.error(f"FolderScanner - Root path is not a directory: {root}")
            raise NotADirectoryError(f"Not a directory: {root}")

        files: dict[str, FileMetadata] = {}
        errors: list[tuple[str, str]] = []

        def on_walk_error(error: OSError):
            if not self.options.ignore_permission_errors:
                raise error
            rel_path = self._relative(error.filename, root) if error.filename else "unknown"
            errors.append((rel_path, f"Access error: {error.strerror}"))
            logging.warning(f"FolderScanner - Walk error at {rel_path}: {error}")

        for dirpath, dirnames, filenames in os.walk(
            root,
            topdown=True,
            followlinks=self.options.follow_symlinks,
            onerror=on_walk_error
        ):
            current_path = Path(dirpath)

            # Sort in place so the walk itself is deterministic
            dirnames.sort()
            filenames.sort()

            for filename in filenames:
                file_path = current_path / filename
                rel_path = os.path.relpath(file_path, root)

                try:
                    metadata = self._get_metadata(file_path)
                except OSError as e:
                    if not self.options.ignore_permission_errors:
                        raise
                    errors.append((rel_path, str(e)))
                    logging.warning(f"FolderScanner - Error processing file {rel_path}: {e}")
                    continue

                if metadata is not None:
                    files[rel_path] = metadata

            if progress_callback:
                progress_callback(ScanProgress(
                    current_path=os.path.relpath(current_path, root),
                    files_found=len(files),
                    errors=len(errors),
                ))

        scan_time = time.time() - start_time
        logging.debug(
            f"FolderScanner - Scanned {root}: {len(files)} files, "
            f"{len(errors)} errors in {scan_time:.3f}s"
        )

        return ScanResult(
            root_path=root,
            files=files,
            errors=errors,
            scan_time=scan_time,
        )

    @staticmethod
    def _relative(path: str, root: Path) -> str:
        try:
            return os.path.relpath(path, root)
        except ValueError:
            return str(path)

    def _get_metadata(self, path: Path) -> Optional[FileMetadata]:
        """
        Get metadata for a regular file.

        Symlinks are followed; anything that is not a regular file once
        resolved (directories, sockets, broken links) yields None.
        """
        try:
            stat_result = path.stat()
        except FileNotFoundError:
            # Broken symlink, or the file vanished mid-walk
            logging.debug(f"FolderScanner - Skipping unresolvable entry {path}")
            return None

        if not stat.S_ISREG(stat_result.st_mode):
            return None

        return FileMetadata(
            path=path,
            size=stat_result.st_size,
            modified_ns=stat_result.st_mtime_ns,
        )
