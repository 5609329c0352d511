"""
File I/O service for copying and comparing files.

Handles:
- Chunked copies with timestamp propagation
- Chunked byte-for-byte comparison with bounded memory use
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


# Verification reads this much from each file at a time
VERIFY_CHUNK_SIZE = 4096 * 1024


@dataclass
class CopyResult:
    """Result of a file copy."""
    bytes_copied: int
    source_mtime_ns: int
    source_atime_ns: int


class FileIOService:
    """Service for file copy and comparison operations."""

    def __init__(
        self,
        buffer_size: int = 65536,
        verify_chunk_size: int = VERIFY_CHUNK_SIZE
    ):
        self.buffer_size = buffer_size
        self.verify_chunk_size = verify_chunk_size

    def copy_file(
        self,
        source: Path | str,
        destination: Path | str,
        preserve_timestamps: bool = True
    ) -> CopyResult:
        """
        Copy a file's full content, replacing the destination.

        Missing parent directories of the destination are created.
        The source timestamps are captured before the copy starts and
        applied to the destination afterwards.

        Args:
            source: File to read
            destination: File to (over)write
            preserve_timestamps: Apply the source atime/mtime to the destination

        Returns:
            CopyResult with bytes copied and the captured source times
        """
        source, destination = Path(source), Path(destination)

        destination.parent.mkdir(parents=True, exist_ok=True)

        source_stat = source.stat()
        bytes_copied = 0

        with open(source, 'rb') as src:
            with open(destination, 'wb') as dst:
                while chunk := src.read(self.buffer_size):
                    dst.write(chunk)
                    bytes_copied += len(chunk)

        if preserve_timestamps:
            os.utime(destination, ns=(source_stat.st_atime_ns, source_stat.st_mtime_ns))

        return CopyResult(
            bytes_copied=bytes_copied,
            source_mtime_ns=source_stat.st_mtime_ns,
            source_atime_ns=source_stat.st_atime_ns,
        )

    def compare_files_binary(
        self,
        path1: Path | str,
        path2: Path | str
    ) -> tuple[bool, Optional[int]]:
        """
        Compare two files byte-by-byte.

        The same path on both sides is equal without reading anything.

        Returns:
            Tuple of (are_identical, first_difference_offset)
        """
        if _same_path(path1, path2):
            return True, None

        offset = 0
        with open(path1, 'rb') as f1, open(path2, 'rb') as f2:
            # Quick size check
            if os.fstat(f1.fileno()).st_size != os.fstat(f2.fileno()).st_size:
                return False, 0

            while True:
                chunk1 = f1.read(self.verify_chunk_size)
                chunk2 = f2.read(self.verify_chunk_size)

                if chunk1 != chunk2:
                    # Find exact offset
                    for i, (b1, b2) in enumerate(zip(chunk1, chunk2)):
                        if b1 != b2:
                            return False, offset + i
                    # Different lengths
                    return False, offset + min(len(chunk1), len(chunk2))

                if not chunk1:  # EOF
                    break

                offset += len(chunk1)

        return True, None

    def files_equal(self, path1: Path | str, path2: Path | str) -> bool:
        """Check whether two files have identical content."""
        identical, _ = self.compare_files_binary(path1, path2)
        return identical


def _same_path(path1: Path | str, path2: Path | str) -> bool:
    return os.path.normcase(os.path.abspath(path1)) == os.path.normcase(os.path.abspath(path2))
