"""
Folder synchronization module.

Provides functionality for:
- Recursive directory scanning
- Synchronization planning
- Plan execution
"""

from dirsyncer.core.folder.scanner import (
    FolderScanner,
    ScanOptions,
    ScanResult,
)
from dirsyncer.core.folder.planner import (
    PlanBuilder,
)
from dirsyncer.core.folder.sync import (
    FolderSync,
    SyncEvents,
)

__all__ = [
    # Scanner
    'FolderScanner',
    'ScanOptions',
    'ScanResult',
    # Planning
    'PlanBuilder',
    # Sync
    'FolderSync',
    'SyncEvents',
]
