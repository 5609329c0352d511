"""
DirSyncer - directory tree synchronization.

Compares two directory trees by existence and modification time and
copies new or newer files from one side to the other, optionally
verifying every copy byte for byte.
"""

from dirsyncer.core.exceptions import (
    MissingSourceFilesError,
    SyncCancelledError,
    SyncError,
    VerificationError,
)
from dirsyncer.core.folder.planner import PlanBuilder, build_plan
from dirsyncer.core.folder.sync import FolderSync, SyncEvents
from dirsyncer.core.models import (
    ActionOutcome,
    ActionState,
    ErrorOccurredEvent,
    FileSyncedEvent,
    SyncAction,
    SyncConfiguration,
    SyncMode,
    SyncPlan,
    SyncResult,
    SyncType,
)

__version__ = "1.0.0"

__all__ = [
    # Models
    'ActionOutcome',
    'ActionState',
    'ErrorOccurredEvent',
    'FileSyncedEvent',
    'SyncAction',
    'SyncConfiguration',
    'SyncMode',
    'SyncPlan',
    'SyncResult',
    'SyncType',
    # Engine
    'PlanBuilder',
    'build_plan',
    'FolderSync',
    'SyncEvents',
    # Errors
    'SyncError',
    'MissingSourceFilesError',
    'VerificationError',
    'SyncCancelledError',
]
