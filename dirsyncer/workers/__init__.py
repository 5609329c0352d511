"""
Background workers for non-blocking operations.

Provides QThread-based workers for:
- Synchronization planning
- Synchronization

All workers use Qt signals for thread-safe communication
with the receiving thread.
"""

from dirsyncer.workers.base_worker import (
    BaseWorker,
    WorkerSignals,
    WorkerState,
    WorkerThread,
)
from dirsyncer.workers.sync_worker import (
    SyncWorker,
    SyncPlanWorker,
)

__all__ = [
    # Base
    'BaseWorker',
    'WorkerSignals',
    'WorkerState',
    'WorkerThread',
    # Sync
    'SyncWorker',
    'SyncPlanWorker',
]
