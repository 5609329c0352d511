"""
Workers for folder synchronization operations.
"""

from __future__ import annotations

from typing import Optional, Sequence

from PyQt6.QtCore import QObject, pyqtSignal

from dirsyncer.workers.base_worker import BaseWorker
from dirsyncer.core.folder.planner import PlanBuilder
from dirsyncer.core.folder.sync import FolderSync
from dirsyncer.core.models import (
    ErrorOccurredEvent,
    FileSyncedEvent,
    SyncAction,
    SyncConfiguration,
    SyncPlan,
    SyncResult,
)


class SyncPlanWorker(BaseWorker):
    """
    Worker for creating a synchronization plan.

    Scans both roots and emits the plan through `finished`
    without executing anything.
    """

    def __init__(
        self,
        config: SyncConfiguration,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent=parent)
        self.config = config

    def do_work(self) -> SyncPlan:
        """Create sync plan."""
        self.report_status("Comparing folders...")
        plan = PlanBuilder().build_plan(self.config)
        self.check_cancelled()
        return plan


class SyncWorker(BaseWorker):
    """
    Worker for executing folder synchronization.

    Re-emits the executor's notifications as Qt signals, in the
    order the executor produces them.
    """

    # Emitted for each file synced
    file_synced = pyqtSignal(object, int)  # (SyncAction, index)

    # Emitted when a file fails (the run continues)
    sync_error = pyqtSignal(str)

    # Fraction of attempted files, 0.0 to 1.0
    progress_changed = pyqtSignal(float)

    def __init__(
        self,
        actions: SyncPlan | Sequence[SyncAction],
        config: SyncConfiguration,
        verify: Optional[bool] = None,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent=parent)
        self.actions = list(actions)
        self.config = config
        self.verify = verify

        self._sync = FolderSync(config)
        self._sync.events.add_file_synced_listener(self._on_file_synced)
        self._sync.events.add_error_listener(self._on_error)
        self._sync.events.add_progress_listener(self.progress_changed.emit)

    def do_work(self) -> SyncResult:
        """Execute synchronization."""
        self.check_cancelled()
        self.report_status("Starting synchronization...")

        return self._sync.execute(self.actions, verify=self.verify)

    def cancel(self) -> None:
        """Cancel synchronization before the next file."""
        super().cancel()
        self._sync.cancel()

    def _on_file_synced(self, event: FileSyncedEvent) -> None:
        self.file_synced.emit(event.action, event.index)

    def _on_error(self, event: ErrorOccurredEvent) -> None:
        self.sync_error.emit(event.message)
