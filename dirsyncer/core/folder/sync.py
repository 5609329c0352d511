"""
Folder synchronization engine.

Executes synchronization plans with:
- Upfront check for vanished source files
- Sequential copy, timestamp propagation and optional verification
- Per-file error isolation
- File-synced, error and progress notifications
- Cooperative cancellation between files
"""

from __future__ import annotations

import logging
import os
import time
from typing import Callable, Optional, Sequence

from dirsyncer.core.exceptions import MissingSourceFilesError, VerificationError
from dirsyncer.core.folder.planner import PlanBuilder
from dirsyncer.core.models import (
    ActionOutcome,
    ActionState,
    ErrorOccurredEvent,
    FileSyncedEvent,
    SyncAction,
    SyncConfiguration,
    SyncPlan,
    SyncResult,
)
from dirsyncer.services.file_io import FileIOService


FileSyncedListener = Callable[[FileSyncedEvent], None]
ErrorListener = Callable[[ErrorOccurredEvent], None]
ProgressListener = Callable[[float], None]


class SyncEvents:
    """
    Observer registry for the three notification streams.

    Any number of listeners may be registered, including none.
    A listener that raises is logged and skipped; it never affects
    the run that emitted the notification.
    """

    def __init__(self):
        self._file_synced: list[FileSyncedListener] = []
        self._error: list[ErrorListener] = []
        self._progress: list[ProgressListener] = []

    def add_file_synced_listener(self, callback: FileSyncedListener) -> None:
        self._file_synced.append(callback)

    def remove_file_synced_listener(self, callback: FileSyncedListener) -> None:
        if callback in self._file_synced:
            self._file_synced.remove(callback)

    def add_error_listener(self, callback: ErrorListener) -> None:
        self._error.append(callback)

    def remove_error_listener(self, callback: ErrorListener) -> None:
        if callback in self._error:
            self._error.remove(callback)

    def add_progress_listener(self, callback: ProgressListener) -> None:
        self._progress.append(callback)

    def remove_progress_listener(self, callback: ProgressListener) -> None:
        if callback in self._progress:
            self._progress.remove(callback)

    def file_synced(self, action: SyncAction, index: int) -> None:
        self._notify(self._file_synced, FileSyncedEvent(action=action, index=index))

    def error_occurred(
        self,
        message: str,
        action: Optional[SyncAction] = None,
        index: Optional[int] = None
    ) -> None:
        self._notify(self._error, ErrorOccurredEvent(message=message, action=action, index=index))

    def progress_changed(self, value: float) -> None:
        self._notify(self._progress, value)

    @staticmethod
    def _notify(listeners: list, payload) -> None:
        # Copy so listeners may unregister themselves while being notified
        for callback in list(listeners):
            try:
                callback(payload)
            except Exception:
                logging.exception(f"SyncEvents - Listener {callback!r} failed")


class FolderSync:
    """
    Executes synchronization plans.

    Actions run one at a time in plan order. A failing action is
    reported through the error notification and the run moves on;
    only missing source files detected before the first action
    abort the whole run.

    Usage:
        sync = FolderSync(config)
        sync.events.add_error_listener(print)
        plan = sync.create_plan()
        result = sync.execute(plan)
    """

    def __init__(
        self,
        config: SyncConfiguration,
        events: Optional[SyncEvents] = None,
        plan_builder: Optional[PlanBuilder] = None
    ):
        self.config = config
        self.events = events or SyncEvents()
        self.plan_builder = plan_builder or PlanBuilder()
        self.file_io = FileIOService(buffer_size=config.buffer_size)
        self._cancelled = False

    def create_plan(self) -> SyncPlan:
        """
        Create a synchronization plan for the configured roots.

        Returns a SyncPlan that can be reviewed before execution.
        """
        return self.plan_builder.build_plan(self.config)

    def execute(
        self,
        actions: SyncPlan | Sequence[SyncAction],
        verify: Optional[bool] = None
    ) -> SyncResult:
        """
        Execute a synchronization plan.

        Args:
            actions: The plan, or any sequence of actions taken from one
            verify: Compare each copy with its source; defaults to the
                configuration's verify_after_copy

        Returns:
            SyncResult with the outcome of every attempted action

        Raises:
            MissingSourceFilesError: If any source file no longer exists.
                Raised before anything is copied or notified.
        """
        actions = list(actions)
        if verify is None:
            verify = self.config.verify_after_copy

        missing = [action.source_path for action in actions if not os.path.isfile(action.source_path)]
        if missing:
            logging.error(f"FolderSync - {len(missing)} source files are missing, nothing synced")
            raise MissingSourceFilesError(missing)

        start_time = time.time()

        total = len(actions)
        result = SyncResult(total_items=total)

        logging.info(f"FolderSync - Syncing {total} files (verify={verify})")

        self.events.progress_changed(0.0 if total else 1.0)

        for i, action in enumerate(actions):
            if self._cancelled:
                logging.info(f"FolderSync - Cancelled after {i} of {total} files")
                result.cancelled = True
                break

            if i > 0 and self.config.throttle_delay:
                time.sleep(self.config.throttle_delay)

            outcome = self.sync_file(action, verify=verify, index=i)
            result.outcomes.append(outcome)

            self.events.progress_changed((i + 1) / total)

        result.duration = time.time() - start_time
        logging.info(
            f"FolderSync - Finished: {result.items_synced} synced, "
            f"{result.items_failed} failed in {result.duration:.2f}s"
        )
        return result

    def sync_file(
        self,
        action: SyncAction,
        verify: Optional[bool] = None,
        index: int = 0
    ) -> ActionOutcome:
        """
        Copy one file and report the outcome.

        Errors are reported through the error notification and recorded
        in the returned outcome; they are never raised.
        """
        if verify is None:
            verify = self.config.verify_after_copy

        outcome = ActionOutcome(action=action, index=index)

        try:
            if not os.path.isfile(action.source_path):
                raise FileNotFoundError(
                    f"Unable to start the syncing process because the source "
                    f"`{action.source_path}` is missing"
                )

            self._set_state(outcome, ActionState.COPYING)
            copied = self.file_io.copy_file(action.source_path, action.target_path)
            outcome.bytes_copied = copied.bytes_copied

            if verify:
                self._set_state(outcome, ActionState.VERIFYING)
                if not self.file_io.files_equal(action.source_path, action.target_path):
                    raise VerificationError(action.source_path, action.target_path)

        except Exception as e:
            outcome.error = str(e)
            self._set_state(outcome, ActionState.FAILED)
            logging.error(f"FolderSync - Failed to sync {action.relative_path}: {e}")
            self.events.error_occurred(outcome.error, action, index)
            return outcome

        self._set_state(outcome, ActionState.SYNCED)
        self.events.file_synced(action, index)
        return outcome

    def sync(self) -> SyncResult:
        """
        Perform full sync: plan and execute.

        Convenience method for callers that need no confirmation step.
        """
        return self.execute(self.create_plan())

    def cancel(self) -> None:
        """
        Stop the run before its next file.

        The flag is never cleared; a run started after this call syncs
        nothing. Build a new FolderSync for the next run.
        """
        self._cancelled = True

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    @staticmethod
    def _set_state(outcome: ActionOutcome, state: ActionState) -> None:
        logging.debug(
            f"FolderSync - [{outcome.index}] {outcome.action.relative_path}: "
            f"{outcome.state.name} -> {state.name}"
        )
        outcome.state = state
