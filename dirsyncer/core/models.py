"""
Core data models for directory synchronization.

This module defines the data structures shared by the scanner,
the plan builder and the sync executor:
- Enumerations for sync mode, action kind and action state
- File metadata gathered while scanning
- Sync actions and plans
- Run configuration
- Notification events and run results

All models are UI-agnostic and can be used with any frontend.
Actions and configurations are immutable once created.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, auto
from pathlib import Path
from typing import Iterator, Optional


# =============================================================================
# Enumerations
# =============================================================================

class SyncMode(Enum):
    """Direction of a synchronization run."""
    ONE_WAY = "one-way"  # Source pushes to target only
    DUAL = "dual"        # Both roots act as source and target

    @classmethod
    def from_string(cls, value: str) -> 'SyncMode':
        """
        Parse a mode name.

        Accepts the enum value, the enum name and the legacy aliases
        'oneway' and 'source-to-target'.
        """
        normalized = value.strip().lower().replace('_', '-')
        aliases = {
            'oneway': cls.ONE_WAY,
            'source-to-target': cls.ONE_WAY,
            'sourcetotarget': cls.ONE_WAY,
        }
        if normalized in aliases:
            return aliases[normalized]
        for mode in cls:
            if mode.value == normalized:
                return mode
        raise ValueError(f"Invalid sync mode `{value}`")


class SyncType(Enum):
    """Kind of a planned file operation."""
    COPY = auto()    # File absent at target
    UPDATE = auto()  # File present at target but strictly older


class ActionState(Enum):
    """Execution state of a single action."""
    PENDING = auto()
    COPYING = auto()
    VERIFYING = auto()
    SYNCED = auto()
    FAILED = auto()

    @property
    def is_terminal(self) -> bool:
        return self in (ActionState.SYNCED, ActionState.FAILED)


# =============================================================================
# Scan Models
# =============================================================================

@dataclass(frozen=True)
class FileMetadata:
    """Metadata for a regular file found while scanning."""
    path: Path
    size: int
    modified_ns: int  # Nanoseconds since the epoch

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def modified_time(self) -> datetime:
        """Modification time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.modified_ns / 1_000_000_000, tz=timezone.utc)

    @property
    def size_formatted(self) -> str:
        """Get human-readable file size."""
        size = float(self.size)
        for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
            if size < 1024:
                return f"{size:.1f} {unit}"
            size /= 1024
        return f"{size:.1f} PB"


# =============================================================================
# Sync Models
# =============================================================================

@dataclass(frozen=True)
class SyncAction:
    """
    One planned file operation.

    The kind is decided once by the plan builder and never recomputed,
    so a plan is a snapshot of both trees at planning time.
    """
    source_root: str
    target_root: str
    relative_path: str
    kind: SyncType
    source_metadata: Optional[FileMetadata] = field(default=None, compare=False)

    @property
    def source_path(self) -> str:
        return os.path.join(self.source_root, self.relative_path)

    @property
    def target_path(self) -> str:
        return os.path.join(self.target_root, self.relative_path)

    @property
    def name(self) -> str:
        return Path(self.relative_path).name

    @property
    def is_copy(self) -> bool:
        return self.kind == SyncType.COPY

    @property
    def is_update(self) -> bool:
        return self.kind == SyncType.UPDATE


@dataclass(frozen=True)
class SyncPlan:
    """
    An ordered, read-only sequence of sync actions.

    In dual mode every action of the source-to-target direction
    precedes every action of the target-to-source direction.
    """
    actions: tuple[SyncAction, ...]
    source_root: str
    target_root: str
    mode: SyncMode = SyncMode.ONE_WAY

    def __post_init__(self):
        object.__setattr__(self, 'actions', tuple(self.actions))

    def __iter__(self) -> Iterator[SyncAction]:
        return iter(self.actions)

    def __len__(self) -> int:
        return len(self.actions)

    def __getitem__(self, index: int) -> SyncAction:
        return self.actions[index]

    @property
    def total_items(self) -> int:
        return len(self.actions)

    @property
    def is_empty(self) -> bool:
        return not self.actions

    @property
    def copy_count(self) -> int:
        return sum(1 for action in self.actions if action.is_copy)

    @property
    def update_count(self) -> int:
        return sum(1 for action in self.actions if action.is_update)

    @property
    def total_bytes(self) -> int:
        """Total bytes to be copied, as scanned at planning time."""
        return sum(
            action.source_metadata.size
            for action in self.actions
            if action.source_metadata is not None
        )

    def iter_by_kind(self, kind: SyncType) -> Iterator[SyncAction]:
        """Iterate over actions of the given kind."""
        for action in self.actions:
            if action.kind == kind:
                yield action


@dataclass(frozen=True)
class SyncConfiguration:
    """Settings for a single synchronization run."""
    source_root: str
    target_root: str
    mode: SyncMode = SyncMode.ONE_WAY
    verify_after_copy: bool = False

    # Pause between actions, in seconds
    throttle_delay: float = 0.001
    buffer_size: int = 65536

    def __post_init__(self) -> None:
        if not isinstance(self.mode, SyncMode):
            raise ValueError(f"Invalid Mode `{self.mode}`")
        if self.throttle_delay < 0:
            raise ValueError("throttle_delay must not be negative")
        if self.buffer_size <= 0:
            raise ValueError("buffer_size must be positive")


# =============================================================================
# Event and Result Models
# =============================================================================

@dataclass(frozen=True)
class FileSyncedEvent:
    """Emitted after an action completed successfully."""
    action: SyncAction
    index: int


@dataclass(frozen=True)
class ErrorOccurredEvent:
    """Emitted when an action failed; the run continues."""
    message: str
    action: Optional[SyncAction] = None
    index: Optional[int] = None


@dataclass
class ActionOutcome:
    """Final state of one executed action."""
    action: SyncAction
    index: int
    state: ActionState = ActionState.PENDING
    error: Optional[str] = None
    bytes_copied: int = 0

    @property
    def succeeded(self) -> bool:
        return self.state == ActionState.SYNCED


@dataclass
class SyncResult:
    """Result of a synchronization run."""
    total_items: int
    outcomes: list[ActionOutcome] = field(default_factory=list)
    cancelled: bool = False
    duration: float = 0.0

    @property
    def items_synced(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.succeeded)

    @property
    def items_failed(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.state == ActionState.FAILED)

    @property
    def items_attempted(self) -> int:
        return len(self.outcomes)

    @property
    def bytes_copied(self) -> int:
        return sum(outcome.bytes_copied for outcome in self.outcomes)

    @property
    def errors(self) -> list[str]:
        return [outcome.error for outcome in self.outcomes if outcome.error]

    @property
    def has_errors(self) -> bool:
        return self.items_failed > 0

    @property
    def success(self) -> bool:
        return not self.has_errors and not self.cancelled

