"""Tests for the sync data models."""

import os
from datetime import timezone
from pathlib import Path

import pytest

from dirsyncer.core.models import (
    ActionOutcome,
    ActionState,
    FileMetadata,
    SyncAction,
    SyncConfiguration,
    SyncMode,
    SyncPlan,
    SyncResult,
    SyncType,
)


def make_action(rel="a.txt", kind=SyncType.COPY, size=None):
    meta = FileMetadata(path=Path("src") / rel, size=size, modified_ns=0) if size is not None else None
    return SyncAction("src", "dst", rel, kind, source_metadata=meta)


class TestSyncMode:
    @pytest.mark.parametrize("value, expected", [
        ("one-way", SyncMode.ONE_WAY),
        ("ONE_WAY", SyncMode.ONE_WAY),
        ("oneway", SyncMode.ONE_WAY),
        ("SourceToTarget", SyncMode.ONE_WAY),
        ("source-to-target", SyncMode.ONE_WAY),
        ("dual", SyncMode.DUAL),
        (" Dual ", SyncMode.DUAL),
    ])
    def test_from_string(self, value, expected):
        assert SyncMode.from_string(value) is expected

    def test_from_string_rejects_unknown(self):
        with pytest.raises(ValueError, match="Invalid sync mode"):
            SyncMode.from_string("mirror")


class TestSyncAction:
    def test_paths_are_derived(self):
        action = make_action(os.path.join("b", "c.txt"))
        assert action.source_path == os.path.join("src", "b", "c.txt")
        assert action.target_path == os.path.join("dst", "b", "c.txt")
        assert action.name == "c.txt"

    def test_is_immutable(self):
        action = make_action()
        with pytest.raises(AttributeError):
            action.kind = SyncType.UPDATE

    def test_equality_ignores_metadata(self):
        assert make_action(size=3) == make_action(size=5)
        assert make_action(kind=SyncType.COPY) != make_action(kind=SyncType.UPDATE)


class TestSyncPlan:
    def test_counts(self):
        plan = SyncPlan(
            actions=[
                make_action("a", SyncType.COPY, size=10),
                make_action("b", SyncType.UPDATE, size=5),
                make_action("c", SyncType.COPY),
            ],
            source_root="src",
            target_root="dst",
        )
        assert len(plan) == plan.total_items == 3
        assert plan.copy_count == 2
        assert plan.update_count == 1
        assert plan.total_bytes == 15
        assert [a.relative_path for a in plan.iter_by_kind(SyncType.COPY)] == ["a", "c"]
        assert not plan.is_empty
        assert plan[1].relative_path == "b"

    def test_empty(self):
        plan = SyncPlan(actions=[], source_root="src", target_root="dst")
        assert plan.is_empty
        assert list(plan) == []

    def test_is_read_only(self):
        actions = [make_action("a")]
        plan = SyncPlan(actions=actions, source_root="src", target_root="dst")

        actions.append(make_action("b"))

        assert plan.actions == (make_action("a"),)
        with pytest.raises(AttributeError):
            plan.actions = ()
        with pytest.raises(AttributeError):
            plan.actions.append(make_action("c"))


class TestSyncConfiguration:
    def test_defaults(self):
        config = SyncConfiguration("a", "b")
        assert config.mode is SyncMode.ONE_WAY
        assert config.verify_after_copy is False

    def test_rejects_invalid_mode(self):
        with pytest.raises(ValueError, match="Invalid Mode"):
            SyncConfiguration("a", "b", mode="dual")

    def test_rejects_negative_throttle(self):
        with pytest.raises(ValueError):
            SyncConfiguration("a", "b", throttle_delay=-1)

    def test_rejects_zero_buffer(self):
        with pytest.raises(ValueError):
            SyncConfiguration("a", "b", buffer_size=0)


class TestFileMetadata:
    def test_modified_time_is_utc(self):
        meta = FileMetadata(path=Path("x"), size=1, modified_ns=1_704_067_200 * 10**9)
        assert meta.modified_time.tzinfo is timezone.utc
        assert meta.modified_time.year == 2024

    def test_size_formatted(self):
        assert FileMetadata(path=Path("x"), size=2048, modified_ns=0).size_formatted == "2.0 KB"


class TestSyncResult:
    def test_aggregates(self):
        ok = ActionOutcome(make_action("a"), 0, ActionState.SYNCED, bytes_copied=4)
        bad = ActionOutcome(make_action("b"), 1, ActionState.FAILED, error="boom")
        result = SyncResult(total_items=2, outcomes=[ok, bad])

        assert result.items_synced == 1
        assert result.items_failed == 1
        assert result.items_attempted == 2
        assert result.bytes_copied == 4
        assert result.errors == ["boom"]
        assert result.has_errors
        assert not result.success

    def test_cancelled_is_not_success(self):
        assert not SyncResult(total_items=1, cancelled=True).success

    def test_terminal_states(self):
        assert ActionState.SYNCED.is_terminal
        assert ActionState.FAILED.is_terminal
        assert not ActionState.COPYING.is_terminal
