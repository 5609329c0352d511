"""
Synchronization plan builder.

Diffs two directory trees by existence and modification time and
produces the ordered list of actions needed to bring the target up
to date. Planning never touches either tree.
"""

from __future__ import annotations

import logging
from typing import Optional

from dirsyncer.core.folder.scanner import FolderScanner, ScanOptions, ScanResult
from dirsyncer.core.models import (
    SyncAction,
    SyncConfiguration,
    SyncMode,
    SyncPlan,
    SyncType,
)


class PlanBuilder:
    """
    Builds synchronization plans.

    A file is scheduled when it is missing at the target (copy) or when
    the source copy is strictly newer (update). Equal or older sources
    are considered synchronized, which keeps repeated runs idempotent.
    """

    def __init__(self, scan_options: Optional[ScanOptions] = None):
        self.scanner = FolderScanner(scan_options)

    def build_plan(self, config: SyncConfiguration) -> SyncPlan:
        """
        Create a synchronization plan for a configuration.

        In dual mode the two directions are diffed independently and
        concatenated, source-to-target first. A file can only be strictly
        newer on one side, so at most one direction schedules it.

        Args:
            config: The run configuration

        Returns:
            SyncPlan that can be reviewed before execution

        Raises:
            FileNotFoundError: If either root does not exist
            NotADirectoryError: If either root is not a directory
        """
        source_scan = self.scanner.scan(config.source_root)
        target_scan = self.scanner.scan(config.target_root)

        actions = self._diff(config.source_root, config.target_root, source_scan, target_scan)

        if config.mode == SyncMode.DUAL:
            actions += self._diff(config.target_root, config.source_root, target_scan, source_scan)
        elif config.mode != SyncMode.ONE_WAY:
            raise ValueError(f"Invalid Mode `{config.mode}`")

        plan = SyncPlan(
            actions=actions,
            source_root=config.source_root,
            target_root=config.target_root,
            mode=config.mode,
        )
        logging.info(
            f"PlanBuilder - {config.mode.value} plan for {config.source_root} and "
            f"{config.target_root}: {plan.copy_count} copy, {plan.update_count} update"
        )
        return plan

    def build_direction(self, source_root: str, target_root: str) -> list[SyncAction]:
        """
        Diff a single direction, source to target.

        Returns:
            The actions in source scan order
        """
        return self._diff(
            source_root,
            target_root,
            self.scanner.scan(source_root),
            self.scanner.scan(target_root),
        )

    def _diff(
        self,
        source_root: str,
        target_root: str,
        source_scan: ScanResult,
        target_scan: ScanResult
    ) -> list[SyncAction]:
        """Create the actions for one direction from two scans."""
        actions: list[SyncAction] = []

        for rel_path, source_meta in source_scan.iter_files():
            target_meta = target_scan.get_metadata(rel_path)

            if target_meta is None:
                kind = SyncType.COPY
            elif source_meta.modified_ns > target_meta.modified_ns:
                kind = SyncType.UPDATE
            else:
                continue

            actions.append(SyncAction(
                source_root=str(source_root),
                target_root=str(target_root),
                relative_path=rel_path,
                kind=kind,
                source_metadata=source_meta,
            ))

        logging.debug(
            f"PlanBuilder - {source_root} > {target_root}: {len(actions)} actions"
        )
        return actions


def build_plan(config: SyncConfiguration) -> SyncPlan:
    """Convenience wrapper around PlanBuilder.build_plan."""
    return PlanBuilder().build_plan(config)
