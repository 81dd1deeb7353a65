"""Two-phase ordering for classified rename entries."""

from __future__ import annotations

from typing import Iterable

from .models import (
    Delete,
    DirectRename,
    ExecutionPlan,
    RenameEntry,
    StagedRename,
    Trash,
    TrashBatch,
)


class StagedRenamePlanner:
    """Order entries so no operation writes to a path another file still holds.

    Phase one vacates every batch name that changes: deletions, direct renames
    and the first half of each staged rename (original to temporary name).
    Trashed names are collected and flushed after phase one. Phase two moves
    each temporary name to its final target, which phase one has freed
    regardless of how the renames chain or cycle.
    """

    def build_plan(self, entries: Iterable[RenameEntry]) -> ExecutionPlan:
        """Produce the execution plan for ``entries``."""
        ordered = list(entries)
        phase_one: list[RenameEntry] = []
        phase_two: list[RenameEntry] = []
        trashed: list[str] = []

        for entry in ordered:
            action = entry.action
            if isinstance(action, Trash):
                trashed.append(entry.original)
            elif isinstance(action, (Delete, DirectRename)):
                phase_one.append(entry)
            elif isinstance(action, StagedRename):
                phase_one.append(entry)
                phase_two.append(entry)

        return ExecutionPlan(
            entries=ordered,
            phase_one=phase_one,
            trash=TrashBatch(names=trashed),
            phase_two=phase_two,
        )


__all__ = ["StagedRenamePlanner"]
