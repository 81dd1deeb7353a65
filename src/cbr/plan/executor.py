"""Executor for rename plans."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Sequence

from cbr.errors import ExternalProcessError, FilesystemOpError
from cbr.trash import DEFAULT_CHUNK_SIZE

from .models import Delete, DirectRename, ExecutionPlan, Outcome, RenameEntry, StagedRename

LOGGER = logging.getLogger(__name__)

TrashCallback = Callable[[Sequence[Path]], None]


class OperationExecutor:
    """Apply an execution plan: phase one, trash flush, then phase two.

    Execution stops at the first failure. Operations that already ran are not
    rolled back.
    """

    def __init__(
        self,
        *,
        root: Path,
        force: bool = False,
        trash: TrashCallback | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        if chunk_size < 1:
            raise ValueError("Chunk size must be positive.")
        self.root = root
        self.force = force
        self.trash = trash
        self.chunk_size = chunk_size

    def apply(self, plan: ExecutionPlan, dry_run: bool = False) -> list[Outcome]:
        """Apply the given plan.

        Args:
            plan: Plan computed by the planner.
            dry_run: When true, return the outcomes without touching the filesystem.

        Returns:
            list[Outcome]: Operations in the order they were applied.

        Raises:
            FilesystemOpError: If a rename or delete fails.
            ExternalProcessError: If a trash chunk fails or no trash program is set.
        """
        if dry_run:
            return self.preview(plan)

        trash = self.trash
        if plan.trash.names and trash is None:
            raise ExternalProcessError("Entries are marked for trash but no trash program is set.")

        outcomes: list[Outcome] = []
        # Originals moved to their temporary name whose final rename has not run yet.
        parked: dict[str, Outcome] = {}

        for entry in plan.phase_one:
            self._run_phase_one(entry, outcomes, parked)

        if trash is not None:
            for chunk in plan.trash.chunks(self.chunk_size):
                try:
                    trash([self.root / name for name in chunk])
                except ExternalProcessError as exc:
                    raise ExternalProcessError(
                        str(exc),
                        returncode=exc.returncode,
                        completed=_progress(outcomes, parked),
                    ) from exc
                LOGGER.info("Trashed %d file(s)", len(chunk))
                outcomes.extend(Outcome(operation="trashed", source=name) for name in chunk)

        for entry in plan.phase_two:
            action = entry.action
            if not isinstance(action, StagedRename):
                raise ValueError(f"Unexpected phase two action: {action.kind}")
            self._rename(
                entry, self.root / action.temp_name, self.root / action.target, outcomes, parked
            )
            del parked[entry.original]
            outcomes.append(
                Outcome(operation="renamed", source=entry.original, destination=action.target)
            )

        return outcomes

    def preview(self, plan: ExecutionPlan) -> list[Outcome]:
        """Return the outcomes ``apply`` would report, without side effects."""
        outcomes: list[Outcome] = []
        for entry in plan.phase_one:
            if isinstance(entry.action, Delete):
                outcomes.append(Outcome(operation="removed", source=entry.original))
            elif isinstance(entry.action, DirectRename):
                outcomes.append(
                    Outcome(
                        operation="renamed", source=entry.original, destination=entry.action.target
                    )
                )
        outcomes.extend(Outcome(operation="trashed", source=name) for name in plan.trash.names)
        for entry in plan.phase_two:
            outcomes.append(
                Outcome(operation="renamed", source=entry.original, destination=entry.target)
            )
        return outcomes

    def _run_phase_one(
        self, entry: RenameEntry, outcomes: list[Outcome], parked: dict[str, Outcome]
    ) -> None:
        action = entry.action
        source = self.root / entry.original

        if isinstance(action, Delete):
            try:
                source.unlink()
            except OSError as exc:
                raise FilesystemOpError(source, None, exc, _progress(outcomes, parked)) from exc
            LOGGER.info("Removed %s", source)
            outcomes.append(Outcome(operation="removed", source=entry.original))
        elif isinstance(action, DirectRename):
            self._rename(entry, source, self.root / action.target, outcomes, parked)
            outcomes.append(
                Outcome(operation="renamed", source=entry.original, destination=action.target)
            )
        elif isinstance(action, StagedRename):
            self._rename(entry, source, self.root / action.temp_name, outcomes, parked)
            parked[entry.original] = Outcome(
                operation="parked", source=entry.original, destination=action.temp_name
            )
        else:
            raise ValueError(f"Unexpected phase one action: {action.kind}")

    def _rename(
        self,
        entry: RenameEntry,
        source: Path,
        destination: Path,
        outcomes: list[Outcome],
        parked: dict[str, Outcome],
    ) -> None:
        try:
            if self.force:
                source.replace(destination)
            else:
                source.rename(destination)
        except OSError as exc:
            staged_as = None
            if isinstance(entry.action, StagedRename):
                staged_as = self.root / entry.action.temp_name
            raise FilesystemOpError(
                self.root / entry.original,
                self.root / entry.target,
                exc,
                _progress(outcomes, parked),
                staged_as=staged_as,
            ) from exc
        LOGGER.info("Renamed %s -> %s", source, destination)


def _progress(outcomes: list[Outcome], parked: dict[str, Outcome]) -> list[Outcome]:
    """Return what a failed run leaves behind: applied outcomes, then parked entries."""
    return [*outcomes, *parked.values()]


__all__ = ["OperationExecutor", "TrashCallback"]
