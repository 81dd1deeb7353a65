"""Rename plan data models."""

from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class PlanModel(BaseModel):
    """Shared configuration for immutable plan values."""

    model_config = ConfigDict(frozen=True)


class Unchanged(PlanModel):
    """The entry keeps its name."""

    kind: Literal["unchanged"] = "unchanged"


class Delete(PlanModel):
    """The original file is removed."""

    kind: Literal["delete"] = "delete"


class Trash(PlanModel):
    """The original file is handed to the trash program."""

    kind: Literal["trash"] = "trash"


class DirectRename(PlanModel):
    """Rename to a name no other file in the batch currently holds.

    Attributes:
        target: Final name.
    """

    kind: Literal["direct_rename"] = "direct_rename"
    target: str


class StagedRename(PlanModel):
    """Rename through a temporary name because another batch file holds the target.

    Attributes:
        target: Final name.
        temp_name: Intermediate name used between the two phases.
    """

    kind: Literal["staged_rename"] = "staged_rename"
    target: str
    temp_name: str


Action = Annotated[
    Union[Unchanged, Delete, Trash, DirectRename, StagedRename],
    Field(discriminator="kind"),
]


class RenameEntry(PlanModel):
    """One aligned (original, target) pair and the action derived from it.

    Attributes:
        index: Position in both the original and the edited list.
        original: Name before the run.
        target: Edited line for this entry.
        action: Classified action.
    """

    index: int
    original: str
    target: str
    action: Action


class TrashBatch(PlanModel):
    """Names deferred to the trash program, in plan order."""

    names: List[str] = Field(default_factory=list)

    def chunks(self, size: int) -> list[list[str]]:
        """Split the batch into consecutive groups of at most ``size`` names."""
        if size < 1:
            raise ValueError("Chunk size must be positive.")
        return [self.names[start : start + size] for start in range(0, len(self.names), size)]


class ExecutionPlan(PlanModel):
    """Two-phase ordering of the classified entries.

    Attributes:
        entries: Every classified entry in original order.
        phase_one: Deletes, direct renames and staged first halves, in order.
        trash: Names to trash after phase one.
        phase_two: Staged renames completed after phase one and the trash flush.
    """

    entries: List[RenameEntry] = Field(default_factory=list)
    phase_one: List[RenameEntry] = Field(default_factory=list)
    trash: TrashBatch = Field(default_factory=TrashBatch)
    phase_two: List[RenameEntry] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """Return True when the plan performs no operation."""
        return not (self.phase_one or self.trash.names or self.phase_two)


class Outcome(PlanModel):
    """A completed (or, in dry runs, predicted) user-visible operation.

    ``parked`` only appears in failure reports: the original sits under a
    temporary name because its second rename never ran.

    Attributes:
        operation: What happened to the file.
        source: Original name.
        destination: Final name for renames, temporary name for parked entries.
    """

    operation: Literal["renamed", "removed", "trashed", "parked"]
    source: str
    destination: Optional[str] = None


__all__ = [
    "Action",
    "Delete",
    "DirectRename",
    "ExecutionPlan",
    "Outcome",
    "PlanModel",
    "RenameEntry",
    "StagedRename",
    "Trash",
    "TrashBatch",
    "Unchanged",
]
