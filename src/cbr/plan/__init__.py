"""Rename plan computation and execution."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Sequence

from cbr.names import NameList

from .classifier import ActionClassifier, TempNameGenerator
from .executor import OperationExecutor, TrashCallback
from .models import (
    Action,
    Delete,
    DirectRename,
    ExecutionPlan,
    Outcome,
    RenameEntry,
    StagedRename,
    Trash,
    TrashBatch,
    Unchanged,
)
from .planner import StagedRenamePlanner
from .validator import EditValidator


def plan_edit(
    original: NameList,
    targets: Sequence[str],
    *,
    root: Path,
    delete_char: str = "#",
    force: bool = False,
    trash: bool = False,
    exists: Callable[[Path], bool] = os.path.lexists,
) -> ExecutionPlan:
    """Validate an edit, classify every entry and order the result in two phases.

    Nothing on disk changes; every validation error is raised from here.
    """
    validator = EditValidator(delete_char=delete_char, force=force, root=root, exists=exists)
    target_list = validator.validate(original, targets)
    classifier = ActionClassifier(
        delete_char=delete_char,
        trash=trash,
        temp_names=TempNameGenerator(root=root, exists=exists),
    )
    entries = classifier.classify(original, target_list)
    return StagedRenamePlanner().build_plan(entries)


__all__ = [
    "Action",
    "ActionClassifier",
    "Delete",
    "DirectRename",
    "EditValidator",
    "ExecutionPlan",
    "OperationExecutor",
    "Outcome",
    "RenameEntry",
    "StagedRename",
    "StagedRenamePlanner",
    "TempNameGenerator",
    "Trash",
    "TrashBatch",
    "TrashCallback",
    "Unchanged",
    "plan_edit",
]
