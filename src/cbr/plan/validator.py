"""Structural validation of an edited name list."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Sequence

from cbr.errors import (
    DuplicateTargetError,
    EmptyTargetError,
    MismatchedCountError,
    TargetAlreadyExistsError,
)
from cbr.names import NameList


class EditValidator:
    """Reject edits that cannot be applied without losing data.

    Checks run in a fixed order and stop at the first violation: line count,
    empty lines, clashes with files outside the batch, then uniqueness of the
    targets that are not marked for deletion.
    """

    def __init__(
        self,
        *,
        delete_char: str,
        force: bool = False,
        root: Path = Path("."),
        exists: Callable[[Path], bool] = os.path.lexists,
    ) -> None:
        self.delete_char = delete_char
        self.force = force
        self.root = root
        self.exists = exists

    def validate(self, original: NameList, targets: Sequence[str]) -> NameList:
        """Validate ``targets`` against ``original`` and return them as a NameList.

        Args:
            original: Names before editing, in edit-file order.
            targets: Edited lines aligned with ``original``.

        Returns:
            NameList: The targets, in the same order.

        Raises:
            MismatchedCountError: If the line counts differ.
            EmptyTargetError: If an edited line is empty.
            TargetAlreadyExistsError: If a target clobbers an out-of-batch file.
            DuplicateTargetError: If two kept targets are equal.
        """
        if len(targets) != len(original):
            raise MismatchedCountError(expected=len(original), actual=len(targets))

        for index, target in enumerate(targets):
            if not target:
                raise EmptyTargetError(index + 1, original[index])
        target_list = NameList(targets)

        for name, target in zip(original, target_list):
            if self.is_deletion(target) or target == name:
                continue
            if original.contains(target):
                continue
            if not self.force and self.exists(self.root / target):
                raise TargetAlreadyExistsError(target)

        kept = NameList(target for target in target_list if not self.is_deletion(target))
        ordered = kept.sorted_view()
        for previous, current in zip(ordered, ordered[1:]):
            if previous == current:
                raise DuplicateTargetError(current)

        return target_list

    def is_deletion(self, target: str) -> bool:
        return target.startswith(self.delete_char)


__all__ = ["EditValidator"]
