"""Per-entry action classification."""

from __future__ import annotations

import logging
import os
import secrets
from pathlib import Path
from typing import Callable, Iterable

from cbr.names import NameList

from .models import Action, Delete, DirectRename, RenameEntry, StagedRename, Trash, Unchanged

LOGGER = logging.getLogger(__name__)

TEMP_PREFIX = "cbr_transition_file"


class TempNameGenerator:
    """Hand out parking names that collide with nothing on disk or in the batch.

    Every candidate is probed against the live filesystem and a reserved set;
    names handed out are added to the reserved set so none is reused in a run.
    """

    def __init__(
        self,
        *,
        root: Path = Path("."),
        reserved: Iterable[str] = (),
        prefix: str = TEMP_PREFIX,
        exists: Callable[[Path], bool] = os.path.lexists,
        token: Callable[[], str] = lambda: secrets.token_hex(4),
    ) -> None:
        self.root = root
        self.prefix = prefix
        self.exists = exists
        self._token = token
        self._reserved = set(reserved)

    def reserve(self, names: Iterable[str]) -> None:
        self._reserved.update(names)

    def next_name(self) -> str:
        while True:
            candidate = f"{self.prefix}_{self._token()}"
            if candidate in self._reserved or self.exists(self.root / candidate):
                continue
            self._reserved.add(candidate)
            LOGGER.debug("Allocated temporary name %s", candidate)
            return candidate


class ActionClassifier:
    """Map each aligned (original, target) pair to an action.

    Classification is context-free: a target already held by another batch
    file is staged through a temporary name, everything else is renamed
    directly. Ordering is left to the planner.
    """

    def __init__(
        self,
        *,
        delete_char: str,
        trash: bool = False,
        temp_names: TempNameGenerator | None = None,
    ) -> None:
        self.delete_char = delete_char
        self.trash = trash
        self.temp_names = temp_names or TempNameGenerator()

    def classify(self, original: NameList, targets: NameList) -> list[RenameEntry]:
        """Return one classified entry per aligned pair, in original order."""
        if len(original) != len(targets):
            raise ValueError("Original and target lists must have the same length.")

        self.temp_names.reserve(original)
        self.temp_names.reserve(targets)

        entries = []
        for index, (name, target) in enumerate(zip(original, targets)):
            action = self._classify_one(name, target, original)
            LOGGER.debug("%s -> %s: %s", name, target, action.kind)
            entries.append(RenameEntry(index=index, original=name, target=target, action=action))
        return entries

    def _classify_one(self, name: str, target: str, original: NameList) -> Action:
        if target == name:
            return Unchanged()
        if target.startswith(self.delete_char):
            return Trash() if self.trash else Delete()
        if original.contains(target):
            return StagedRename(target=target, temp_name=self.temp_names.next_name())
        return DirectRename(target=target)


__all__ = ["ActionClassifier", "TEMP_PREFIX", "TempNameGenerator"]
