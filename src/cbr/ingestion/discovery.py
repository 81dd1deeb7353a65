"""Collect the names a run operates on."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Iterable

from cbr.errors import InputNamingViolationError, MissingInputError
from cbr.names import NameList

LOGGER = logging.getLogger(__name__)


class DirectoryScanner:
    """List the regular files and symbolic links of a single directory."""

    def __init__(self, *, delete_char: str) -> None:
        self.delete_char = delete_char

    def scan(self, root: Path) -> NameList:
        """Return the sorted names found directly under ``root``.

        Raises:
            InputNamingViolationError: If a name starts with the deletion marker.
        """
        names = NameList()
        with os.scandir(root) as entries:
            for entry in entries:
                if not (entry.is_symlink() or entry.is_file(follow_symlinks=False)):
                    continue
                check_input_name(entry.name, self.delete_char)
                names.add(entry.name)
        LOGGER.debug("Discovered %d entries under %s", len(names), root)
        return names.sorted()


def check_input_name(name: str, delete_char: str) -> None:
    """Reject input names that the edited file could not express."""
    if name.startswith(delete_char):
        raise InputNamingViolationError(name, delete_char)


def collect_inputs(
    files: Iterable[str],
    *,
    root: Path,
    delete_char: str,
    exists: Callable[[Path], bool] = os.path.lexists,
) -> NameList:
    """Validate explicitly requested names and return them sorted and de-duplicated.

    Args:
        files: Names given on the command line, relative to ``root`` unless absolute.
        root: Directory the names are resolved against.
        delete_char: Deletion marker the names may not start with.
        exists: Existence probe; symbolic links are not followed by default.

    Raises:
        MissingInputError: If a requested name does not exist.
        InputNamingViolationError: If a name starts with the deletion marker.
    """
    requested = list(files)
    if "" in requested:
        raise MissingInputError("")
    names = NameList(requested).unique()
    for name in names:
        if not exists(root / name):
            raise MissingInputError(name)
        check_input_name(name, delete_char)
    return names.sorted()


__all__ = ["DirectoryScanner", "check_input_name", "collect_inputs"]
