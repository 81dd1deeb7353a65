"""External trash program invocation."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Sequence

from cbr.errors import ExternalProcessError

LOGGER = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 197


class TrashInvoker:
    """Run ``program *arguments *paths`` and fail on a non-zero exit status."""

    def __init__(self, program: str, arguments: Sequence[str] = ("trash",)) -> None:
        self.program = program
        self.arguments = tuple(arguments)

    def __call__(self, paths: Sequence[Path]) -> None:
        command = [self.program, *self.arguments, *(os.fspath(path) for path in paths)]
        LOGGER.debug("Trashing %d path(s) with %s", len(paths), self.program)
        try:
            completed = subprocess.run(command, check=False)
        except OSError as exc:
            raise ExternalProcessError(f"Could not run {self.program}: {exc}") from exc
        if completed.returncode != 0:
            raise ExternalProcessError(
                f"{self.program} exited with status {completed.returncode}.",
                returncode=completed.returncode,
            )


__all__ = ["DEFAULT_CHUNK_SIZE", "TrashInvoker"]
