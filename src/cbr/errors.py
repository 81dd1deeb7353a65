"""Exception hierarchy shared by the cbr workflow."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from cbr.plan.models import Outcome


class CbrError(Exception):
    """Base exception for every failure reported by a cbr run.

    Attributes:
        code: Machine-readable identifier used by JSON output.
    """

    code = "cbr_error"


class ValidationError(CbrError):
    """Raised when the edited name list is rejected before any mutation."""

    code = "validation_error"


class MismatchedCountError(ValidationError):
    """Raised when the edited list and the original list differ in length."""

    code = "mismatched_count"

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            "Mismatched number of lines. New filename list contains "
            f"{actual} entries while original list contains {expected}."
        )


class DuplicateTargetError(ValidationError):
    """Raised when two non-deleted entries share the same target name."""

    code = "duplicate_target"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Output filenames are not unique ('{name}').")


class TargetAlreadyExistsError(ValidationError):
    """Raised when a target names an existing file outside the batch."""

    code = "target_exists"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"File '{name}' already exists.")


class EmptyTargetError(ValidationError):
    """Raised when an edited line is empty."""

    code = "empty_target"

    def __init__(self, line_number: int, original: str) -> None:
        self.line_number = line_number
        self.original = original
        super().__init__(
            f"Line {line_number} is empty; use the deletion marker to remove '{original}'."
        )


class InputNamingViolationError(CbrError):
    """Raised when an input filename begins with the deletion marker."""

    code = "input_naming"

    def __init__(self, name: str, delete_char: str) -> None:
        self.name = name
        self.delete_char = delete_char
        super().__init__(
            f"Input filenames ('{name}') cannot begin with delete character '{delete_char}'."
        )


class MissingInputError(CbrError):
    """Raised when an explicitly requested input file does not exist."""

    code = "missing_input"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"File '{name}' does not exist.")


class ExternalProcessError(CbrError):
    """Raised when the editor or trash program cannot be run or fails.

    Attributes:
        returncode: Exit status of the program, when it ran.
        completed: Outcomes applied before a trash chunk failed.
    """

    code = "external_process"

    def __init__(
        self,
        message: str,
        *,
        returncode: int | None = None,
        completed: Sequence["Outcome"] = (),
    ) -> None:
        self.returncode = returncode
        self.completed = list(completed)
        super().__init__(message)


class FilesystemOpError(CbrError):
    """Raised when a rename or delete fails during execution.

    Attributes:
        source: Original path of the failing entry.
        destination: Final path of the failing entry, or None for deletions.
        original: Underlying operating system error.
        completed: Outcomes applied before the failure, parked entries included.
        staged_as: Temporary path the entry was moved through, if it was staged.
    """

    code = "filesystem_error"

    def __init__(
        self,
        source: Path,
        destination: Path | None,
        original: OSError,
        completed: Sequence["Outcome"] = (),
        *,
        staged_as: Path | None = None,
    ) -> None:
        self.source = source
        self.destination = destination
        self.original = original
        self.completed = list(completed)
        self.staged_as = staged_as
        reason = original.strerror or str(original)
        if destination is None:
            message = f"Could not delete file '{source}': {reason}"
        elif staged_as is not None:
            message = (
                f"Could not rename '{source}' to '{destination}' "
                f"(staged as '{staged_as.name}'): {reason}"
            )
        else:
            message = f"Could not rename '{source}' to '{destination}': {reason}"
        super().__init__(message)


__all__ = [
    "CbrError",
    "ValidationError",
    "MismatchedCountError",
    "DuplicateTargetError",
    "TargetAlreadyExistsError",
    "EmptyTargetError",
    "InputNamingViolationError",
    "MissingInputError",
    "ExternalProcessError",
    "FilesystemOpError",
]
