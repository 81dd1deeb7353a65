"""Configuration models describing cbr settings."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CbrBaseModel(BaseModel):
    """Shared configuration for cbr Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class RenamingOptions(CbrBaseModel):
    """Settings that govern how edited lines turn into filesystem actions.

    Attributes:
        delete_char: Leading character marking an entry for deletion.
        force: Whether renames may overwrite files outside the batch.
        trash: Whether deleted entries go to the trash instead of being removed.
    """

    delete_char: str = "#"
    force: bool = False
    trash: bool = False

    @field_validator("delete_char")
    @classmethod
    def _single_character(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError("delete_char must be exactly one character")
        return value


class EditorSettings(CbrBaseModel):
    """Editor selection.

    Attributes:
        command: Editor command overriding VISUAL/EDITOR when set.
    """

    command: Optional[str] = None


class TrashSettings(CbrBaseModel):
    """External trash program invocation.

    Attributes:
        program: Executable looked up on PATH.
        arguments: Arguments placed before the batch of paths.
        chunk_size: Maximum number of paths passed per invocation.
    """

    program: str = "gio"
    arguments: List[str] = Field(default_factory=lambda: ["trash"])
    chunk_size: int = Field(default=197, ge=1, le=4096)


class LoggingSettings(CbrBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: str = "WARNING"


class CLIOptions(CbrBaseModel):
    """CLI behavior defaults.

    Attributes:
        silent_default: Whether commands only report errors by default.
    """

    silent_default: bool = False


class CbrConfig(CbrBaseModel):
    """Top-level configuration struct for cbr.

    Attributes:
        renaming: Rename, delete and trash behavior.
        editor: Editor selection.
        trash: Trash program invocation.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    renaming: RenamingOptions = Field(default_factory=RenamingOptions)
    editor: EditorSettings = Field(default_factory=EditorSettings)
    trash: TrashSettings = Field(default_factory=TrashSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "CbrBaseModel",
    "RenamingOptions",
    "EditorSettings",
    "TrashSettings",
    "LoggingSettings",
    "CLIOptions",
    "CbrConfig",
]
