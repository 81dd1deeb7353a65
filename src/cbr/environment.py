"""Resolve process-level settings (editor, trash program) once per run."""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from typing import Mapping, Optional

from cbr.config.models import CbrConfig
from cbr.errors import ExternalProcessError

LOGGER = logging.getLogger(__name__)

FALLBACK_EDITORS = ("nano", "vi")


@dataclass(frozen=True)
class RuntimeEnvironment:
    """Process-level values captured at startup and handed to the workflow.

    Attributes:
        editor: Editor command line used to edit the name list.
        trash_program: Absolute path of the trash program, when trash mode is on.
        trash_arguments: Arguments placed before the paths on every trash call.
    """

    editor: str
    trash_program: Optional[str] = None
    trash_arguments: tuple[str, ...] = ()


def find_binary(name: str, path: str | None) -> str | None:
    """Return the location of ``name`` on the given PATH string, if present."""
    if not path:
        return None
    return shutil.which(name, path=path)


def resolve_editor(override: str | None, env: Mapping[str, str]) -> str:
    """Pick the editor: explicit override, then VISUAL, EDITOR, nano and vi.

    Raises:
        ExternalProcessError: If no editor can be found.
    """
    if override:
        return override
    for variable in ("VISUAL", "EDITOR"):
        value = env.get(variable)
        if value:
            return value
    search_path = env.get("PATH")
    for candidate in FALLBACK_EDITORS:
        if find_binary(candidate, search_path):
            return candidate
    raise ExternalProcessError("Could not find any editor from environment.")


def resolve_environment(
    config: CbrConfig,
    *,
    env: Mapping[str, str] | None = None,
    trash: bool | None = None,
) -> RuntimeEnvironment:
    """Read the editor and trash program from the process environment.

    Args:
        config: Effective configuration.
        env: Environment mapping; defaults to ``os.environ``.
        trash: Trash mode for this run; defaults to ``config.renaming.trash``.

    Returns:
        RuntimeEnvironment: Resolved values.

    Raises:
        ExternalProcessError: If the editor or the required trash program is missing.
    """
    environ = env if env is not None else os.environ
    editor = resolve_editor(config.editor.command, environ)
    LOGGER.debug("Using editor %r", editor)

    trash_enabled = config.renaming.trash if trash is None else trash
    if not trash_enabled:
        return RuntimeEnvironment(editor=editor)

    program = find_binary(config.trash.program, environ.get("PATH"))
    if program is None:
        raise ExternalProcessError(
            f"{config.trash.program} is required for trash functionality but was not found on PATH."
        )
    LOGGER.debug("Using trash program %s", program)
    return RuntimeEnvironment(
        editor=editor,
        trash_program=program,
        trash_arguments=tuple(config.trash.arguments),
    )


__all__ = [
    "FALLBACK_EDITORS",
    "RuntimeEnvironment",
    "find_binary",
    "resolve_editor",
    "resolve_environment",
]
