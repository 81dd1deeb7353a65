"""Round-trip a name list through the user's text editor."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Iterable

import click

from cbr.errors import ExternalProcessError

LOGGER = logging.getLogger(__name__)

EDIT_FILENAME = "cbr_edit_file"
# Names may carry undecodable bytes; surrogateescape writes them back unchanged.
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def render_edit_text(names: Iterable[str]) -> str:
    """Serialize names one per line, each terminated by a newline."""
    return "".join(f"{name}\n" for name in names)


def parse_edited_text(text: str) -> list[str]:
    """Split edited text into target lines.

    Only ``\\n`` separates entries and a single trailing newline does not
    produce an extra entry. Every other character is part of the name.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


class EditSession:
    """Write names to a private temporary file, open the editor, read the result."""

    def __init__(self, editor: str) -> None:
        self.editor = editor

    def run(self, names: Iterable[str]) -> list[str]:
        """Let the user edit ``names`` and return the edited lines.

        Raises:
            ExternalProcessError: If the editor cannot start or exits non-zero.
        """
        with tempfile.TemporaryDirectory(prefix="cbr-") as workdir:
            path = Path(workdir) / EDIT_FILENAME
            path.write_text(render_edit_text(names), encoding=_ENCODING, errors=_ERRORS)
            LOGGER.debug("Opening %s with %r", path, self.editor)
            try:
                click.edit(editor=self.editor, filename=str(path))
            except click.ClickException as exc:
                raise ExternalProcessError(exc.format_message()) from exc
            text = path.read_text(encoding=_ENCODING, errors=_ERRORS)
        return parse_edited_text(text)


__all__ = ["EDIT_FILENAME", "EditSession", "parse_edited_text", "render_edit_text"]
