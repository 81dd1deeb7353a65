"""Editor round-trip for name lists."""

from .session import EDIT_FILENAME, EditSession, parse_edited_text, render_edit_text

__all__ = ["EDIT_FILENAME", "EditSession", "parse_edited_text", "render_edit_text"]
