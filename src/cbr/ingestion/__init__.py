"""Input name collection."""

from .discovery import DirectoryScanner, check_input_name, collect_inputs

__all__ = ["DirectoryScanner", "check_input_name", "collect_inputs"]
