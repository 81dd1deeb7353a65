"""Tests for editor and trash program resolution."""

import subprocess
from pathlib import Path
from typing import Any

import pytest

from cbr.config import CbrConfig
from cbr.environment import resolve_editor, resolve_environment
from cbr.errors import ExternalProcessError
from cbr.trash import TrashInvoker


def _executable(directory: Path, name: str) -> Path:
    path = directory / name
    path.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
    path.chmod(0o755)
    return path


def test_editor_precedence() -> None:
    env = {"VISUAL": "visual-editor", "EDITOR": "plain-editor"}

    assert resolve_editor("override", env) == "override"
    assert resolve_editor(None, env) == "visual-editor"
    assert resolve_editor(None, {"EDITOR": "plain-editor"}) == "plain-editor"


def test_editor_falls_back_to_path_search(tmp_path: Path) -> None:
    _executable(tmp_path, "vi")

    assert resolve_editor(None, {"PATH": str(tmp_path)}) == "vi"

    _executable(tmp_path, "nano")

    assert resolve_editor(None, {"PATH": str(tmp_path)}) == "nano"


def test_missing_editor_raises(tmp_path: Path) -> None:
    with pytest.raises(ExternalProcessError):
        resolve_editor(None, {"PATH": str(tmp_path)})


def test_trash_program_required_in_trash_mode(tmp_path: Path) -> None:
    env = {"EDITOR": "vi", "PATH": str(tmp_path)}

    assert resolve_environment(CbrConfig(), env=env).trash_program is None

    with pytest.raises(ExternalProcessError, match="gio"):
        resolve_environment(CbrConfig(), env=env, trash=True)

    gio = _executable(tmp_path, "gio")
    environment = resolve_environment(CbrConfig(), env=env, trash=True)

    assert environment.editor == "vi"
    assert environment.trash_program == str(gio)
    assert environment.trash_arguments == ("trash",)


def test_trash_invoker_builds_command(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[list[str]] = []

    def _fake_run(command: list[str], **_: Any) -> subprocess.CompletedProcess:
        calls.append(command)
        return subprocess.CompletedProcess(command, 0)

    monkeypatch.setattr("cbr.trash.subprocess.run", _fake_run)

    TrashInvoker("/usr/bin/gio", ["trash"])([Path("/data/a"), Path("/data/b")])

    assert calls == [["/usr/bin/gio", "trash", "/data/a", "/data/b"]]


def test_trash_invoker_reports_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def _fake_run(command: list[str], **_: Any) -> subprocess.CompletedProcess:
        return subprocess.CompletedProcess(command, 2)

    monkeypatch.setattr("cbr.trash.subprocess.run", _fake_run)

    with pytest.raises(ExternalProcessError) as excinfo:
        TrashInvoker("gio")([Path("a")])

    assert excinfo.value.returncode == 2


def test_trash_invoker_reports_missing_program(tmp_path: Path) -> None:
    with pytest.raises(ExternalProcessError, match="Could not run"):
        TrashInvoker(str(tmp_path / "missing-trash"))([Path("a")])
