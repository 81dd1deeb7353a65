"""CLI integration tests for `cbr rename`."""

from __future__ import annotations

import json
import os
import subprocess
from pathlib import Path
from typing import Any, Callable

import pytest
from click.testing import CliRunner

from cbr.cli import cli
from cbr.environment import RuntimeEnvironment


def _env_with_home(tmp_path: Path) -> dict[str, str]:
    """Return environment variables pointing HOME to a temp directory.

    Args:
        tmp_path: Temporary directory provided by pytest.

    Returns:
        dict[str, str]: Environment mapping with HOME set.
    """
    env = dict(os.environ)
    env["HOME"] = str(tmp_path / "home")
    return env


def _workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, *names: str) -> Path:
    root = tmp_path / "data"
    root.mkdir()
    for name in names:
        (root / name).write_text(f"content of {name}", encoding="utf-8")
    monkeypatch.chdir(root)
    return root


def _install_editor(
    monkeypatch: pytest.MonkeyPatch, transform: Callable[[list[str]], list[str]]
) -> list[list[str]]:
    """Replace the editor with a function rewriting the edit file.

    Returns:
        list[list[str]]: The name lists the editor was opened with.
    """
    opened: list[list[str]] = []

    def _fake_edit(**kwargs: Any) -> None:
        path = Path(kwargs["filename"])
        lines = path.read_text(encoding="utf-8").splitlines()
        opened.append(lines)
        path.write_text("".join(f"{line}\n" for line in transform(lines)), encoding="utf-8")

    monkeypatch.setattr("cbr.editing.session.click.edit", _fake_edit)
    return opened


def _listing(root: Path) -> dict[str, str]:
    return {path.name: path.read_text(encoding="utf-8") for path in root.iterdir()}


def test_rename_swaps_directory_entries(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    root = _workspace(tmp_path, monkeypatch, "b.txt", "a.txt")
    opened = _install_editor(monkeypatch, lambda lines: list(reversed(lines)))

    result = CliRunner().invoke(cli, ["rename", "-e", "fake"], env=_env_with_home(tmp_path))

    assert result.exit_code == 0, result.output
    assert opened == [["a.txt", "b.txt"]]
    assert _listing(root) == {"a.txt": "content of b.txt", "b.txt": "content of a.txt"}
    assert "Renamed" in result.output
    assert "renamed=2" in result.output


def test_rename_deletes_marked_entries(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    root = _workspace(tmp_path, monkeypatch, "a", "b")
    _install_editor(monkeypatch, lambda lines: ["#" + lines[0], lines[1]])

    result = CliRunner().invoke(cli, ["rename", "-e", "fake"], env=_env_with_home(tmp_path))

    assert result.exit_code == 0, result.output
    assert _listing(root) == {"b": "content of b"}
    assert "Removed" in result.output


def test_rename_uses_custom_marker_and_explicit_files(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    root = _workspace(tmp_path, monkeypatch, "a", "b", "c")
    opened = _install_editor(monkeypatch, lambda lines: ["%"] * len(lines))

    result = CliRunner().invoke(
        cli, ["rename", "-e", "fake", "-d", "%", "-s", "c", "a"], env=_env_with_home(tmp_path)
    )

    assert result.exit_code == 0, result.output
    assert opened == [["a", "c"]]
    assert _listing(root) == {"b": "content of b"}
    assert result.output == ""


def test_rename_rejects_duplicates_without_changes(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    root = _workspace(tmp_path, monkeypatch, "a", "b")
    _install_editor(monkeypatch, lambda lines: ["x", "x"])

    result = CliRunner().invoke(cli, ["rename", "-e", "fake"], env=_env_with_home(tmp_path))

    assert result.exit_code == 1
    assert "not unique" in result.output
    assert _listing(root) == {"a": "content of a", "b": "content of b"}


def test_rename_reports_json_errors(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _workspace(tmp_path, monkeypatch, "a", "b")
    _install_editor(monkeypatch, lambda lines: lines[:1])

    result = CliRunner().invoke(
        cli, ["rename", "-e", "fake", "--json"], env=_env_with_home(tmp_path)
    )

    assert result.exit_code == 1
    payload = json.loads(result.output)
    assert payload["error"]["code"] == "mismatched_count"


def test_rename_dry_run_json(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    root = _workspace(tmp_path, monkeypatch, "a", "b")
    _install_editor(monkeypatch, lambda lines: ["b", "a"])

    result = CliRunner().invoke(
        cli, ["rename", "-e", "fake", "--dry-run", "--json"], env=_env_with_home(tmp_path)
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["context"]["dry_run"] is True
    assert payload["counts"] == {"renamed": 2, "removed": 0, "trashed": 0}
    assert _listing(root) == {"a": "content of a", "b": "content of b"}


def test_rename_refuses_existing_target_without_force(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    root = _workspace(tmp_path, monkeypatch, "a", "existing.txt")
    _install_editor(monkeypatch, lambda lines: ["existing.txt"])

    env = _env_with_home(tmp_path)
    refused = CliRunner().invoke(cli, ["rename", "-e", "fake", "a"], env=env)

    assert refused.exit_code == 1
    assert "already exists" in refused.output
    assert (root / "a").exists()

    forced = CliRunner().invoke(cli, ["rename", "-e", "fake", "-f", "a"], env=env)

    assert forced.exit_code == 0, forced.output
    assert _listing(root) == {"existing.txt": "content of a"}


def test_rename_rejects_marker_prefixed_inputs(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _workspace(tmp_path, monkeypatch, "#notes")
    opened = _install_editor(monkeypatch, lambda lines: lines)

    result = CliRunner().invoke(cli, ["rename", "-e", "fake"], env=_env_with_home(tmp_path))

    assert result.exit_code == 1
    assert "cannot begin with delete character" in result.output
    assert opened == []


def test_rename_empty_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _workspace(tmp_path, monkeypatch)
    opened = _install_editor(monkeypatch, lambda lines: lines)

    result = CliRunner().invoke(cli, ["rename", "-e", "fake"], env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    assert "No files to rename" in result.output
    assert opened == []


def test_rename_trash_mode_invokes_trash_program(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    root = _workspace(tmp_path, monkeypatch, "a", "b")
    _install_editor(monkeypatch, lambda lines: ["#", lines[1]])
    commands: list[list[str]] = []

    def _fake_run(command: list[str], **_: Any) -> subprocess.CompletedProcess:
        commands.append(command)
        return subprocess.CompletedProcess(command, 0)

    monkeypatch.setattr(
        "cbr.cli.resolve_environment",
        lambda config, trash=None: RuntimeEnvironment(
            editor="fake", trash_program="/usr/bin/gio", trash_arguments=("trash",)
        ),
    )
    monkeypatch.setattr("cbr.trash.subprocess.run", _fake_run)

    result = CliRunner().invoke(cli, ["rename", "-t"], env=_env_with_home(tmp_path))

    assert result.exit_code == 0, result.output
    assert commands == [["/usr/bin/gio", "trash", str(Path.cwd() / "a")]]
    assert "Trashed" in result.output
    assert (root / "a").exists()


def _failing_trash(monkeypatch: pytest.MonkeyPatch) -> None:
    def _fake_run(command: list[str], **_: Any) -> subprocess.CompletedProcess:
        return subprocess.CompletedProcess(command, 1)

    monkeypatch.setattr(
        "cbr.cli.resolve_environment",
        lambda config, trash=None: RuntimeEnvironment(
            editor="fake", trash_program="/usr/bin/gio", trash_arguments=("trash",)
        ),
    )
    monkeypatch.setattr("cbr.trash.subprocess.run", _fake_run)


def test_rename_failed_trash_reports_parked_files_as_json(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    root = _workspace(tmp_path, monkeypatch, "a", "b", "c")
    _install_editor(monkeypatch, lambda lines: ["b", "a", "#"])
    _failing_trash(monkeypatch)

    result = CliRunner().invoke(cli, ["rename", "-t", "--json"], env=_env_with_home(tmp_path))

    assert result.exit_code == 1
    payload = json.loads(result.output)
    assert payload["error"]["code"] == "external_process"
    completed = payload["error"]["details"]["completed"]
    assert [(item["operation"], item["source"]) for item in completed] == [
        ("parked", "a"),
        ("parked", "b"),
    ]
    parked_names = {item["destination"] for item in completed}
    assert parked_names | {"c"} == set(_listing(root))


def test_rename_failed_trash_prints_parked_files(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _workspace(tmp_path, monkeypatch, "a", "b", "c")
    _install_editor(monkeypatch, lambda lines: ["b", "a", "#"])
    _failing_trash(monkeypatch)

    result = CliRunner().invoke(cli, ["rename", "-t"], env=_env_with_home(tmp_path))

    assert result.exit_code == 1
    assert result.output.count("Parked") == 2
    assert "cbr_transition_file_" in result.output
    assert "exited with status 1" in result.output
