"""Unit tests for configuration management."""

from pathlib import Path

import pytest

from cbr.config import (
    CbrConfig,
    ConfigError,
    ConfigManager,
    resolve_with_precedence,
)


def _fresh_manager(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> ConfigManager:
    monkeypatch.setenv("HOME", str(tmp_path))
    return ConfigManager()


def test_ensure_exists_creates_default_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    path = manager.ensure_exists()

    assert path == tmp_path / ".cbr" / "config.yaml"
    text = path.read_text(encoding="utf-8")
    assert "cbr configuration file" in text
    assert "Last updated:" in text

    config = manager.load(include_env=False)
    assert isinstance(config, CbrConfig)
    assert config.renaming.delete_char == "#"


def test_resolve_with_precedence_respects_order(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()

    manager.save({"renaming": {"delete_char": "x", "force": True}, "trash": {"chunk_size": 50}})

    env = {"CBR__TRASH__CHUNK_SIZE": "25", "CBR__RENAMING__DELETE_CHAR": "#"}
    cli = {"trash.chunk_size": 10}

    config = manager.load(cli_overrides=cli, env_overrides=env)

    assert config.renaming.force is True
    # A bare "#" would parse as a YAML comment; it is kept as the marker.
    assert config.renaming.delete_char == "#"
    # CLI overrides take precedence over environment
    assert config.trash.chunk_size == 10


def test_invalid_yaml_raises_config_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()

    manager.config_path.write_text("- not-a-mapping", encoding="utf-8")

    with pytest.raises(ConfigError):
        manager.load()


@pytest.mark.parametrize(
    "overrides",
    [
        {"renaming": {"delete_char": "##"}},
        {"trash": {"chunk_size": 0}},
        {"renaming": {"unknown": True}},
    ],
)
def test_resolve_with_precedence_invalid_value_raises(overrides: dict) -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(defaults=CbrConfig(), file_overrides=overrides)
