"""Tests for config file discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from udpcomm.config.discovery import CONFIG_FILENAME, find_config, user_config_path


class TestFindConfig:
    def test_none_found(self, tmp_path: Path) -> None:
        assert find_config(tmp_path) is None

    def test_found_in_start(self, tmp_path: Path) -> None:
        config = tmp_path / CONFIG_FILENAME
        config.write_text("")
        assert find_config(tmp_path) == config.resolve()

    def test_found_in_parent(self, tmp_path: Path) -> None:
        config = tmp_path / CONFIG_FILENAME
        config.write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config(nested) == config.resolve()

    def test_env_var_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        other = tmp_path / "other.toml"
        other.write_text("")
        monkeypatch.setenv("UDPCOMM_CONFIG", str(other))
        assert find_config(tmp_path) == other

    def test_env_var_pointing_nowhere(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("UDPCOMM_CONFIG", str(tmp_path / "gone.toml"))
        assert find_config(tmp_path) is None

    def test_user_config_fallback(self, tmp_path: Path) -> None:
        user = user_config_path()
        user.parent.mkdir(parents=True)
        user.write_text("")
        start = tmp_path / "project"
        start.mkdir()
        assert find_config(start) == user


def test_user_config_path_honours_xdg(tmp_path: Path) -> None:
    assert user_config_path() == tmp_path / "xdg" / "udpcomm" / CONFIG_FILENAME
