from __future__ import annotations

from pathlib import Path

import pytest

from hms import config


@pytest.mark.parametrize(("raw", "expected"), [("1", True), (" yes ", True), ("ON", True), ("0", False), ("", False)])
def test_env_bool(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
    monkeypatch.setenv("HMS_TEST_FLAG", raw)
    assert config._env_bool("HMS_TEST_FLAG", not expected) is expected


def test_env_bool_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("HMS_TEST_FLAG", raising=False)
    assert config._env_bool("HMS_TEST_FLAG", True) is True


def test_data_dir_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HMS_DATA_DIR", str(tmp_path))
    assert config._resolve_data_dir() == tmp_path

    monkeypatch.delenv("HMS_DATA_DIR")
    assert config.APP_NAME in str(config._resolve_data_dir())


def test_default_settings_are_lenient() -> None:
    assert config.default_database_url().startswith("sqlite:///")
    assert config.settings.strict_numeric_input is False
