from pathlib import Path

import pytest

from lrckit.ConfigManager import ConfigManager
from lrckit.errors import ConfigError


def test_missing_config_uses_defaults(tmp_path: Path):
    config = ConfigManager(tmp_path / "nope.yml")
    assert config.auto_delete_source is True
    assert config.cleaner_exts == "wav"
    assert config.encoding == "utf-8"
    assert config.workers == 1
    assert config.permanent_delete is False


def test_values_are_read(tmp_path: Path):
    path = tmp_path / "config.yml"
    path.write_text(
        "auto_delete_source: false\ncleaner_exts: [wav, flac]\nworkers: 4\n",
        encoding="utf-8",
    )
    config = ConfigManager(path)
    assert config.auto_delete_source is False
    assert config.cleaner_exts == "wav,flac"
    assert config.workers == 4


def test_env_var_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    path = tmp_path / "env.yml"
    path.write_text("encoding: cp1252\n", encoding="utf-8")
    monkeypatch.setenv("LRCKIT_CONFIG_PATH", str(path))
    assert ConfigManager().encoding == "cp1252"


def test_workers_floor_at_one(tmp_path: Path):
    path = tmp_path / "config.yml"
    path.write_text("workers: 0\n", encoding="utf-8")
    assert ConfigManager(path).workers == 1


def test_invalid_yaml_raises(tmp_path: Path):
    path = tmp_path / "config.yml"
    path.write_text("workers: [1, 2\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        ConfigManager(path)


def test_non_mapping_raises(tmp_path: Path):
    path = tmp_path / "config.yml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        ConfigManager(path)


def test_bad_workers_raises(tmp_path: Path):
    path = tmp_path / "config.yml"
    path.write_text("workers: many\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        ConfigManager(path)


def test_update_and_save_round_trip(tmp_path: Path):
    path = tmp_path / "config.yml"
    config = ConfigManager(path)
    config.update(auto_delete_source=False, cleaner_exts="wav, zip")
    config.save()

    reloaded = ConfigManager(path)
    assert reloaded.auto_delete_source is False
    assert reloaded.cleaner_exts == "wav, zip"


def test_update_rejects_unknown_keys(tmp_path: Path):
    config = ConfigManager(tmp_path / "config.yml")
    with pytest.raises(ConfigError):
        config.update(colour="blue")


@pytest.mark.parametrize(
    "text",
    [
        'auto_delete_source: "false"\n',
        'permanent_delete: "no"\n',
        "permanent_delete: 1\n",
    ],
)
def test_flags_must_be_real_booleans(tmp_path: Path, text: str):
    path = tmp_path / "config.yml"
    path.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError):
        ConfigManager(path)


def test_unquoted_yaml_booleans_are_accepted(tmp_path: Path):
    path = tmp_path / "config.yml"
    path.write_text("auto_delete_source: no\npermanent_delete: yes\n", encoding="utf-8")
    config = ConfigManager(path)
    assert config.auto_delete_source is False
    assert config.permanent_delete is True
