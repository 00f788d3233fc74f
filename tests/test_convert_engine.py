import os
from pathlib import Path

import pytest

import lrckit.RecycleEngine as recycle_module
from lrckit.ConfigManager import ConfigManager
from lrckit.ConvertEngine import ConvertEngine, lrc_output_path
from lrckit.FileScanner import FileStat
from lrckit.StateManager import StateManager

VTT = "WEBVTT\n\n00:00:01.000 --> 00:00:02.000\nHello\n\n00:00:05.000 --> 00:00:06.000\nBye\n"


@pytest.fixture
def config(tmp_path: Path) -> ConfigManager:
    config = ConfigManager(tmp_path / "config.yml")
    config.update(auto_delete_source=False)
    return config


@pytest.fixture
def trashed(monkeypatch: pytest.MonkeyPatch) -> list:
    calls = []
    monkeypatch.setattr(recycle_module, "send2trash", lambda p: calls.append(p))
    return calls


def test_lrc_output_path():
    assert lrc_output_path("/m/song.vtt") == Path("/m/song.lrc")
    assert lrc_output_path("/m/song.mp3.srt") == Path("/m/song.lrc")
    assert lrc_output_path("/m/song.FLAC.vtt") == Path("/m/song.lrc")
    assert lrc_output_path("/m/song.en.vtt") == Path("/m/song.en.lrc")
    assert lrc_output_path("/m.v1/song.vtt") == Path("/m.v1/song.lrc")


def test_convert_success(tmp_path: Path, config: ConfigManager, trashed: list):
    src = tmp_path / "song.m4a.vtt"
    src.write_text(VTT, encoding="utf-8")

    assert ConvertEngine(config).convert_file(src) == "success"
    assert (tmp_path / "song.lrc").read_text(encoding="utf-8") == (
        "[00:01.00]Hello\n[00:02.00]\n[00:05.00]Bye\n[00:06.00]"
    )
    assert trashed == []


def test_convert_failed_when_no_cues(tmp_path: Path, config: ConfigManager):
    src = tmp_path / "empty.vtt"
    src.write_text("WEBVTT\n\nnothing\n", encoding="utf-8")
    assert ConvertEngine(config).convert_file(src) == "failed"
    assert not (tmp_path / "empty.lrc").exists()


def test_convert_error_when_unreadable(tmp_path: Path, config: ConfigManager):
    assert ConvertEngine(config).convert_file(tmp_path / "missing.vtt") == "error"


def test_convert_write_error_keeps_source(
    tmp_path: Path, config: ConfigManager, trashed: list
):
    src = tmp_path / "song.vtt"
    src.write_text(VTT, encoding="utf-8")
    # a directory where the output file should go makes the write fail
    (tmp_path / "song.lrc").mkdir()

    assert ConvertEngine(config).convert_file(src, delete_source=True) == "write_error"
    assert trashed == []


def test_convert_deletes_source_when_asked(
    tmp_path: Path, config: ConfigManager, trashed: list
):
    src = tmp_path / "song.srt"
    src.write_text("1\n00:00:01,000 --> 00:00:02,000\nhi\n", encoding="utf-8")
    assert ConvertEngine(config).convert_file(src, delete_source=True) == "success"
    assert trashed == [str(src.absolute())]


def test_trash_failure_is_still_success(
    tmp_path: Path, config: ConfigManager, monkeypatch: pytest.MonkeyPatch
):
    def boom(path):
        raise OSError("recycle bin unavailable")

    monkeypatch.setattr(recycle_module, "send2trash", boom)
    src = tmp_path / "song.vtt"
    src.write_text(VTT, encoding="utf-8")
    assert ConvertEngine(config).convert_file(src, delete_source=True) == "success"
    assert src.exists()


def test_delete_source_defaults_to_config(
    tmp_path: Path, config: ConfigManager, trashed: list
):
    config.update(auto_delete_source=True)
    src = tmp_path / "song.vtt"
    src.write_text(VTT, encoding="utf-8")
    assert ConvertEngine(config).convert_file(src) == "success"
    assert len(trashed) == 1


def test_convert_batch_statuses_and_skips(
    tmp_path: Path, config: ConfigManager, trashed: list
):
    good = tmp_path / "good.vtt"
    good.write_text(VTT, encoding="utf-8")
    empty = tmp_path / "empty.vtt"
    empty.write_text("WEBVTT\n", encoding="utf-8")
    done = FileStat.from_path(tmp_path / "done.vtt")
    done.status = "success"

    files = [FileStat.from_path(good), FileStat.from_path(empty), done]
    results = ConvertEngine(config).convert_batch(files, progress=False)

    assert results == {str(good): "success", str(empty): "failed"}
    assert [f.status for f in files] == ["success", "failed", "success"]


def test_convert_batch_parallel(tmp_path: Path, config: ConfigManager, trashed: list):
    config.update(workers=3)
    paths = []
    for i in range(5):
        p = tmp_path / f"s{i}.vtt"
        p.write_text(VTT, encoding="utf-8")
        paths.append(p)

    results = ConvertEngine(config).convert_batch(paths, progress=False)
    assert set(results.values()) == {"success"}
    assert all((tmp_path / f"s{i}.lrc").exists() for i in range(5))


def test_convert_batch_skips_files_in_state(
    tmp_path: Path, config: ConfigManager, trashed: list
):
    state = StateManager(tmp_path / "state.json")
    engine = ConvertEngine(config, state=state)
    src = tmp_path / "song.vtt"
    src.write_text(VTT, encoding="utf-8")

    assert engine.convert_batch([src], progress=False) == {str(src): "success"}
    assert engine.convert_batch([src], progress=False) == {}
    assert state.state["last_run"]["skipped"] == 1

    (tmp_path / "song.lrc").unlink()
    assert engine.convert_batch([src], progress=False) == {str(src): "success"}


def test_convert_batch_reconverts_edited_source(
    tmp_path: Path, config: ConfigManager, trashed: list
):
    state = StateManager(tmp_path / "state.json")
    engine = ConvertEngine(config, state=state)
    src = tmp_path / "song.vtt"
    src.write_text(VTT, encoding="utf-8")
    assert engine.convert_batch([src], progress=False) == {str(src): "success"}

    src.write_text(VTT.replace("Hello", "Hola"), encoding="utf-8")
    lrc_mtime = (tmp_path / "song.lrc").stat().st_mtime
    os.utime(src, (lrc_mtime + 10, lrc_mtime + 10))

    assert engine.convert_batch([src], progress=False) == {str(src): "success"}
    assert "Hola" in (tmp_path / "song.lrc").read_text(encoding="utf-8")


def test_convert_batch_marks_skipped_entries_success(
    tmp_path: Path, config: ConfigManager, trashed: list
):
    state = StateManager(tmp_path / "state.json")
    engine = ConvertEngine(config, state=state)
    src = tmp_path / "song.vtt"
    src.write_text(VTT, encoding="utf-8")
    engine.convert_batch([src], progress=False)

    item = FileStat.from_path(src)
    assert engine.convert_batch([item], progress=False) == {}
    assert item.status == "success"


def test_convert_batch_force_reconverts_unchanged(
    tmp_path: Path, config: ConfigManager, trashed: list
):
    state = StateManager(tmp_path / "state.json")
    engine = ConvertEngine(config, state=state)
    src = tmp_path / "song.vtt"
    src.write_text(VTT, encoding="utf-8")
    engine.convert_batch([src], progress=False)

    (tmp_path / "song.lrc").write_text("stale", encoding="utf-8")
    assert engine.convert_batch([src], progress=False, force=True) == {
        str(src): "success"
    }
    assert (tmp_path / "song.lrc").read_text(encoding="utf-8").startswith("[00:01.00]")
