from pathlib import Path

from lrckit.StateManager import StateManager


def test_mark_and_forget(tmp_path: Path):
    state = StateManager(tmp_path / "state.json")
    src = tmp_path / "a.vtt"
    assert not state.is_converted(src)

    state.mark_converted(src, tmp_path / "a.lrc")
    assert state.is_converted(src)
    assert StateManager(tmp_path / "state.json").is_converted(src)

    state.forget(src)
    assert not state.is_converted(src)


def test_corrupt_state_file_uses_defaults(tmp_path: Path):
    path = tmp_path / "state.json"
    path.write_text("{not json", encoding="utf-8")
    state = StateManager(path)
    assert state.state == {"converted": {}, "last_run": {}}


def test_record_run(tmp_path: Path):
    state = StateManager(tmp_path / "state.json")
    state.record_run({"success": 2})
    assert state.state["last_run"]["success"] == 2
    assert "finished_at" in state.state["last_run"]
