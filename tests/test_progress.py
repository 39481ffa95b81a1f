import importlib
import json
import logging
import os

import pytest

import progress


@pytest.fixture(autouse=True)
def _fresh_run():
    progress.reset()
    yield


def test_set_done_without_flag_closes_run_successfully():
    progress.set_status("Generating")
    progress.set_done()
    snap = progress.snapshot()
    assert (snap["status"], snap["ok"], snap["done"]) == ("Done", True, True)
    assert snap["percent"] == 100.0
    assert "elapsed_start" not in snap
    assert snap["elapsed_str"] == "0s"


def test_set_done_false_keeps_reason():
    progress.set_done(False, reason="Failed to generate a solvable puzzle")
    snap = progress.snapshot()
    assert snap["status"] == "Error"
    assert snap["ok"] is False
    assert snap["message"] == "Failed to generate a solvable puzzle"


def test_percent_follows_generated_over_requested():
    progress.set_requested(8)
    progress.set_generated(2)
    assert progress.snapshot()["percent"] == 25.0
    progress.set_generated("8")
    assert progress.snapshot()["percent"] == 100.0
    progress.set_generated("not a number")
    assert progress.snapshot()["generated"] == 0


def test_skipped_configs_count_as_failures():
    progress.set_config("1x1 walls=0 reverse=1")
    progress.add_failure("budget exhausted")
    progress.add_failure()
    snap = progress.snapshot()
    assert snap["config"] == "1x1 walls=0 reverse=1"
    assert snap["failures"] == 2
    assert snap["message"] == "budget exhausted"


def test_run_id_increases_and_result_url_resets():
    progress.set_result_url("/result/latest")
    first = progress.snapshot()
    progress.reset()
    second = progress.snapshot()
    assert first["result_url"] == "/result/latest"
    assert second["result_url"] == ""
    assert second["run_id"] == first["run_id"] + 1


@pytest.mark.parametrize("seconds, text", [(0, "0s"), (59.9, "59s"), (61, "1m 1s"), (3725, "1h 2m")])
def test_fmt_elapsed(seconds, text):
    assert progress.fmt_elapsed(seconds) == text


def test_attempt_log_writes_event_with_fields(caplog):
    # the attempt logger does not propagate; attach caplog's handler directly
    progress.ATTEMPT_LOGGER.addHandler(caplog.handler)
    try:
        with caplog.at_level(logging.INFO, logger="generator.attempt_log"):
            progress.log_attempt_detail("Config skipped", config="2x2 walls=0 reverse=1", reason="")
            progress.log_step_detail("Backtrack", step=3)
    finally:
        progress.ATTEMPT_LOGGER.removeHandler(caplog.handler)
    messages = [r.getMessage() for r in caplog.records]
    assert "Config skipped | config=2x2 walls=0 reverse=1" in messages
    assert not any(m.startswith("Backtrack") for m in messages)


def test_state_written_by_another_process_is_picked_up(tmp_path, monkeypatch):
    state_path = tmp_path / "state.json"
    monkeypatch.setenv("PROGRESS_STATE_FILE", str(state_path))
    mod = importlib.reload(progress)
    try:
        mod.reset()
        mod.set_config("4x4 walls=1 reverse=5")
        data = json.loads(state_path.read_text(encoding="utf-8"))
        assert data["config"] == "4x4 walls=1 reverse=5"

        data.update(config="5x5 walls=2 reverse=9", generated=3)
        state_path.write_text(json.dumps(data), encoding="utf-8")
        with mod.PROGRESS_LOCK:
            mod._LAST_STATE_MTIME = 0.0
        os.utime(state_path, None)

        snap = mod.snapshot()
        assert snap["config"] == "5x5 walls=2 reverse=9"
        assert snap["generated"] == 3
    finally:
        monkeypatch.undo()
        importlib.reload(progress)
