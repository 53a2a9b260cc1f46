import pytest

from worldsmith import db
from worldsmith.models import GenerationLog, GenerationRequest
from worldsmith.services.generation_logger import GenerationLogger


@pytest.fixture()
def request_row():
    row = GenerationRequest(world_id="w-log", kind="dungeon", prompt={})
    db.session.add(row)
    db.session.commit()
    return row


def test_log_buffers_until_flush(request_row):
    gl = GenerationLogger(request_row.id, "w-log")
    gl.log("procedural", "start")
    gl.log("procedural", "careful", log_type="warning", data={"n": 1})
    assert GenerationLog.query.filter_by(request_id=request_row.id).count() == 0
    assert gl.flush() == 2
    rows = GenerationLog.query.filter_by(request_id=request_row.id).order_by(GenerationLog.id).all()
    assert [r.log_type for r in rows] == ["info", "warning"]
    assert rows[1].data == {"n": 1}
    assert rows[0].world_id == "w-log"


def test_flush_writes_only_new_entries(request_row):
    gl = GenerationLogger(request_row.id)
    gl.log("a", "one")
    assert gl.flush() == 1
    assert gl.flush() == 0
    gl.log("b", "two")
    assert gl.flush() == 1
    assert GenerationLog.query.filter_by(request_id=request_row.id).count() == 2
    assert len(gl.get_logs()) == 2


def test_step_timing_attaches_to_last_entry(request_row):
    gl = GenerationLogger(request_row.id)
    gl.start_step("procedural")
    gl.log("procedural", "first")
    gl.log("procedural", "second")
    assert gl.end_step("procedural") >= 0
    first, second = gl.get_logs_by_step("procedural")
    assert first["duration_ms"] is None
    assert second["duration_ms"] is not None
    assert gl.end_step("never-started") is None


def test_unknown_log_type_rejected(request_row):
    with pytest.raises(ValueError):
        GenerationLogger(request_row.id).log("x", "bad", log_type="fatal")


def test_non_persistent_logger(request_row):
    gl = GenerationLogger(request_row.id, persist=False)
    gl.log("x", "kept in memory")
    assert gl.flush() == 0
    assert GenerationLog.query.filter_by(request_id=request_row.id).count() == 0
    assert gl.get_logs()[0]["message"] == "kept in memory"
