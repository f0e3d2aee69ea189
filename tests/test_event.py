import logging

import pytest

from jenkins_operator.event import EventType, Recorder


def _capture(action):
    """Run ``action`` on a recorder whose sink collects events; return them."""
    events = []
    recorder = Recorder("operator", lambda *event: events.append(event))
    action(recorder)
    return events


@pytest.mark.parametrize(
    "given, expected, value",
    [
        ("Normal", EventType.NORMAL, "Normal"),
        ("Warning", EventType.WARNING, "Warning"),
    ],
)
def test_plain_string_type_becomes_event_type(given, expected, value):
    events = _capture(lambda r: r.emit("obj", given, "R", "m"))
    assert events[0][1] is expected
    assert events[0][1].value == value


def test_emit_passes_everything_to_sink():
    events = _capture(lambda r: r.emit("obj", EventType.NORMAL, "Reason", "hello"))
    assert events == [("obj", EventType.NORMAL, "Reason", "hello")]


def test_emitf_formats_message():
    events = _capture(
        lambda r: r.emitf("obj", EventType.WARNING, "Failed", "%s failed %d times", "job", 3)
    )
    assert events[0][3] == "job failed 3 times"
    assert events[0][1] is EventType.WARNING


def test_emitf_without_args_keeps_text():
    events = _capture(lambda r: r.emitf("obj", EventType.NORMAL, "R", "100% done"))
    assert events[0][3] == "100% done"


def test_invalid_event_type_rejected():
    with pytest.raises(ValueError):
        _capture(lambda r: r.emit("obj", "Bogus", "R", "m"))


def test_default_sink_logs(caplog):
    recorder = Recorder("operator")
    with caplog.at_level(logging.INFO, logger="controller-jenkins"):
        recorder.emit("obj", EventType.WARNING, "Broken", "something broke")
    assert any("something broke" in r.getMessage() for r in caplog.records)
    assert any(r.levelno == logging.WARNING for r in caplog.records)