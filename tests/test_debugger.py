import io

import pytest

from brainf_machine.debugger import TracingMachine
from brainf_machine.errors import BackwardBoundaryUnderflow
from brainf_machine.program import build


def test_trace_matches_plain_run():
    stream = io.StringIO()
    machine = TracingMachine(stream=stream, show_memory_range=4)
    assert machine.run(build(",[>++<-]>."), b"\x03") == b"\x06"

    text = stream.getvalue()
    assert "Program: ',[>++<-]>.'" in text
    assert "Step 1: Execute ',' at offset 0" in text
    assert "enter loop" in text
    assert "skip loop" in text
    assert "Output: '\\x06' -> [6]" in text


def test_trace_shows_tape_window():
    stream = io.StringIO()
    TracingMachine(stream=stream, show_memory_range=3).run(build("+++>"))
    lines = stream.getvalue().splitlines()
    assert "Memory:  [  3|  0|  0]" in lines
    assert "Address:    0   1   2" in lines


def test_trace_reports_abort_and_reraises():
    stream = io.StringIO()
    with pytest.raises(BackwardBoundaryUnderflow):
        TracingMachine(stream=stream).run(build(".<"))
    text = stream.getvalue()
    assert "ABORTED" in text
    assert "Output discarded." in text
    assert "FINAL RESULT" not in text
