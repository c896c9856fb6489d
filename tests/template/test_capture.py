"""
Tests for the capture stack.
"""

import io

import pytest

from vw.template.capture import CaptureStack
from vw.template.errors import CaptureError


def test_write_goes_to_innermost_capture():
    stack = CaptureStack()
    outer = stack.open()
    stack.write("a")
    inner = stack.open()
    stack.write("b")
    assert stack.close(inner) == "b"
    stack.write("c")
    assert stack.close(outer) == "ac"
    assert stack.depth == 0


def test_sink_receives_uncaptured_text():
    sink = io.StringIO()
    stack = CaptureStack(sink)
    stack.write("x")
    handle = stack.open()
    stack.write("hidden")
    stack.close(handle)
    stack.write("y")
    assert sink.getvalue() == "xy"


def test_write_without_capture_or_sink_fails():
    with pytest.raises(CaptureError):
        CaptureStack().write("lost")


def test_empty_write_is_noop():
    CaptureStack().write("")


def test_close_out_of_order():
    stack = CaptureStack()
    outer = stack.open()
    stack.open()
    with pytest.raises(CaptureError, match="out of order"):
        stack.close(outer)


def test_double_close():
    stack = CaptureStack()
    handle = stack.open()
    stack.close(handle)
    with pytest.raises(CaptureError, match="already closed"):
        stack.close(handle)


def test_captured_context_releases_on_error():
    stack = CaptureStack()
    with pytest.raises(RuntimeError):
        with stack.captured():
            stack.open()
            stack.write("partial")
            raise RuntimeError("boom")
    assert stack.depth == 0


def test_captured_context_exposes_text():
    stack = CaptureStack()
    with stack.captured() as handle:
        stack.write("kept")
    assert handle.closed
    assert handle.text == "kept"


def test_discard_all():
    stack = CaptureStack()
    a = stack.open()
    b = stack.open()
    stack.discard_all()
    assert stack.depth == 0
    assert a.closed and b.closed
