"""Unit tests for progress sinks."""

import pytest

from docker_remote.api.progress import (
    NO_PROGRESS,
    CallbackProgress,
    CollectingProgress,
    ProgressSink,
    as_sink,
    decode_event,
)


class TestDecodeEvent:
    """Tests for decode_event."""

    def test_json_line(self):
        assert decode_event(b'{"status": "Downloading", "id": "a1"}') == {
            "status": "Downloading",
            "id": "a1",
        }

    def test_plain_text(self):
        assert decode_event(b"Sending build context\n") == {"stream": "Sending build context"}

    def test_json_scalar_wrapped(self):
        assert decode_event(b"42") == {"stream": "42"}


class TestSinks:
    """Tests for sink implementations."""

    def test_no_progress_discards(self):
        NO_PROGRESS.feed(b'{"stream": "x"}')
        NO_PROGRESS.send({"stream": "x"})

    def test_callback_progress(self):
        events = []
        CallbackProgress(events.append).feed(b'{"stream": "Step 1/3"}')

        assert events == [{"stream": "Step 1/3"}]

    def test_collecting_progress(self):
        progress = CollectingProgress()
        progress.feed(b'{"stream": "Step 1/2\\n"}')
        progress.feed(b'{"stream": "Step 2/2\\n"}')
        progress.feed(b'{"aux": {"ID": "sha256:123"}}')

        assert progress.output == "Step 1/2\nStep 2/2\n"
        assert progress.image_id == "sha256:123"
        assert progress.errors == []

    def test_collecting_errors(self):
        progress = CollectingProgress()
        progress.feed(b'{"error": "failed", "errorDetail": {"message": "exit code 1"}}')
        progress.feed(b'{"error": "bare"}')

        assert progress.errors == ["exit code 1", "bare"]
        assert progress.image_id is None


class TestAsSink:
    """Tests for as_sink."""

    def test_none(self):
        assert as_sink(None) is NO_PROGRESS

    def test_sink_kept(self):
        sink = CollectingProgress()
        assert as_sink(sink) is sink

    def test_callable_wrapped(self):
        sink = as_sink(print)
        assert isinstance(sink, CallbackProgress)
        assert isinstance(sink, ProgressSink)

    def test_invalid(self):
        with pytest.raises(TypeError):
            as_sink("not a sink")
