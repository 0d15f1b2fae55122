"""Tests for logging utilities."""

import io
import logging

from pdfmerge.utils.logging import (
    SafeStreamHandler,
    _add_separator,
    _filter_event_dict,
    _inject_request_context,
    create_task_log_path,
    generate_run_id,
    get_logger,
    get_run_id,
    request_context,
    setup_logging,
    setup_task_logging,
)


class TestRunId:
    def test_eight_characters(self):
        assert len(generate_run_id()) == 8

    def test_unique(self):
        assert len({generate_run_id() for _ in range(100)}) == 100


class TestRequestContext:
    """Tests for the request_context context manager."""

    def test_sets_and_restores_run_id(self):
        assert get_run_id() is None
        with request_context(run_id="run00001") as run_id:
            assert run_id == "run00001"
            assert get_run_id() == "run00001"
        assert get_run_id() is None

    def test_nested_context_inherits_run_id(self):
        with request_context(run_id="outer123"):
            with request_context(file_path="scan.jpg") as inner:
                assert inner == "outer123"
                event = _inject_request_context(None, "info", {"event": "Image resampled"})
                assert event["run_id"] == "outer123"
                assert event["file"] == "scan.jpg"
            event = _inject_request_context(None, "info", {"event": "Chunk processed"})
            assert "file" not in event

    def test_generates_run_id_when_missing(self):
        with request_context() as run_id:
            assert len(run_id) == 8


class TestProcessors:
    def test_inject_keeps_explicit_values(self):
        with request_context(run_id="ctx00001", file_path="a.jpg"):
            event = _inject_request_context(None, "info", {"event": "x", "file": "b.jpg"})
        assert event["file"] == "b.jpg"

    def test_filter_truncates_long_strings(self):
        event = _filter_event_dict(None, "info", {"event": "x", "blob": "a" * 600})
        assert event["blob"].startswith("a" * 500)
        assert "600 chars total" in event["blob"]

    def test_filter_summarises_binary(self):
        event = _filter_event_dict(None, "info", {"event": "x", "data": b"\x00" * 1000})
        assert event["data"] == "[BINARY DATA: 1000 bytes]"

    def test_separator_only_with_context(self):
        assert _add_separator(None, "info", {"event": "plain"})["event"] == "plain"
        assert _add_separator(None, "info", {"event": "ctx", "pages": 3})["event"].endswith("|")


class TestSafeStreamHandler:
    def test_replaces_unencodable_characters(self):
        raw = io.BytesIO()
        stream = io.TextIOWrapper(raw, encoding="ascii")
        handler = SafeStreamHandler(stream)
        handler.setFormatter(logging.Formatter("%(message)s"))

        handler.emit(logging.LogRecord("t", logging.INFO, __file__, 1, "café.jpg", None, None))
        stream.flush()

        assert raw.getvalue() == b"caf?.jpg\n"


class TestSetup:
    def test_task_log_path(self, temp_dir):
        task_id, path = create_task_log_path(temp_dir / "logs", prefix="merge")

        assert len(task_id) == 8
        assert path.parent == temp_dir / "logs"
        assert path.name.startswith("merge_")
        assert path.name.endswith(f"_{task_id}.log")

    def test_task_logging_writes_file(self, temp_dir):
        _, path = setup_task_logging(temp_dir, prefix="merge")
        try:
            get_logger("pdfmerge.test").info("Conversion started", files=2)
            for handler in logging.getLogger().handlers:
                handler.flush()

            text = path.read_text(encoding="utf-8")
            assert "Conversion started |" in text
            assert "files=2" in text
            # Plain key-value lines, no colour codes in the file
            assert "\x1b[" not in text
        finally:
            setup_logging(level="WARNING")
