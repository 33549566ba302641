"""Tests for the context-aware log formatter."""
import io
import logging
from pathlib import Path
from tx3_build.core.logging import ContextFormatter, configure_logging, log_context
from tx3_build.core.workflow import BuildPhase

FORMAT = "%(levelname)s [phase=%(phase)s output_dir=%(output_dir)s] - %(message)s"


def make_record(**extra):
    record = logging.LogRecord("tx3_build.test", logging.INFO, __file__, 1, "Generating", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_defaults_missing_fields():
    assert ContextFormatter(FORMAT).format(make_record()) == "INFO [phase=- output_dir=-] - Generating"


def test_formatter_uses_extra_fields():
    record = make_record(phase="BUILD_START", output_dir="/proj/node_modules/.tx3")
    assert ContextFormatter(FORMAT).format(record) == (
        "INFO [phase=BUILD_START output_dir=/proj/node_modules/.tx3] - Generating"
    )


def test_log_context_uses_phase_value():
    assert log_context(BuildPhase.REGENERATE, Path("/proj/out")) == {
        "phase": "REGENERATE",
        "output_dir": str(Path("/proj/out")),
    }
    assert log_context(BuildPhase.RESOLVE) == {"phase": "RESOLVE", "output_dir": "-"}


def test_configure_logging_writes_context_to_stream():
    stream = io.StringIO()
    root = logging.getLogger()
    saved = root.handlers[:], root.level
    root.handlers = []
    try:
        handler = configure_logging("info", stream=stream)
        logging.getLogger("tx3_build.test").info("Generating", extra=log_context(BuildPhase.BUILD_START, "/out"))
        assert handler in root.handlers
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        root.handlers, level = saved
        root.setLevel(level)
    assert "[phase=BUILD_START output_dir=/out] - Generating" in stream.getvalue()
