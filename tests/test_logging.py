"""日志工具测试。"""

from __future__ import annotations

import pytest

from aurimyth.generic_api.common import LoggerMixin, get_trace_id, log_exceptions, logger, set_trace_id, setup_logging


def test_trace_id_roundtrip() -> None:
    set_trace_id("trace-abc")
    assert get_trace_id() == "trace-abc"


async def test_log_exceptions_reraises() -> None:
    messages: list[str] = []
    sink_id = logger.add(lambda message: messages.append(str(message)), level="ERROR")

    @log_exceptions
    async def broken() -> None:
        raise RuntimeError("boom")

    try:
        with pytest.raises(RuntimeError, match="boom"):
            await broken()
    finally:
        logger.remove(sink_id)

    assert any("broken" in message and "boom" in message for message in messages)


def test_logger_mixin_binds_class_name() -> None:
    class Worker(LoggerMixin):
        pass

    records: list[dict] = []
    sink_id = logger.add(lambda message: records.append(message.record), level="INFO")
    try:
        Worker().logger.info("hello")
    finally:
        logger.remove(sink_id)

    assert records[-1]["extra"]["name"].endswith("Worker")


def test_records_carry_current_trace_id() -> None:
    records: list[dict] = []
    sink_id = logger.add(lambda message: records.append(message.record), level="INFO")
    try:
        set_trace_id("trace-xyz")
        logger.info("inside request")
    finally:
        logger.remove(sink_id)

    assert records[-1]["extra"]["trace_id"] == "trace-xyz"


def test_file_format_renders_trace_id(tmp_path) -> None:
    log_file = tmp_path / "app.log"
    setup_logging("INFO", str(log_file))
    try:
        set_trace_id("trace-file")
        logger.info("written to file")
        logger.complete()
    finally:
        setup_logging("INFO")

    assert "| trace-file |" in log_file.read_text(encoding="utf-8")
