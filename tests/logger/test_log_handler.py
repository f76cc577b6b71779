import json

import loguru
import pytest

from authkit.logger import LogFormat, LoggerHandler, init_logger, logger
from authkit.toolkit import context


@pytest.fixture
def log_dir(tmp_path):
    base_log_dir = tmp_path / "logs"
    base_log_dir.mkdir(exist_ok=True)
    yield base_log_dir
    loguru.logger.remove()


def _read_lines(base_log_dir) -> list[dict]:
    files = list(base_log_dir.glob("*.log"))
    assert len(files) == 1
    return [json.loads(line) for line in files[0].read_text(encoding="utf-8").splitlines() if line.strip()]


def test_json_log_carries_trace_id(log_dir):
    handler = LoggerHandler(base_log_dir=log_dir, enqueue=False, log_format=LogFormat.JSON)
    log = handler.setup(write_to_file=True, write_to_console=False)

    token = context.set_trace_id("abc123")
    try:
        log.info("token exchanged")
    finally:
        context.reset_trace_id(token)
    log.info("outside login")

    records = {r["message"]: r for r in _read_lines(log_dir)}
    assert records["token exchanged"]["trace_id"] == "abc123"
    assert records["token exchanged"]["level"] == "INFO"
    assert records["outside login"]["trace_id"] == "-"
    assert handler.is_initialized is True


def test_bound_trace_id_takes_precedence(log_dir):
    log = LoggerHandler(base_log_dir=log_dir, enqueue=False, log_format=LogFormat.JSON).setup(write_to_console=False)

    token = context.set_trace_id("from-context")
    try:
        log.bind(trace_id="from-bind").info("bound")
    finally:
        context.reset_trace_id(token)

    record = next(r for r in _read_lines(log_dir) if r["message"] == "bound")
    assert record["trace_id"] == "from-bind"


def test_json_content(log_dir):
    log = LoggerHandler(base_log_dir=log_dir, enqueue=False, log_format=LogFormat.JSON).setup(write_to_console=False)

    log.bind(json_content={"platform": "qq"}).info("profile")

    record = next(r for r in _read_lines(log_dir) if r["message"] == "profile")
    assert record["json_content"] == {"platform": "qq"}


def test_init_logger_replaces_proxy_target(log_dir):
    init_logger(base_log_dir=log_dir, enqueue=False, log_format="json", write_to_console=False)

    logger.warning("via proxy")

    record = next(r for r in _read_lines(log_dir) if r["message"] == "via proxy")
    assert record["level"] == "WARNING"


def test_missing_parent_dir(tmp_path):
    handler = LoggerHandler(base_log_dir=tmp_path / "missing" / "logs", enqueue=False)
    with pytest.raises(FileNotFoundError):
        handler.setup(write_to_console=False)
