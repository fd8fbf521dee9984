"""Тесты системы логирования: конфиг, форматтеры, фильтры, PipelineLogger."""

import json
import logging
import sys

import pytest

from http_pipeline.core.logging import (
    ColoredFormatter,
    CorrelationIdFilter,
    ExtraFieldsFilter,
    JSONFormatter,
    LogFormat,
    LoggingConfig,
    LogLevel,
    PipelineLogger,
    TextFormatter,
    clear_correlation_id,
    configure_logging,
    correlation_scope,
    get_correlation_id,
    get_formatter,
    get_logger,
    new_correlation_id,
    set_correlation_id,
)
from http_pipeline.core.logging.handlers import create_file_handler


def _record(message="Exchange completed", level=logging.INFO, **fields):
    record = logging.LogRecord("http_pipeline", level, __file__, 10, message, None, None)
    for key, value in fields.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def reset_correlation():
    clear_correlation_id()
    yield
    clear_correlation_id()

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# LoggingConfig
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TestLoggingConfig:

    def test_defaults(self):
        config = LoggingConfig()
        assert config.level is LogLevel.INFO
        assert config.format is LogFormat.TEXT
        assert config.enable_console is True
        assert config.enable_file is False

    def test_create_from_strings(self):
        config = LoggingConfig.create(level="debug", format="JSON", extra_fields={"service": "billing"})
        assert config.level is LogLevel.DEBUG
        assert config.format is LogFormat.JSON
        assert config.extra_fields["service"] == "billing"

    def test_string_values_coerced(self):
        config = LoggingConfig(level="warning", format="colored")
        assert config.level is LogLevel.WARNING
        assert config.format is LogFormat.COLORED

    def test_file_requires_path(self):
        with pytest.raises(ValueError, match="file_path is required"):
            LoggingConfig.create(enable_file=True)

    def test_invalid_sizes(self):
        with pytest.raises(ValueError, match="max_bytes"):
            LoggingConfig(max_bytes=0)
        with pytest.raises(ValueError, match="backup_count"):
            LoggingConfig(backup_count=-1)

    def test_extra_fields_are_read_only(self):
        config = LoggingConfig.create(extra_fields={"env": "test"})
        with pytest.raises(TypeError):
            config.extra_fields["env"] = "prod"

    def test_level_to_int(self):
        assert LogLevel.ERROR.to_int() == logging.ERROR

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Форматтеры
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TestFormatters:

    def test_json(self):
        output = JSONFormatter().format(_record(method="GET", status_code=200))
        data = json.loads(output)
        assert data["level"] == "INFO"
        assert data["logger"] == "http_pipeline"
        assert data["message"] == "Exchange completed"
        assert data["method"] == "GET"
        assert data["status_code"] == 200
        assert data["timestamp"].endswith("+00:00")

    def test_json_non_serializable_field(self):
        data = json.loads(JSONFormatter().format(_record(target=object)))
        assert "object" in data["target"]

    def test_json_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", None, sys.exc_info())
        data = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in data["exception"]

    def test_text(self):
        output = TextFormatter().format(_record(url="https://api.example.com"))
        assert "[INFO] [http_pipeline] Exchange completed" in output
        assert output.endswith("url=https://api.example.com")

    def test_colored(self):
        record = _record(level=logging.ERROR)
        output = ColoredFormatter().format(record)
        assert "\033[31mERROR\033[0m" in output
        assert record.levelname == "ERROR"

    def test_get_formatter(self):
        assert isinstance(get_formatter("json"), JSONFormatter)
        assert isinstance(get_formatter("TEXT"), TextFormatter)
        assert isinstance(get_formatter("colored"), ColoredFormatter)
        with pytest.raises(ValueError, match="Unknown format type"):
            get_formatter("xml")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Correlation id
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TestCorrelation:

    def test_new_ids_are_unique(self):
        first, second = new_correlation_id(), new_correlation_id()
        assert first != second
        assert len(first) == 16

    def test_set_get_clear(self):
        set_correlation_id("req-1")
        assert get_correlation_id() == "req-1"
        clear_correlation_id()
        assert get_correlation_id() is None

    def test_scope_generates_and_clears(self):
        with correlation_scope() as cid:
            assert get_correlation_id() == cid
        assert get_correlation_id() is None

    def test_nested_scope_restores_outer(self):
        with correlation_scope("outer"):
            with correlation_scope("inner") as inner:
                assert inner == "inner"
                assert get_correlation_id() == "inner"
            assert get_correlation_id() == "outer"

    def test_scope_restores_on_error(self):
        set_correlation_id("outer")
        with pytest.raises(KeyError):
            with correlation_scope("inner"):
                raise KeyError("x")
        assert get_correlation_id() == "outer"

    def test_filter_adds_id(self):
        record = _record()
        with correlation_scope("req-9"):
            assert CorrelationIdFilter().filter(record) is True
        assert record.correlation_id == "req-9"

    def test_filter_keeps_explicit_id(self):
        record = _record(correlation_id="explicit")
        with correlation_scope("req-9"):
            CorrelationIdFilter().filter(record)
        assert record.correlation_id == "explicit"

    def test_extra_fields_filter(self):
        record = _record(service="already")
        ExtraFieldsFilter({"service": "billing", "env": "test"}).filter(record)
        assert record.service == "already"
        assert record.env == "test"

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# PipelineLogger
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TestPipelineLogger:

    def test_passive_logger_propagates(self, caplog):
        caplog.set_level(logging.DEBUG, logger="tests.passive")
        logger = PipelineLogger(name="tests.passive")

        logger.debug("Exchange started", method="GET")

        assert caplog.records[-1].method == "GET"
        assert logger.logger.propagate is True
        assert logger.logger.handlers == []

    def test_kwargs_are_masked(self, caplog):
        caplog.set_level(logging.INFO, logger="tests.masked")
        logger = PipelineLogger(name="tests.masked")

        logger.info("Request", authorization="Bearer abc", url="https://x/?token=secret")

        record = caplog.records[-1]
        assert record.authorization == "***REDACTED***"
        assert "secret" not in record.url

    def test_level_filtering(self, caplog):
        caplog.set_level(logging.WARNING, logger="tests.levels")
        logger = PipelineLogger(name="tests.levels")

        logger.info("hidden")
        logger.warning("shown")

        assert [r.getMessage() for r in caplog.records if r.name == "tests.levels"] == ["shown"]
        assert logger.is_enabled_for(logging.WARNING)

    def test_exception_includes_traceback(self, caplog):
        caplog.set_level(logging.ERROR, logger="tests.exc")
        logger = PipelineLogger(name="tests.exc")
        try:
            raise ValueError("bad")
        except ValueError:
            logger.exception("Exchange failed", error_type="ValueError")
        assert caplog.records[-1].exc_info is not None

    def test_configured_logger_writes_json_file(self, logging_config_with_file):
        logger = PipelineLogger(logging_config_with_file, name="tests.file")
        try:
            with correlation_scope("cid-1"):
                logger.info("Exchange started", method="GET", url="https://api.example.com/?api_key=k")
        finally:
            logger.close()

        with open(logging_config_with_file.file_path, encoding="utf-8") as f:
            lines = [json.loads(line) for line in f if line.strip()]

        assert len(lines) == 1
        assert lines[0]["message"] == "Exchange started"
        assert lines[0]["correlation_id"] == "cid-1"
        assert lines[0]["method"] == "GET"
        assert lines[0]["url"] == "https://api.example.com/?api_key=***REDACTED***"
        assert logger.logger.propagate is False

    def test_configured_logger_console(self, logging_config, capsys):
        logger = PipelineLogger(logging_config, name="tests.console")
        try:
            logger.info("hello", status_code=200)
        finally:
            logger.close()
        assert "hello status_code=200" in capsys.readouterr().out

    def test_reconfigure_replaces_handlers(self, logging_config):
        first = PipelineLogger(logging_config, name="tests.reconfigure")
        second = PipelineLogger(logging_config, name="tests.reconfigure")
        try:
            assert len(second.logger.handlers) == 1
        finally:
            first.close()
            second.close()

    def test_close_is_idempotent(self, logging_config):
        logger = PipelineLogger(logging_config, name="tests.close")
        logger.close()
        logger.close()
        assert logger.logger.handlers == []

    def test_context_manager(self, logging_config):
        with PipelineLogger(logging_config, name="tests.ctx") as logger:
            assert logger.logger.handlers
        assert logger.logger.handlers == []

    def test_extra_fields_in_file(self, tmp_path):
        config = LoggingConfig.create(
            format="json", enable_console=False, enable_file=True,
            file_path=str(tmp_path / "extra.log"), extra_fields={"service": "billing"},
        )
        with PipelineLogger(config, name="tests.extra") as logger:
            logger.info("hello")
        data = json.loads((tmp_path / "extra.log").read_text(encoding="utf-8").strip())
        assert data["service"] == "billing"


def test_file_handler_creates_directories(tmp_path):
    path = tmp_path / "nested" / "dir" / "pipeline.log"
    handler = create_file_handler(str(path), logging.INFO, TextFormatter(), max_bytes=1024, backup_count=2)
    try:
        assert path.parent.is_dir()
        assert handler.maxBytes == 1024
        assert handler.backupCount == 2
    finally:
        handler.close()


def test_configure_logging_routes_package_records(logging_config_with_file):
    configured = configure_logging(logging_config_with_file)
    try:
        assert get_logger() is configured
        # Passive loggers of the same name now reach the configured handlers
        PipelineLogger().info("Exchange started", method="GET")
    finally:
        configured.close()
        configured.logger.propagate = True
        configured.logger.setLevel(logging.NOTSET)

    with open(logging_config_with_file.file_path, encoding="utf-8") as f:
        data = json.loads(f.readline())
    assert data["logger"] == "http_pipeline"
    assert data["method"] == "GET"
