"""
Tests for the logging module.
"""

import json

import pytest
import structlog


class TestConfigureLogging:

    def test_configure_development_mode(self):
        from core.logging import configure_logging

        configure_logging(json_logs=False, log_level="DEBUG")

    def test_configure_log_level(self):
        import logging
        from core.logging import configure_logging

        configure_logging(log_level="WARNING")

        assert logging.getLogger().level == logging.WARNING

    def test_json_output_is_valid_json(self, capsys):
        from core.logging import configure_logging, get_logger

        configure_logging(json_logs=True, log_level="INFO")
        logger = get_logger("json_test")

        logger.info("Theme batch mapped", processed=2)

        captured = capsys.readouterr()
        for line in captured.out.strip().split("\n"):
            if line:
                data = json.loads(line)
                assert "event" in data


class TestContextBinding:

    def test_bind_and_clear_context(self):
        from core.logging import bind_context, clear_context

        clear_context()
        bind_context(request_id="abc", mode="all")

        ctx = structlog.contextvars.get_contextvars()
        assert ctx.get("request_id") == "abc"
        assert ctx.get("mode") == "all"

        clear_context()
        assert "mode" not in structlog.contextvars.get_contextvars()

    def test_unbind_specific_context(self):
        from core.logging import bind_context, unbind_context, clear_context

        clear_context()
        bind_context(request_id="abc", batch_size=2)
        unbind_context("batch_size")

        ctx = structlog.contextvars.get_contextvars()
        assert ctx.get("request_id") == "abc"
        assert "batch_size" not in ctx

        clear_context()


class TestLoggerMixin:

    def test_runner_has_logger(self, batch_runner):
        from core.logging import configure_logging

        configure_logging(json_logs=False)

        assert batch_runner.logger is not None
        batch_runner.logger.info("Working")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
