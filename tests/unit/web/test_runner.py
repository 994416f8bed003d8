"""Tests for the uvicorn logging config."""

from uvicorn.config import LOGGING_CONFIG

from finpilot.web.runner import ACCESS_LOG_FORMAT, DEFAULT_LOG_FORMAT, build_log_config


class TestBuildLogConfig:
    def test_uses_finpilot_formats(self):
        log_config = build_log_config(debug=False)
        assert log_config["formatters"]["access"]["fmt"] == ACCESS_LOG_FORMAT
        assert log_config["formatters"]["default"]["fmt"] == DEFAULT_LOG_FORMAT
        assert log_config["loggers"]["uvicorn"]["level"] == "INFO"

    def test_debug_level(self):
        assert build_log_config(debug=True)["loggers"]["uvicorn"]["level"] == "DEBUG"

    def test_uvicorn_defaults_untouched(self):
        build_log_config(debug=True)
        assert LOGGING_CONFIG["formatters"]["access"]["fmt"] != ACCESS_LOG_FORMAT
