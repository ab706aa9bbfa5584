"""Unit tests for ConsoleAdapter (structured console logging).

Tests cover:
- All LoggerProtocol methods (debug, info, warning, error, critical)
- Exception details added by error() and critical()
- Context binding
- Renderer selection (JSON vs console) and level filtering

Architecture:
- Unit tests with mocked structlog
- One output test against the real structlog pipeline
"""

import json
from unittest.mock import MagicMock, patch

import pytest

from src.infrastructure.logging.console_adapter import ConsoleAdapter

STRUCTLOG = "src.infrastructure.logging.console_adapter.structlog"


@pytest.mark.unit
class TestConsoleAdapterLogging:
    """Test ConsoleAdapter logging methods."""

    @pytest.mark.parametrize("level", ["debug", "info", "warning"])
    def test_logs_message_with_context(self, level):
        with patch(STRUCTLOG) as mock_structlog:
            mock_logger = MagicMock()
            mock_structlog.get_logger.return_value = mock_logger

            adapter = ConsoleAdapter()
            getattr(adapter, level)("session_created", session_id="abc12345...")

            getattr(mock_logger, level).assert_called_once_with(
                "session_created", session_id="abc12345..."
            )

    def test_error_adds_exception_details(self):
        with patch(STRUCTLOG) as mock_structlog:
            mock_logger = MagicMock()
            mock_structlog.get_logger.return_value = mock_logger

            adapter = ConsoleAdapter()
            adapter.error(
                "session_store_unavailable",
                error=TimeoutError("took too long"),
                operation="insert",
            )

            mock_logger.error.assert_called_once_with(
                "session_store_unavailable",
                operation="insert",
                error_type="TimeoutError",
                error_message="took too long",
            )

    def test_error_without_exception(self):
        with patch(STRUCTLOG) as mock_structlog:
            mock_logger = MagicMock()
            mock_structlog.get_logger.return_value = mock_logger

            adapter = ConsoleAdapter()
            adapter.error("cache_unreachable", host="redis")

            mock_logger.error.assert_called_once_with("cache_unreachable", host="redis")

    def test_critical_adds_exception_details(self):
        with patch(STRUCTLOG) as mock_structlog:
            mock_logger = MagicMock()
            mock_structlog.get_logger.return_value = mock_logger

            adapter = ConsoleAdapter()
            adapter.critical("startup_failed", error=RuntimeError("no db"))

            mock_logger.critical.assert_called_once_with(
                "startup_failed",
                error_type="RuntimeError",
                error_message="no db",
            )


@pytest.mark.unit
class TestConsoleAdapterContextBinding:
    """Test bind() and with_context()."""

    def test_bind_returns_new_adapter(self):
        with patch(STRUCTLOG) as mock_structlog:
            mock_logger = MagicMock()
            mock_bound_logger = MagicMock()
            mock_structlog.get_logger.return_value = mock_logger
            mock_logger.bind.return_value = mock_bound_logger

            adapter = ConsoleAdapter()
            bound = adapter.bind(component="session_manager")
            bound.info("session_renewed")

            mock_logger.bind.assert_called_once_with(component="session_manager")
            assert bound is not adapter
            mock_bound_logger.info.assert_called_once_with("session_renewed")

    def test_with_context_is_bind_alias(self):
        with patch(STRUCTLOG) as mock_structlog:
            mock_logger = MagicMock()
            mock_structlog.get_logger.return_value = mock_logger

            adapter = ConsoleAdapter()
            adapter.with_context(audit=True)

            mock_logger.bind.assert_called_once_with(audit=True)


@pytest.mark.unit
class TestConsoleAdapterConfiguration:
    """Test structlog configuration."""

    def test_json_renderer_selected(self):
        with patch(STRUCTLOG) as mock_structlog:
            ConsoleAdapter(use_json=True)

            mock_structlog.processors.JSONRenderer.assert_called_once()
            mock_structlog.dev.ConsoleRenderer.assert_not_called()

    def test_console_renderer_selected(self):
        with patch(STRUCTLOG) as mock_structlog:
            ConsoleAdapter(use_json=False)

            mock_structlog.dev.ConsoleRenderer.assert_called_once_with(colors=True)

    def test_unknown_level_falls_back_to_info(self):
        with patch(STRUCTLOG) as mock_structlog:
            ConsoleAdapter(level="chatty")

            mock_structlog.make_filtering_bound_logger.assert_called_once_with(20)

    def test_json_output_is_one_object_per_line(self, capsys):
        adapter = ConsoleAdapter(use_json=True, level="DEBUG")

        adapter.info("cache_warmed", tenant_id="t1")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["event"] == "cache_warmed"
        assert event["tenant_id"] == "t1"
        assert event["level"] == "info"
