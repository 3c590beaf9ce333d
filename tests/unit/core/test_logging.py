"""Tests for structured logging helpers."""

from unittest.mock import MagicMock, patch

import pytest
import structlog

from kubesnoop.core.config.logging_config import LoggingConfig
from kubesnoop.core.utils.logging import configure_logging, log_operation


class TestLogOperation:
    def test_logs_start_and_completion(self):
        log = MagicMock()
        with patch("kubesnoop.core.utils.logging.logger") as mock_logger:
            mock_logger.bind.return_value = log
            with log_operation("evaluate_all", pods=2):
                pass

        mock_logger.bind.assert_called_once_with(operation="evaluate_all", pods=2)
        assert [call.args[0] for call in log.info.call_args_list] == ["operation_started", "operation_completed"]

    def test_logs_and_reraises_failures(self):
        log = MagicMock()
        with patch("kubesnoop.core.utils.logging.logger") as mock_logger:
            mock_logger.bind.return_value = log
            with pytest.raises(RuntimeError):
                with log_operation("evaluate_all"):
                    raise RuntimeError("store down")

        assert log.error.call_args.args[0] == "operation_failed"
        assert log.error.call_args.kwargs["error"] == "store down"


class TestConfigureLogging:
    def test_writes_json_to_log_file(self, tmp_path):
        log_file = tmp_path / "kubesnoop.log"
        configure_logging(LoggingConfig(level="INFO", format="json", file_path=str(log_file)))
        try:
            structlog.get_logger("kubesnoop.test").info("rules_loaded", count=3)
        finally:
            configure_logging(LoggingConfig())

        content = log_file.read_text()
        assert '"event": "rules_loaded"' in content
        assert '"count": 3' in content
