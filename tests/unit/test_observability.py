import pytest
import structlog
from unittest.mock import MagicMock, patch
from pickem.utils.logging import setup_logging
from pickem.utils.observability import (
    CORRELATION_ID,
    Logger,
    MetricsRegistry,
    StructlogConfig,
    get_metrics,
)

class TestObservability:

    @pytest.fixture
    def mock_logger(self):
        return MagicMock()

    @pytest.fixture
    def reset_structlog(self):
        yield
        structlog.reset_defaults()

    def test_logger_event_structure(self, mock_logger):
        """Log events include required context fields."""
        with patch("structlog.get_logger", return_value=mock_logger):
            logger = Logger("test_module")
            logger.log_event("test_event", custom_field=123)

            mock_logger.info.assert_called_once()
            call_args = mock_logger.info.call_args

            assert call_args[0][0] == "test_event"

            kwargs = call_args[1]
            assert kwargs["module"] == "test_module"
            assert kwargs["custom_field"] == 123

    def test_logger_warning_uses_correlation_id(self, mock_logger):
        token = CORRELATION_ID.set("abc-123")
        try:
            with patch("structlog.get_logger", return_value=mock_logger):
                Logger("test_module").log_warning("slow_down", attempt=2)
        finally:
            CORRELATION_ID.reset(token)

        kwargs = mock_logger.warning.call_args[1]
        assert kwargs["correlation_id"] == "abc-123"
        assert kwargs["attempt"] == 2

    def test_logger_error_capture(self, mock_logger):
        """Error logs capture exception info."""
        with patch("structlog.get_logger", return_value=mock_logger):
            logger = Logger("test_module")
            try:
                raise ValueError("Oops")
            except ValueError as e:
                logger.log_error("test_error", exc_info=e)

            mock_logger.error.assert_called_once()
            kwargs = mock_logger.error.call_args[1]
            assert kwargs["exc_info"] is not None

    def test_metrics_registry_initialization(self):
        """Metrics registry initializes the request and retry counters."""
        registry = MetricsRegistry()

        assert registry.api_requests is not None
        assert registry.api_errors is not None
        assert registry.retry_attempts is not None

    def test_registries_are_independent(self):
        first = MetricsRegistry()
        second = MetricsRegistry()

        first.retry_attempts.inc()

        assert first.registry.get_sample_value("pickem_retry_attempts_total") == 1.0
        assert second.registry.get_sample_value("pickem_retry_attempts_total") == 0.0

    def test_get_metrics_is_singleton(self):
        assert get_metrics() is get_metrics()

    def test_production_renders_json(self, reset_structlog, capsys):
        StructlogConfig.configure(env="production", log_level="INFO")
        structlog.get_logger("json_test").info("hello", answer=42)

        err = capsys.readouterr().err
        assert '"event": "hello"' in err
        assert '"answer": 42' in err


class TestSetupLogging:

    def test_json_lines_to_file(self, tmp_path):
        log_file = tmp_path / "logs" / "pickem.log"
        logger = setup_logging(name="pickem.test_json", level="INFO", log_format="json", log_file=log_file)

        logger.getChild("retry").warning("retry 1/3 in 1.00s")
        for handler in logger.handlers:
            handler.flush()

        line = log_file.read_text().strip()
        assert '"event": "retry 1/3 in 1.00s"' in line
        assert '"level": "warning"' in line
        assert '"logger": "pickem.test_json.retry"' in line

    def test_handlers_not_duplicated(self):
        setup_logging(name="pickem.test_dupes", level="DEBUG")
        logger = setup_logging(name="pickem.test_dupes", level="DEBUG")
        assert len(logger.handlers) == 1
