"""
Unit tests for logger utilities.
"""

import logging
from unittest.mock import Mock

from shared_credit_core.context.tenant_context import tenant_context
from shared_credit_core.utils.logger import (
    ContextAwareLogger,
    TenantContextFilter,
    configure_logging,
    get_logger,
)


class TestContextAwareLogger:
    """Test ContextAwareLogger functionality."""

    def setup_method(self):
        self.mock_logger = Mock(spec=logging.Logger)
        self.context_logger = ContextAwareLogger(self.mock_logger)

    def test_set_level(self):
        self.context_logger.set_level(logging.DEBUG)
        self.mock_logger.setLevel.assert_called_once_with(logging.DEBUG)

    def test_no_extras(self):
        self.context_logger.info("Test message")
        self.mock_logger.info.assert_called_once_with("Test message", extra={})

    def test_extras_appended_to_message(self):
        extra = {"server_id": "srv-1", "deleted_count": 2}

        self.context_logger.warning("Revoked", extra=extra)

        self.mock_logger.warning.assert_called_once_with(
            "Revoked | server_id=srv-1 | deleted_count=2", extra=extra
        )

    def test_exc_info_forwarded(self):
        self.context_logger.error("Boom", exc_info=True)
        self.mock_logger.error.assert_called_once_with("Boom", extra={}, exc_info=True)


class TestTenantContextFilter:
    def test_adds_tenant_when_set(self):
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)

        with tenant_context("tenant-filter"):
            assert TenantContextFilter().filter(record) is True

        assert record.tenant_id == "tenant-filter"

    def test_no_tenant(self):
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        assert TenantContextFilter().filter(record) is True
        assert not hasattr(record, "tenant_id")


class TestConfigureLogging:
    def test_configured_logger_is_returned_by_get_logger(self):
        configured = configure_logging("unit", log_level="DEBUG")

        assert isinstance(configured, ContextAwareLogger)
        assert get_logger() is configured
        assert configured.logger.name == "shared_credit_core.unit"
        assert configured.logger.level == logging.DEBUG

    def test_handlers_not_duplicated(self):
        configure_logging("unit")
        logger = configure_logging("unit").logger
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].filters[0], TenantContextFilter)

    def test_get_logger_falls_back_to_root(self):
        logger = get_logger()
        assert isinstance(logger, ContextAwareLogger)
        assert logger.logger is logging.getLogger()
