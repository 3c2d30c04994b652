"""Tests for centralized configuration module."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError as PydanticValidationError

from shared_credit_core.config import (
    AllocationConfig,
    AppConfig,
    DatabaseConfig,
    LoggingConfig,
    SecurityConfig,
    get_config,
    reset_config,
    set_config,
)
from shared_credit_core.constants import CipherParams, Limits


class TestDatabaseConfig:
    def test_default_values(self):
        with patch.dict(os.environ, {}, clear=True):
            config = DatabaseConfig()
        assert config.connection_string == "sqlite:///./shared_credit.db"
        assert config.pool_size == 5
        assert config.echo is False

    def test_from_env(self):
        with patch.dict(os.environ, {"DATABASE_URL": "postgresql://u:p@localhost/db"}):
            assert DatabaseConfig().connection_string == "postgresql://u:p@localhost/db"


class TestLoggingConfig:
    def test_level_normalized(self):
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_invalid_level(self):
        with pytest.raises(PydanticValidationError):
            LoggingConfig(level="LOUD")


class TestSecurityConfig:
    def test_default_key(self):
        with patch.dict(os.environ, {}, clear=True):
            assert SecurityConfig().encryption_key == CipherParams.DEFAULT_DEV_KEY

    def test_key_from_env(self):
        with patch.dict(os.environ, {"CREDENTIAL_ENCRYPTION_KEY": "from-env"}):
            assert SecurityConfig().encryption_key == "from-env"


class TestAllocationConfig:
    def test_default_max_shares(self):
        assert AllocationConfig().max_shares == Limits.MAX_SHARES == 3

    def test_max_shares_from_env(self):
        with patch.dict(os.environ, {"MAX_SHARES": "5"}):
            assert AllocationConfig().max_shares == 5

    @pytest.mark.parametrize("value", [0, -1])
    def test_max_shares_must_be_positive(self, value):
        with pytest.raises(PydanticValidationError):
            AllocationConfig(max_shares=value)


class TestGlobalConfig:
    def test_singleton(self):
        assert get_config() is get_config()

    def test_set_and_reset(self):
        custom = AppConfig(environment="test")
        set_config(custom)
        assert get_config() is custom

        reset_config()
        assert get_config() is not custom

