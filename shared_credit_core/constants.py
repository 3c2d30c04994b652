"""
Constants and enums for the shared credit engine.

This module centralizes all magic strings and constants used throughout
the library to ensure consistency and maintainability.
"""

from enum import Enum


class ServiceClass(str, Enum):
    """The two fixed slot sub-types a credential grants."""

    PRIMARY = "primary"
    SECONDARY = "secondary"


class DurationCategory(str, Enum):
    """Billing-cycle buckets used to match credentials to plans."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMIANNUAL = "semiannual"
    ANNUAL = "annual"


class ReadScope(str, Enum):
    """Scope of a snapshot read."""

    TENANT = "tenant"
    GLOBAL = "global"


class RevocationStatus(str, Enum):
    """Outcome of a revocation request."""

    DELETED = "deleted"
    NOTHING_TO_DELETE = "nothing_to_delete"


class OperationStatus(str, Enum):
    """Status values for operations."""

    SUCCESS = "success"
    ERROR = "error"


class LogLevel(str, Enum):
    """Standard logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnvironmentVariable(str, Enum):
    """Standard environment variable names."""

    DATABASE_URL = "DATABASE_URL"
    APP_ENV = "APP_ENV"
    LOG_LEVEL = "LOG_LEVEL"
    DEBUG = "DEBUG"
    ENCRYPTION_KEY = "CREDENTIAL_ENCRYPTION_KEY"
    MAX_SHARES = "MAX_SHARES"


# Numeric constants
class Limits:
    """System limits and thresholds."""

    # Customer records allowed to share one decrypted login, system-wide
    MAX_SHARES = 3
    MAX_MEMBER_NAMES_SHOWN = 5


class DurationBounds:
    """Inclusive upper bound, in days, of each duration category."""

    MONTHLY = 35
    QUARTERLY = 95
    SEMIANNUAL = 185
    ANNUAL = 370


class CipherParams:
    """AES-GCM parameters for stored credentials."""

    KEY_BYTES = 32
    IV_BYTES = 12
    # Shorter base64 strings cannot hold an IV plus a tag
    MIN_ENCODED_LENGTH = 20
    DEFAULT_DEV_KEY = "default-32-char-key-for-aes256!"
