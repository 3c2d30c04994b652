"""Utility modules for the shared credit engine."""

# Encryption utilities
from .encryption_utils import (
    decrypt_value,
    derive_key,
    encrypt_value,
    looks_encrypted,
)

# Logging
from .logger import ContextAwareLogger, TenantContextFilter, configure_logging, get_logger

__all__ = [
    # Encryption
    "decrypt_value",
    "derive_key",
    "encrypt_value",
    "looks_encrypted",
    # Logging
    "ContextAwareLogger",
    "TenantContextFilter",
    "configure_logging",
    "get_logger",
]
