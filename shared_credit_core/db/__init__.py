"""
SQLAlchemy models for the shared credit engine.

This module provides a common entry point for all models.
"""

# Import base definitions
from .db_base import TimestampMixin, UUIDMixin, utc_now

# Import configuration
from .db_config import (
    Base,
    DatabaseManager,
    close_db,
    get_db_manager,
    import_all_models,
    initialize_db,
    parse_connection_string,
    set_db_manager,
)
from .db_customer_models import Customer
from .db_server_models import Server

__all__ = [
    # Base definitions
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "utc_now",
    # Configuration
    "DatabaseManager",
    "close_db",
    "get_db_manager",
    "import_all_models",
    "initialize_db",
    "parse_connection_string",
    "set_db_manager",
    # Models
    "Customer",
    "Server",
]
