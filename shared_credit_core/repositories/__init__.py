"""Repository layer for data access."""

from .base_repository import BaseRepository
from .customer_repository import CustomerRepository
from .server_repository import ServerRepository

__all__ = [
    "BaseRepository",
    "CustomerRepository",
    "ServerRepository",
]
