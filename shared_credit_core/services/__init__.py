"""Service layer for business logic."""

from .base_service import SessionManagedService
from .decryption_service import CipherDecryptor, DecryptionPass, Decryptor
from .revocation_service import RevocationService, matches_credential
from .shared_credit_service import SharedCreditService

__all__ = [
    "CipherDecryptor",
    "DecryptionPass",
    "Decryptor",
    "RevocationService",
    "SessionManagedService",
    "SharedCreditService",
    "matches_credential",
]
