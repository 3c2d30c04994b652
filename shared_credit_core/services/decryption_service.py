"""
Credential decryption for one offer computation.

A DecryptionPass turns stored customer rows into CustomerRecord values with
plaintext credentials. It memoizes one task per customer id, so a record
that appears in both the tenant and the global snapshot is decrypted once.
A pass lives for a single computation and is discarded afterwards.
"""

import asyncio
from typing import Dict, Iterable, List, Optional, Protocol

from ..db.db_customer_models import Customer
from ..exceptions import DecryptionError
from ..schemas.customer_schema import CustomerRecord
from ..utils.encryption_utils import decrypt_value, encrypt_value
from ..utils.logger import get_logger


class Decryptor(Protocol):
    """Anything that can turn stored ciphertext into plaintext."""

    async def decrypt(self, ciphertext: str) -> str:
        ...


class CipherDecryptor:
    """AES-256-GCM decryptor backed by the configured encryption key."""

    def __init__(self, secret: Optional[str] = None):
        self.secret = secret

    async def decrypt(self, ciphertext: str) -> str:
        return decrypt_value(ciphertext, self.secret)

    def encrypt(self, value: str) -> str:
        return encrypt_value(value, self.secret)


class DecryptionPass:
    """Memoized, concurrent decryption of customer credentials."""

    def __init__(self, decryptor: Optional[Decryptor] = None):
        self.decryptor = decryptor or CipherDecryptor()
        self.logger = get_logger()
        self.fallback_count = 0
        self._tasks: Dict[str, "asyncio.Task[CustomerRecord]"] = {}

    def __len__(self) -> int:
        return len(self._tasks)

    async def _decrypt_field(
        self, customer_id: str, field: str, stored: Optional[str]
    ) -> Optional[str]:
        if not stored:
            return None

        try:
            return await self.decryptor.decrypt(stored)
        except DecryptionError as e:
            # Legacy rows were written before encryption; use them as they are
            self.fallback_count += 1
            self.logger.warning(
                "Credential decryption failed, treating stored value as plaintext",
                extra={
                    "customer_id": customer_id,
                    "field": field,
                    "reason": e.context.get("reason"),
                    "error_id": e.error_id,
                },
            )
            return stored

    async def _decrypt_customer(self, customer: Customer) -> CustomerRecord:
        login, password = await asyncio.gather(
            self._decrypt_field(customer.id, "login", customer.login),
            self._decrypt_field(customer.id, "password", customer.password),
        )
        return CustomerRecord(
            id=customer.id,
            tenant_id=customer.tenant_id,
            server_id=customer.server_id,
            name=customer.name,
            service_class=customer.service_class,
            expiration_date=customer.expiration_date,
            login=login,
            password=password,
            login_ciphertext=customer.login or None,
            password_ciphertext=customer.password or None,
        )

    def record(self, customer: Customer) -> "asyncio.Task[CustomerRecord]":
        """
        Return the decryption task for a customer, starting it on first request.

        Must be called with a running event loop.
        """
        task = self._tasks.get(customer.id)
        if task is None:
            task = asyncio.ensure_future(self._decrypt_customer(customer))
            self._tasks[customer.id] = task
        return task

    async def decrypt_all(self, customers: Iterable[Customer]) -> List[CustomerRecord]:
        """Decrypt many customers concurrently, preserving input order."""
        return list(await asyncio.gather(*(self.record(customer) for customer in customers)))
