"""
System-wide usage count of a decrypted login.

The input must be the global snapshot: every customer record of every tenant
and every server. Counting over a tenant-scoped list would let the same login
be attached beyond the share cap through another tenant.
"""

from collections import Counter
from typing import Iterable

from ..schemas.customer_schema import CustomerRecord


def count_global_usage(login: str, records: Iterable[CustomerRecord]) -> int:
    """Count records whose decrypted login equals login."""
    if not login:
        return 0
    return sum(1 for record in records if record.login == login)


class GlobalUsageIndex:
    """Login usage counts built once per computation pass."""

    def __init__(self, records: Iterable[CustomerRecord]):
        self._counts = Counter(record.login for record in records if record.login)

    def usage(self, login: str) -> int:
        if not login:
            return 0
        return self._counts.get(login, 0)

    def is_exhausted(self, login: str, max_shares: int) -> bool:
        return self.usage(login) >= max_shares

    def __len__(self) -> int:
        return len(self._counts)
