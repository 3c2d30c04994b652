"""
Partition customer records into credential groups.

Groups are keyed on the decrypted login/password pair, never on the stored
ciphertext: two rows encrypted with different IVs, or one encrypted and one
legacy plaintext, that decrypt to the same pair belong to one group.
"""

from typing import Dict, Iterable, List, NamedTuple, Optional

from ..schemas.customer_schema import CustomerRecord


class CredentialKey(NamedTuple):
    """Decrypted login/password pair identifying a credential on a server."""

    login: str
    password: str


def credential_key(record: CustomerRecord) -> Optional[CredentialKey]:
    """
    Build the grouping key for a record.

    Returns:
        The key, or None when the record has no login and so cannot share
    """
    if not record.login:
        return None
    return CredentialKey(record.login, record.password or "")


def group_by_credential(
    records: Iterable[CustomerRecord], server_id: Optional[str] = None
) -> Dict[CredentialKey, List[CustomerRecord]]:
    """
    Group records of one server by credential.

    Args:
        records: Customer records, already decrypted
        server_id: When given, records of other servers are ignored

    Returns:
        Mapping of credential key to members, in input order
    """
    groups: Dict[CredentialKey, List[CustomerRecord]] = {}
    for record in records:
        if server_id is not None and record.server_id != server_id:
            continue
        key = credential_key(record)
        if key is None:
            continue
        groups.setdefault(key, []).append(record)
    return groups


def group_by_server(
    records: Iterable[CustomerRecord],
) -> Dict[str, Dict[CredentialKey, List[CustomerRecord]]]:
    """Group records per server, then per credential."""
    by_server: Dict[str, List[CustomerRecord]] = {}
    for record in records:
        by_server.setdefault(record.server_id, []).append(record)
    return {server_id: group_by_credential(members) for server_id, members in by_server.items()}
