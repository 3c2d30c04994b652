"""
Encryption utilities for stored customer credentials.

Credentials are stored as base64(IV || AES-256-GCM ciphertext). Each call to
encrypt_value draws a fresh IV, so the same plaintext never produces the same
ciphertext twice. Values written before encryption was introduced are stored
as plaintext; decrypt_value reports those as DecryptionError and leaves the
fallback decision to the caller.
"""

import base64
import binascii
import os
import re
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..config import get_config
from ..constants import CipherParams
from ..exceptions import DecryptionError

_BASE64_PATTERN = re.compile(r"^[A-Za-z0-9+/]+=*$")


def derive_key(secret: Optional[str] = None) -> bytes:
    """
    Build the 32-byte AES key from the configured secret.

    The secret is padded with "0" or truncated to exactly 32 bytes.

    Args:
        secret: Secret string, defaults to the configured encryption key

    Returns:
        Raw key bytes
    """
    if secret is None:
        secret = get_config().security.encryption_key
    return secret.encode("utf-8").ljust(CipherParams.KEY_BYTES, b"0")[: CipherParams.KEY_BYTES]


def looks_encrypted(value: Optional[str]) -> bool:
    """Check whether a stored value has the shape of an encrypted credential."""
    if not value or len(value) < CipherParams.MIN_ENCODED_LENGTH:
        return False
    return bool(_BASE64_PATTERN.match(value))


def encrypt_value(value: str, secret: Optional[str] = None) -> str:
    """
    Encrypt a credential value.

    Args:
        value: Plaintext to encrypt
        secret: Optional secret overriding the configured key

    Returns:
        base64 encoded IV + ciphertext, or "" for empty input
    """
    if not value:
        return ""

    iv = os.urandom(CipherParams.IV_BYTES)
    sealed = AESGCM(derive_key(secret)).encrypt(iv, value.encode("utf-8"), None)
    return base64.b64encode(iv + sealed).decode("ascii")


def decrypt_value(ciphertext: Optional[str], secret: Optional[str] = None) -> Optional[str]:
    """
    Decrypt a credential value.

    Args:
        ciphertext: Stored value
        secret: Optional secret overriding the configured key

    Returns:
        Decrypted string or None for empty input

    Raises:
        DecryptionError: If the value is not well-formed ciphertext or the key does not match
    """
    if not ciphertext:
        return None

    if not looks_encrypted(ciphertext):
        raise DecryptionError("Value is not in encrypted form", reason="malformed")

    try:
        combined = base64.b64decode(ciphertext, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecryptionError("Value is not valid base64", reason="malformed", cause=e) from e

    if len(combined) <= CipherParams.IV_BYTES:
        raise DecryptionError("Value too short to hold ciphertext", reason="malformed")

    iv, sealed = combined[: CipherParams.IV_BYTES], combined[CipherParams.IV_BYTES :]
    try:
        plaintext = AESGCM(derive_key(secret)).decrypt(iv, sealed, None)
    except InvalidTag as e:
        raise DecryptionError("Authentication tag mismatch", reason="key_mismatch", cause=e) from e

    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecryptionError("Decrypted bytes are not UTF-8", reason="malformed", cause=e) from e
