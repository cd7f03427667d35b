"""Field-level encryption for partner contact records.

Uses AES-SIV (RFC 5297), a deterministic AEAD: equal plaintexts produce
equal ciphertexts under the same key, which lets the repository look rows
up by an encrypted email or phone number.

Security:
- 512-bit key (two AES-256 halves), hex encoded in configuration
- Ciphertext is URL-safe base64 text
- Plaintext and ciphertext are never logged
"""

from __future__ import annotations

import base64
import binascii
from typing import Any, Protocol, TypeVar

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESSIV

from .errors import DecryptionError, EncryptionConfigError


KEY_BYTES = 64

T = TypeVar("T")


class EntityEncryptor(Protocol):
    """Encrypts/decrypts a record."""

    def encrypt(self, entity: T) -> T:
        ...

    def decrypt(self, entity: T) -> T:
        ...

    def encrypt_value(self, value: str | None) -> str | None:
        ...


def parse_key(key_hex: str | None) -> bytes:
    """Decode a hex encryption key.

    Raises:
        EncryptionConfigError: If the key is not configured or invalid.
    """
    if not key_hex:
        raise EncryptionConfigError(
            "Encryption key not configured. "
            "Generate with: openssl rand -hex 64"
        )
    try:
        key = bytes.fromhex(key_hex.strip())
    except ValueError as e:
        raise EncryptionConfigError("Encryption key must be hex encoded") from e
    if len(key) != KEY_BYTES:
        raise EncryptionConfigError(
            f"Encryption key must be {KEY_BYTES} bytes hex ({KEY_BYTES * 2} hex chars). "
            "Generate with: openssl rand -hex 64"
        )
    return key


def encrypted_fields(entity: Any) -> tuple[str, ...]:
    """Names of the attributes stored encrypted for an entity's class."""
    return tuple(getattr(type(entity), "__encrypted_fields__", ()))


class EncryptionService:
    """AES-SIV implementation of EntityEncryptor."""

    def __init__(self, key: bytes):
        if len(key) != KEY_BYTES:
            raise EncryptionConfigError(f"Encryption key must be {KEY_BYTES} bytes")
        self._cipher = AESSIV(key)

    @classmethod
    def from_hex(cls, key_hex: str | None) -> "EncryptionService":
        return cls(parse_key(key_hex))

    def encrypt_value(self, value: str | None) -> str | None:
        """Encrypt a single string.

        Args:
            value: Plaintext, or None.

        Returns:
            Base64 ciphertext. None and empty strings are returned unchanged.
        """
        if not value:
            return value
        ciphertext = self._cipher.encrypt(value.encode("utf-8"), None)
        return base64.urlsafe_b64encode(ciphertext).decode("ascii")

    def decrypt_value(self, token: str | None) -> str | None:
        """Decrypt a single base64 ciphertext.

        Raises:
            DecryptionError: If the token is malformed or was produced with another key.
        """
        if not token:
            return token
        try:
            data = base64.urlsafe_b64decode(token.encode("ascii"))
            return self._cipher.decrypt(data, None).decode("utf-8")
        except (InvalidTag, binascii.Error, ValueError) as e:
            raise DecryptionError("Stored value could not be decrypted") from e

    def encrypt(self, entity: T) -> T:
        """Encrypt the entity's encrypted fields in place and return it."""
        for name in encrypted_fields(entity):
            setattr(entity, name, self.encrypt_value(getattr(entity, name)))
        return entity

    def decrypt(self, entity: T) -> T:
        """Decrypt the entity's encrypted fields in place and return it."""
        for name in encrypted_fields(entity):
            setattr(entity, name, self.decrypt_value(getattr(entity, name)))
        return entity
