"""Encrypted storage of user API keys.

Payload layout (base64 encoded):

    salt (32) | iv (16) | tag (16) | ciphertext

The AES-256-GCM key is derived per payload with PBKDF2-HMAC-SHA256
(100,000 iterations) from the deployment's master secret and the random
salt. The master secret must be stable across restarts, otherwise stored
keys become unreadable.
"""

from __future__ import annotations

import base64
import binascii
import logging
import os
import secrets
from dataclasses import dataclass
from datetime import datetime

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from sqlalchemy.ext.asyncio import AsyncSession

from openprd.config import Settings
from openprd.errors.exceptions import ConfigurationError, KeyDecryptionError, NotFoundError
from openprd.llm.registry import ProviderRegistry
from openprd.models.api_key import ApiKey
from openprd.repositories.api_key_repo import ApiKeyRepository
from openprd.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)

SALT_LENGTH = 32
IV_LENGTH = 16
TAG_LENGTH = 16
KEY_LENGTH = 32
PBKDF2_ITERATIONS = 100_000

_HEADER_LENGTH = SALT_LENGTH + IV_LENGTH + TAG_LENGTH


class KeyVault:
    """Authenticated encryption of API keys under a master secret.

    Example:
        >>> vault = KeyVault("a-long-deployment-secret")
        >>> payload = vault.encrypt("sk-abc123")
        >>> vault.decrypt(payload)
        'sk-abc123'
    """

    def __init__(self, master_secret: str) -> None:
        if not master_secret:
            raise ConfigurationError("Key vault master secret must not be empty")
        self._secret = master_secret.encode("utf-8")

    @classmethod
    def from_settings(cls, settings: Settings) -> KeyVault:
        """Build the vault from `KEY_VAULT_SECRET`.

        Outside production a missing secret is replaced by an ephemeral one;
        keys saved under it are unreadable after a restart.
        """
        if settings.key_vault_secret:
            return cls(settings.key_vault_secret)
        if settings.is_production:
            raise ConfigurationError("KEY_VAULT_SECRET is required in production")
        logger.warning(
            "KEY_VAULT_SECRET is not set; using an ephemeral secret. "
            "Stored API keys will not survive a restart."
        )
        return cls(secrets.token_hex(32))

    def _derive_key(self, salt: bytes) -> bytes:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=KEY_LENGTH,
            salt=salt,
            iterations=PBKDF2_ITERATIONS,
        )
        return kdf.derive(self._secret)

    def encrypt(self, plaintext: str) -> str:
        """Encrypt `plaintext` with a fresh salt and IV."""
        salt = os.urandom(SALT_LENGTH)
        iv = os.urandom(IV_LENGTH)
        sealed = AESGCM(self._derive_key(salt)).encrypt(iv, plaintext.encode("utf-8"), None)
        # AESGCM returns ciphertext || tag
        ciphertext, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
        return base64.b64encode(salt + iv + tag + ciphertext).decode("ascii")

    def decrypt(self, payload: str) -> str:
        """Inverse of :meth:`encrypt`.

        Raises:
            KeyDecryptionError: If the payload is malformed or fails authentication.
        """
        try:
            raw = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise KeyDecryptionError("Stored key payload is not valid base64") from e

        if len(raw) < _HEADER_LENGTH:
            raise KeyDecryptionError("Stored key payload is truncated")

        salt = raw[:SALT_LENGTH]
        iv = raw[SALT_LENGTH:SALT_LENGTH + IV_LENGTH]
        tag = raw[SALT_LENGTH + IV_LENGTH:_HEADER_LENGTH]
        ciphertext = raw[_HEADER_LENGTH:]

        try:
            plaintext = AESGCM(self._derive_key(salt)).decrypt(iv, ciphertext + tag, None)
        except InvalidTag as e:
            raise KeyDecryptionError("Stored key payload failed authentication") from e

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise KeyDecryptionError("Stored key payload is not valid UTF-8") from e

    @staticmethod
    def hint(api_key: str) -> str:
        """Short identifier shown instead of the key: "..." + last 4 chars."""
        return f"...{api_key[-4:]}"


@dataclass(frozen=True)
class StoredKeyInfo:
    """Metadata of a stored key; never carries key material."""

    id: int
    provider: str
    key_hint: str
    label: str | None
    is_active: bool
    created_at: datetime
    last_used: datetime | None


class ApiKeyService:
    """Save, list and resolve user API keys within one database session."""

    def __init__(
        self,
        session: AsyncSession,
        vault: KeyVault,
        registry: ProviderRegistry,
    ) -> None:
        self._keys = ApiKeyRepository(session)
        self._users = UserRepository(session)
        self._vault = vault
        self._registry = registry

    async def save(
        self,
        user_id: str,
        provider: str,
        api_key: str,
        label: str | None = None,
    ) -> tuple[int, str]:
        """Encrypt and store a key.

        Returns:
            (id, key_hint) of the new row

        Raises:
            UnsupportedProviderError: If `provider` is not registered.
        """
        self._registry.get(provider)
        await self._users.upsert(user_id)

        hint = self._vault.hint(api_key)
        row = await self._keys.create(ApiKey(
            user_id=user_id,
            provider=provider,
            encrypted_key=self._vault.encrypt(api_key),
            key_hint=hint,
            label=label,
            is_active=True,
        ))
        logger.info("Stored %s key %s for user %s", provider, hint, user_id)
        return row.id, hint

    async def list_for_user(self, user_id: str) -> list[StoredKeyInfo]:
        """Active keys of a user, newest first."""
        rows = await self._keys.list_active(user_id)
        return [
            StoredKeyInfo(
                id=row.id,
                provider=row.provider,
                key_hint=row.key_hint or "",
                label=row.label,
                is_active=row.is_active,
                created_at=row.created_at,
                last_used=row.last_used,
            )
            for row in rows
        ]

    async def get_decrypted(self, user_id: str, provider: str) -> str | None:
        """Plaintext of the newest active key for `provider`, or None.

        A key that cannot be decrypted is treated as absent.
        """
        row = await self._keys.get_latest_active(user_id, provider)
        if row is None:
            return None
        try:
            plaintext = self._vault.decrypt(row.encrypted_key)
        except KeyDecryptionError as e:
            logger.error("Could not decrypt stored %s key %s: %s", provider, row.id, e.message)
            return None
        await self._keys.touch(row.id)
        return plaintext

    async def deactivate(self, user_id: str, key_id: int) -> None:
        """Soft-delete a stored key.

        Raises:
            NotFoundError: If the user has no active key with that id.
        """
        if not await self._keys.deactivate(user_id, key_id):
            raise NotFoundError(f"API key {key_id} not found")
        logger.info("Deactivated key %s for user %s", key_id, user_id)
