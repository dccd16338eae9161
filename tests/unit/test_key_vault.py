"""Unit tests for the key vault and the stored key service."""

from __future__ import annotations

import base64
import logging

import pytest
from sqlalchemy import select

from openprd.config import Settings
from openprd.core.key_vault import (
    IV_LENGTH,
    SALT_LENGTH,
    TAG_LENGTH,
    ApiKeyService,
    KeyVault,
)
from openprd.errors.exceptions import (
    ConfigurationError,
    KeyDecryptionError,
    NotFoundError,
    UnsupportedProviderError,
)
from openprd.models.api_key import ApiKey
from openprd.models.user import User
from tests.conftest import count_rows


class TestKeyVaultEncryption:
    """Tests for encrypt/decrypt."""

    def test_round_trip(self, vault):
        payload = vault.encrypt("sk-proj-abcdef123456")
        assert vault.decrypt(payload) == "sk-proj-abcdef123456"

    def test_payload_layout(self, vault):
        """salt | iv | tag | ciphertext, base64 encoded."""
        plaintext = "sk-test-key"
        raw = base64.b64decode(vault.encrypt(plaintext))
        assert len(raw) == SALT_LENGTH + IV_LENGTH + TAG_LENGTH + len(plaintext.encode())

    def test_fresh_salt_per_payload(self, vault):
        first = vault.encrypt("same-key")
        second = vault.encrypt("same-key")
        assert first != second
        assert base64.b64decode(first)[:SALT_LENGTH] != base64.b64decode(second)[:SALT_LENGTH]

    def test_plaintext_not_in_payload(self, vault):
        raw = base64.b64decode(vault.encrypt("sk-visible-secret"))
        assert b"sk-visible-secret" not in raw

    def test_unicode_round_trip(self, vault):
        assert vault.decrypt(vault.encrypt("clé-🔑")) == "clé-🔑"

    def test_same_secret_decrypts_across_instances(self, vault):
        """A stable master secret keeps stored keys readable after a restart."""
        payload = vault.encrypt("sk-persisted")
        restarted = KeyVault("unit-test-master-secret-that-is-long-enough")
        assert restarted.decrypt(payload) == "sk-persisted"

    def test_other_secret_cannot_decrypt(self, vault):
        payload = vault.encrypt("sk-persisted")
        with pytest.raises(KeyDecryptionError):
            KeyVault("a-different-master-secret").decrypt(payload)

    def test_tampered_ciphertext(self, vault):
        raw = bytearray(base64.b64decode(vault.encrypt("sk-tamper-me")))
        raw[-1] ^= 0x01
        with pytest.raises(KeyDecryptionError):
            vault.decrypt(base64.b64encode(bytes(raw)).decode())

    def test_tampered_tag(self, vault):
        raw = bytearray(base64.b64decode(vault.encrypt("sk-tamper-me")))
        raw[SALT_LENGTH + IV_LENGTH] ^= 0xFF
        with pytest.raises(KeyDecryptionError):
            vault.decrypt(base64.b64encode(bytes(raw)).decode())

    def test_truncated_payload(self, vault):
        short = base64.b64encode(b"\x00" * (SALT_LENGTH + IV_LENGTH)).decode()
        with pytest.raises(KeyDecryptionError) as exc_info:
            vault.decrypt(short)
        assert "truncated" in exc_info.value.message

    def test_invalid_base64(self, vault):
        with pytest.raises(KeyDecryptionError):
            vault.decrypt("not base64 at all!!")

    def test_empty_secret_rejected(self):
        with pytest.raises(ConfigurationError):
            KeyVault("")


class TestKeyHint:
    """Tests for key hints."""

    def test_last_four_characters(self):
        assert KeyVault.hint("sk-abcdefgh1234") == "...1234"

    def test_short_key(self):
        assert KeyVault.hint("abc") == "...abc"


class TestFromSettings:
    """Tests for KeyVault.from_settings."""

    def test_uses_configured_secret(self, vault):
        configured = KeyVault.from_settings(
            Settings(key_vault_secret="unit-test-master-secret-that-is-long-enough")
        )
        assert configured.decrypt(vault.encrypt("sk-1")) == "sk-1"

    def test_ephemeral_secret_outside_production(self, caplog):
        with caplog.at_level(logging.WARNING, logger="openprd.core.key_vault"):
            generated = KeyVault.from_settings(
                Settings(key_vault_secret="", environment="development")
            )
        assert generated.decrypt(generated.encrypt("sk-2")) == "sk-2"
        assert "ephemeral" in caplog.text

    def test_missing_secret_in_production(self):
        with pytest.raises(ConfigurationError):
            KeyVault.from_settings(Settings(key_vault_secret="", environment="production"))


class TestApiKeyService:
    """Tests for ApiKeyService against a real database."""

    @pytest.mark.asyncio
    async def test_save_encrypts_and_creates_user(self, session_factory, vault, registry):
        async with session_factory() as session:
            key_id, hint = await ApiKeyService(session, vault, registry).save(
                "user-1", "openai", "sk-live-9876", label="work"
            )
            await session.commit()

        assert hint == "...9876"
        async with session_factory() as session:
            row = (await session.execute(select(ApiKey).where(ApiKey.id == key_id))).scalar_one()
            user = await session.get(User, "user-1")

        assert user is not None
        assert row.encrypted_key != "sk-live-9876"
        assert vault.decrypt(row.encrypted_key) == "sk-live-9876"
        assert row.key_hint == "...9876"
        assert row.label == "work"
        assert row.is_active is True

    @pytest.mark.asyncio
    async def test_save_unknown_provider(self, session_factory, vault, registry):
        async with session_factory() as session:
            with pytest.raises(UnsupportedProviderError):
                await ApiKeyService(session, vault, registry).save("user-1", "mistral", "k")

        assert await count_rows(session_factory, ApiKey) == 0

    @pytest.mark.asyncio
    async def test_get_decrypted_returns_newest(self, session_factory, vault, registry):
        async with session_factory() as session:
            service = ApiKeyService(session, vault, registry)
            await service.save("user-1", "openai", "sk-old-1111")
            await service.save("user-1", "openai", "sk-new-2222")
            await service.save("user-1", "anthropic", "sk-ant-3333")
            await session.commit()

        async with session_factory() as session:
            service = ApiKeyService(session, vault, registry)
            assert await service.get_decrypted("user-1", "openai") == "sk-new-2222"
            assert await service.get_decrypted("user-1", "google") is None
            assert await service.get_decrypted("user-2", "openai") is None
            await session.commit()

    @pytest.mark.asyncio
    async def test_get_decrypted_touches_last_used(self, session_factory, vault, registry):
        async with session_factory() as session:
            key_id, _ = await ApiKeyService(session, vault, registry).save("user-1", "openai", "sk-1")
            await session.commit()

        async with session_factory() as session:
            await ApiKeyService(session, vault, registry).get_decrypted("user-1", "openai")
            await session.commit()

        async with session_factory() as session:
            row = await session.get(ApiKey, key_id)
        assert row.last_used is not None

    @pytest.mark.asyncio
    async def test_undecryptable_key_is_absent(self, session_factory, vault, registry):
        async with session_factory() as session:
            await ApiKeyService(session, KeyVault("some-other-secret"), registry).save(
                "user-1", "openai", "sk-1"
            )
            await session.commit()

        async with session_factory() as session:
            assert await ApiKeyService(session, vault, registry).get_decrypted("user-1", "openai") is None

    @pytest.mark.asyncio
    async def test_list_for_user_omits_key_material(self, session_factory, vault, registry):
        async with session_factory() as session:
            service = ApiKeyService(session, vault, registry)
            await service.save("user-1", "openai", "sk-aaaa")
            await service.save("user-1", "deepseek", "sk-bbbb", label="side project")
            await service.save("user-2", "openai", "sk-cccc")
            await session.commit()

        async with session_factory() as session:
            keys = await ApiKeyService(session, vault, registry).list_for_user("user-1")

        assert [k.provider for k in keys] == ["deepseek", "openai"]
        assert keys[0].key_hint == "...bbbb"
        assert keys[0].label == "side project"
        assert not hasattr(keys[0], "encrypted_key")

    @pytest.mark.asyncio
    async def test_deactivate(self, session_factory, vault, registry):
        async with session_factory() as session:
            service = ApiKeyService(session, vault, registry)
            key_id, _ = await service.save("user-1", "openai", "sk-aaaa")
            await session.commit()

        async with session_factory() as session:
            service = ApiKeyService(session, vault, registry)
            await service.deactivate("user-1", key_id)
            await session.commit()

        async with session_factory() as session:
            service = ApiKeyService(session, vault, registry)
            assert await service.list_for_user("user-1") == []
            assert await service.get_decrypted("user-1", "openai") is None

    @pytest.mark.asyncio
    async def test_deactivate_other_users_key(self, session_factory, vault, registry):
        async with session_factory() as session:
            key_id, _ = await ApiKeyService(session, vault, registry).save("user-1", "openai", "sk-a")
            await session.commit()

        async with session_factory() as session:
            with pytest.raises(NotFoundError):
                await ApiKeyService(session, vault, registry).deactivate("user-2", key_id)


class TestKeyVaultEdgeInputs:
    """Round trips for unusual plaintexts."""

    def test_empty_string(self, vault):
        assert vault.decrypt(vault.encrypt("")) == ""

    def test_very_long_string(self, vault):
        plaintext = "k" * 100_000
        assert vault.decrypt(vault.encrypt(plaintext)) == plaintext

    def test_mixed_case_hint(self):
        assert KeyVault.hint("sk-abcdEFGH1234") == "...1234"
