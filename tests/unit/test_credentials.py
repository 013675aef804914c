"""
Unit tests for password credentials.

Tests cover:
- Credential round-trip
- Salt freshness
- Hash format and derivation parameters
- Crypto failure wrapping
- Dedicated executor configuration
"""

import asyncio
import hashlib
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from dbaas.docdb_server.auth import credentials
from dbaas.docdb_server.auth.credentials import (
    CredentialEngine,
    Credentials,
    check_password,
    compute_credentials,
    generate_verification_id,
)
from dbaas.docdb_server.config import CredentialConfig
from dbaas.docdb_server.errors import CryptoFailureError


class TestCredentialRoundTrip:
    """Tests for compute_credentials and check_password."""

    @pytest.mark.asyncio
    async def test_correct_password(self):
        """The original password verifies."""
        creds = await compute_credentials("correct horse")
        assert await check_password("correct horse", creds.hash, creds.salt) is True

    @pytest.mark.asyncio
    async def test_wrong_password(self):
        """A different password does not verify."""
        creds = await compute_credentials("correct horse")
        assert await check_password("wrong horse", creds.hash, creds.salt) is False

    @pytest.mark.asyncio
    async def test_fresh_salt_each_call(self):
        """Same password yields different salts and hashes."""
        first, second = await asyncio.gather(
            compute_credentials("correct horse"),
            compute_credentials("correct horse"),
        )
        assert first.salt != second.salt
        assert first.hash != second.hash

    @pytest.mark.asyncio
    async def test_format(self):
        """Salt is 32 bytes and hash is 512 bytes, both lowercase hex."""
        creds = await compute_credentials("pw")
        assert len(creds.salt) == 64
        assert len(creds.hash) == 1024
        int(creds.salt, 16)
        int(creds.hash, 16)
        assert creds.hash == creds.hash.lower()

    @pytest.mark.asyncio
    async def test_derivation_parameters(self):
        """Hash is PBKDF2-SHA256 over the hex salt string."""
        creds = await compute_credentials("pw")
        expected = hashlib.pbkdf2_hmac(
            "sha256", b"pw", creds.salt.encode("utf-8"), 25000, 512
        ).hex()
        assert creds.hash == expected

    @pytest.mark.asyncio
    async def test_wrong_salt(self):
        """A valid password with a different salt does not verify."""
        creds = await compute_credentials("pw")
        other = await compute_credentials("pw")
        assert await check_password("pw", creds.hash, other.salt) is False

    @pytest.mark.parametrize("stored_hash", ["éééé", "not-hex", "", "ab"])
    @pytest.mark.asyncio
    async def test_malformed_stored_hash(self, stored_hash):
        """A corrupted stored hash fails verification instead of raising."""
        assert await check_password("pw", stored_hash, "00") is False

    def test_credentials_dict_round_trip(self):
        """Storage form converts both ways."""
        creds = Credentials(salt="ab", hash="cd")
        assert creds.to_dict() == {"salt": "ab", "hash": "cd"}
        assert Credentials.from_dict(creds.to_dict()) == creds


class TestCryptoFailure:
    """Tests for failures of the crypto primitives."""

    @pytest.mark.asyncio
    async def test_random_failure(self, monkeypatch):
        """A failing random source raises CryptoFailureError."""

        def broken(length):
            raise OSError("no entropy")

        monkeypatch.setattr(credentials.secrets, "token_bytes", broken)

        with pytest.raises(CryptoFailureError) as exc_info:
            await compute_credentials("pw")

        assert exc_info.value.operation == "random"
        assert exc_info.value.code == "CRYPTO_FAILURE"
        assert isinstance(exc_info.value.__cause__, OSError)

    @pytest.mark.asyncio
    async def test_derive_failure(self, monkeypatch):
        """A failing KDF raises CryptoFailureError on compute and check."""

        def broken(*args):
            raise ValueError("unsupported hash type")

        monkeypatch.setattr(credentials.hashlib, "pbkdf2_hmac", broken)

        with pytest.raises(CryptoFailureError) as exc_info:
            await compute_credentials("pw")
        assert exc_info.value.operation == "derive"

        with pytest.raises(CryptoFailureError):
            await check_password("pw", "00", "00")

    @pytest.mark.asyncio
    async def test_verification_id_failure(self, monkeypatch):
        """Verification ids fail the same way as salts."""

        def broken(length):
            raise NotImplementedError

        monkeypatch.setattr(credentials.secrets, "token_bytes", broken)

        with pytest.raises(CryptoFailureError):
            await generate_verification_id()

    @pytest.mark.asyncio
    async def test_password_not_in_error(self, monkeypatch):
        """Failure messages never include the password."""

        def broken(*args):
            raise ValueError("boom")

        monkeypatch.setattr(credentials.hashlib, "pbkdf2_hmac", broken)

        with pytest.raises(CryptoFailureError) as exc_info:
            await compute_credentials("s3cret-value")
        assert "s3cret-value" not in str(exc_info.value)


class TestVerificationId:
    """Tests for verification tokens."""

    @pytest.mark.asyncio
    async def test_format_and_uniqueness(self):
        """Tokens are 16 random bytes in hex."""
        first = await generate_verification_id()
        second = await generate_verification_id()
        assert len(first) == 32
        int(first, 16)
        assert first != second


class TestCredentialEngine:
    """Tests for engine construction."""

    @pytest.mark.asyncio
    async def test_dedicated_executor(self):
        """An engine with max_workers runs on its own pool."""
        engine = CredentialEngine.from_config(CredentialConfig(max_workers=2))
        try:
            creds = await engine.compute_credentials("pw")
            assert await engine.check_password("pw", creds.hash, creds.salt) is True
        finally:
            engine.close()

    @pytest.mark.asyncio
    async def test_dedicated_executor_thread_names(self, monkeypatch):
        """Derivations run on threads named with the configured prefix."""
        thread_names = []
        real_derive = credentials._derive

        def recording_derive(password, salt):
            thread_names.append(threading.current_thread().name)
            return real_derive(password, salt)

        monkeypatch.setattr(credentials, "_derive", recording_derive)
        engine = CredentialEngine.from_config(
            CredentialConfig(max_workers=1, thread_name_prefix="test-creds")
        )
        try:
            await engine.compute_credentials("pw")
        finally:
            engine.close()

        assert thread_names and thread_names[0].startswith("test-creds")

    @pytest.mark.asyncio
    async def test_default_config_uses_loop_executor(self, monkeypatch):
        """No max_workers means derivations run on the loop's default pool."""
        thread_names = []
        real_derive = credentials._derive

        def recording_derive(password, salt):
            thread_names.append(threading.current_thread().name)
            return real_derive(password, salt)

        monkeypatch.setattr(credentials, "_derive", recording_derive)
        engine = CredentialEngine.from_config(CredentialConfig())

        await engine.compute_credentials("pw")
        engine.close()

        assert thread_names
        assert not thread_names[0].startswith("docdb-credentials")
        assert thread_names[0] != threading.main_thread().name

    def test_close_leaves_caller_executor_running(self):
        """close() only shuts down executors the engine was told it owns."""
        executor = ThreadPoolExecutor(max_workers=1)
        try:
            CredentialEngine(executor).close()
            assert executor.submit(lambda: 42).result() == 42

            owned = CredentialEngine(executor, owns_executor=True)
            owned.close()
            with pytest.raises(RuntimeError):
                executor.submit(lambda: 42)
        finally:
            executor.shutdown(wait=True)
