"""
Password credentials for DocDB user documents.

A credential is stored as a {salt, hash} pair of hex strings; the
plaintext password is never stored, logged or kept on any object.

Derivation:
    - salt: 32 bytes from the OS CSPRNG, hex encoded
    - hash: PBKDF2-HMAC-SHA256, 25000 iterations, 512-byte key, hex encoded
    - The KDF salt is the UTF-8 encoding of the hex salt string, matching
      credentials already held in existing stores

Both steps are CPU or OS bound and run in a thread-pool executor so the
event loop is never blocked.

Invariants:
    - Randomness or KDF failure raises CryptoFailureError; no fallback
    - check_password compares digests in constant time
    - Concurrent derivations share no mutable state

How to change safely:
    - Never change ITERATIONS, KEY_LENGTH, DIGEST_ALGO or the salt
      encoding without a credential migration; existing hashes would
      stop verifying
"""

from __future__ import annotations

import asyncio
import hashlib
import hmac
import logging
import secrets
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

from ..config import CredentialConfig
from ..errors import CryptoFailureError

logger = logging.getLogger(__name__)

SALT_LENGTH = 32
VERIFICATION_ID_LENGTH = 16
ITERATIONS = 25000
KEY_LENGTH = 512
DIGEST_ALGO = "sha256"


@dataclass(frozen=True)
class Credentials:
    """Salted password hash ready for storage.

    Attributes:
        salt: Hex-encoded random salt
        hash: Hex-encoded derived key
    """

    salt: str
    hash: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for storage."""
        return {"salt": self.salt, "hash": self.hash}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Credentials:
        """Create from dictionary."""
        return cls(salt=data["salt"], hash=data["hash"])


def _random_hex(length: int) -> str:
    try:
        return secrets.token_bytes(length).hex()
    except (OSError, NotImplementedError) as e:
        raise CryptoFailureError(f"Secure random source unavailable: {e}", "random") from e


def _derive(password: str, salt: str) -> str:
    try:
        return hashlib.pbkdf2_hmac(
            DIGEST_ALGO,
            password.encode("utf-8"),
            salt.encode("utf-8"),
            ITERATIONS,
            KEY_LENGTH,
        ).hex()
    except (OSError, ValueError) as e:
        raise CryptoFailureError(f"Key derivation failed: {e}", "derive") from e


class CredentialEngine:
    """Computes and verifies password credentials off the event loop.

    Thread safety:
        Stateless apart from the executor; safe to share.

    Example:
        >>> engine = CredentialEngine()
        >>> creds = await engine.compute_credentials("correct horse")
        >>> await engine.check_password("correct horse", creds.hash, creds.salt)
        True
    """

    def __init__(self, executor: Executor | None = None, owns_executor: bool = False) -> None:
        """Initialize the engine.

        Args:
            executor: Executor for blocking crypto calls
                (None uses the event loop's default executor)
            owns_executor: Whether close() should shut the executor down
        """
        self._executor = executor
        self._owns_executor = owns_executor

    @classmethod
    def from_config(cls, config: CredentialConfig) -> CredentialEngine:
        """Create an engine, with a dedicated pool if max_workers is set."""
        if config.max_workers is None:
            return cls()
        return cls(
            ThreadPoolExecutor(
                max_workers=config.max_workers,
                thread_name_prefix=config.thread_name_prefix,
            ),
            owns_executor=True,
        )

    async def _run(self, func, *args):
        return await asyncio.get_event_loop().run_in_executor(self._executor, func, *args)

    async def compute_credentials(self, password: str) -> Credentials:
        """Generate a fresh salt and derive the password hash.

        Args:
            password: Plaintext password

        Returns:
            Credentials with hex salt and hash

        Raises:
            CryptoFailureError: If randomness or derivation fails
        """
        salt = await self._run(_random_hex, SALT_LENGTH)
        hash_hex = await self._run(_derive, password, salt)
        logger.debug("Computed new password credentials")
        return Credentials(salt=salt, hash=hash_hex)

    async def check_password(self, password: str, hash: str, salt: str) -> bool:
        """Check a password against a stored hash and salt.

        Raises:
            CryptoFailureError: If derivation fails
        """
        computed = await self._run(_derive, password, salt)
        # bytes: compare_digest rejects non-ASCII str
        return hmac.compare_digest(computed.encode("utf-8"), hash.encode("utf-8"))

    async def generate_verification_id(self) -> str:
        """Generate a random hex token for account verification.

        Raises:
            CryptoFailureError: If the random source fails
        """
        return await self._run(_random_hex, VERIFICATION_ID_LENGTH)

    def close(self) -> None:
        """Shut down the executor if this engine created it."""
        if self._owns_executor and self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
            self._owns_executor = False


# Default credential engine instance
_default_engine: CredentialEngine | None = None


def get_credential_engine() -> CredentialEngine:
    """Get the default credential engine instance."""
    global _default_engine
    if _default_engine is None:
        _default_engine = CredentialEngine()
    return _default_engine


async def compute_credentials(password: str) -> Credentials:
    """Compute credentials with the default engine."""
    return await get_credential_engine().compute_credentials(password)


async def check_password(password: str, hash: str, salt: str) -> bool:
    """Check a password with the default engine."""
    return await get_credential_engine().check_password(password, hash, salt)


async def generate_verification_id() -> str:
    """Generate a verification token with the default engine."""
    return await get_credential_engine().generate_verification_id()
