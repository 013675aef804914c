"""
Error types for DocDB core.

This module defines every exception raised by the core:
- DocDbError: Base exception
- InvalidKeyError: Document key rejected during encoding
- CryptoFailureError: Randomness or key derivation unavailable
- SchemaNotFoundError: Schema registry lookup miss
- RegistryFrozenError / DuplicateRegistrationError: Registry misuse

Invariants:
    - All errors inherit from DocDbError
    - Errors carry a stable code for programmatic handling
    - Error details never include passwords, salts or hashes
"""

from __future__ import annotations

from typing import Any


class DocDbError(Exception):
    """Base exception for all DocDB core errors.

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "DOCDB_ERROR"
        self.details = details or {}


class InvalidKeyError(DocDbError, ValueError):
    """Document key does not match the external key pattern.

    Raised when:
    - A key contains characters outside the allowed set
    - A key starts with a digit or punctuation
    - A key is not a string
    """

    def __init__(self, key: Any) -> None:
        super().__init__(
            f"Object key {key!r} is invalid",
            code="INVALID_KEY",
            details={"key": key},
        )
        self.key = key


class CryptoFailureError(DocDbError):
    """A cryptographic primitive failed or is unavailable.

    Never retried: a transient failure of the random source is
    security relevant and must reach the caller.

    Attributes:
        operation: Which step failed ("random" or "derive")
    """

    def __init__(self, message: str, operation: str) -> None:
        super().__init__(
            message,
            code="CRYPTO_FAILURE",
            details={"operation": operation},
        )
        self.operation = operation


class SchemaNotFoundError(DocDbError, LookupError):
    """No schema is registered under (namespace, type_name)."""

    def __init__(self, namespace: str, type_name: str) -> None:
        super().__init__(
            f"Schema '{type_name}' not found in namespace '{namespace}'",
            code="SCHEMA_NOT_FOUND",
            details={"namespace": namespace, "type_name": type_name},
        )
        self.namespace = namespace
        self.type_name = type_name


class RegistryFrozenError(DocDbError):
    """Raised when attempting to modify a frozen registry."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="REGISTRY_FROZEN")


class DuplicateRegistrationError(DocDbError):
    """Raised when a (namespace, name) pair is registered twice."""

    def __init__(self, namespace: str, name: str) -> None:
        super().__init__(
            f"Schema '{name}' already registered in namespace '{namespace}'",
            code="DUPLICATE_REGISTRATION",
            details={"namespace": namespace, "name": name},
        )
        self.namespace = namespace
        self.name = name
