"""
Auth module for DocDB - password credential derivation and checking.

Invariants:
    - Only {salt, hash} hex strings leave this module
    - Plaintext passwords are never logged or retained
"""

from .credentials import (
    CredentialEngine,
    Credentials,
    check_password,
    compute_credentials,
    generate_verification_id,
    get_credential_engine,
)

__all__ = [
    "Credentials",
    "CredentialEngine",
    "get_credential_engine",
    "compute_credentials",
    "check_password",
    "generate_verification_id",
]
