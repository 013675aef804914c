"""
Document module for DocDB.

This module handles the document-level concerns shared by every write
and read path:
- Key transcoding between external and internal (storage-safe) form
- ACL vocabulary and canonical ACL templates
- The System Info stamp for documents without their own timestamps

Invariants:
    - Documents toward storage are in internal form
    - Documents toward users are in external form
    - ACL templates are immutable; callers work on copies

How to change safely:
    - Never change an existing sentinel character
    - Add ACL templates rather than editing existing ones
"""

from .acl import (
    OWNER_ACL,
    OWNER_ACL_SET,
    PRIVATE_ACL_SET,
    READ_ONLY_ACL,
    READ_ONLY_ACL_SET,
    SYSTEM_ACL,
    SYSTEM_INFO,
    Acl,
    AclAction,
    AclSet,
    PermissionScope,
    SystemInfo,
    copy_acl_set,
)
from .keys import (
    KEY_REPLACEMENTS,
    KeyReplacement,
    decode_document,
    decode_key,
    encode_document,
    encode_key,
    is_valid_key,
)

__all__ = [
    # Keys
    "KeyReplacement",
    "KEY_REPLACEMENTS",
    "encode_document",
    "decode_document",
    "encode_key",
    "decode_key",
    "is_valid_key",
    # ACL
    "PermissionScope",
    "AclAction",
    "Acl",
    "AclSet",
    "SystemInfo",
    "OWNER_ACL",
    "SYSTEM_ACL",
    "READ_ONLY_ACL",
    "OWNER_ACL_SET",
    "READ_ONLY_ACL_SET",
    "PRIVATE_ACL_SET",
    "SYSTEM_INFO",
    "copy_acl_set",
]
