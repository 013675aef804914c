"""
DocDB core - document transcoding and access-control layer.

This package implements the parts of a schema-validated document store
that must be exactly reversible, exactly deterministic or timing-safe:
- Key transcoding between external and storage-safe internal form
- Permission scopes and canonical ACL templates
- Salted password credential derivation and checking
- Resolution of '#/definitions/<Name>' schema references

Architecture:
    write path:  document ──▶ encode_document ──▶ storage
    read path:   storage  ──▶ decode_document ──▶ user
    new docs:    copy_acl_set(template) + SYSTEM_INFO
    users:       compute_credentials / check_password
    schema load: SchemaRegistry ──▶ resolve_schema_refs ──▶ validator

Invariants:
    - decode_document(encode_document(d)) == d for valid external keys
    - ACL templates are immutable
    - Only {salt, hash} hex strings represent passwords
    - Schema resolution never mutates its input

How to change safely:
    - Never change the sentinel table or the KDF parameters without a
      data migration
"""

from ._version import __version__

__all__ = ["__version__"]
