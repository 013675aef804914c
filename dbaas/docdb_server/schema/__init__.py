"""
Schema module for DocDB.

This module provides:
- A namespaced schema registry
- Resolution of '#/definitions/<Name>' references against the registry

Invariants:
    - All schemas must be registered before the registry is frozen
    - Resolution never mutates the schema it is given

How to change safely:
    - Support for new $ref forms must keep unknown forms passing through
"""

from .refs import REF_MATCH, SchemaLookup, resolve_schema_refs
from .registry import SchemaRegistry, freeze_registry, get_registry, reset_registry

__all__ = [
    # Registry
    "SchemaRegistry",
    "get_registry",
    "freeze_registry",
    "reset_registry",
    # References
    "REF_MATCH",
    "SchemaLookup",
    "resolve_schema_refs",
]
