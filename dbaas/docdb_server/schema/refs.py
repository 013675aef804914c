"""
Schema reference resolution.

Schemas refer to sibling definitions with {"$ref": "#/definitions/<Name>"}.
Before a schema is used for validation, each such fragment is replaced
by the concrete schema registered under <Name> in the schema's namespace.

Only 'properties' values and object-shaped 'items' are descended into.
References in any other form (external URLs, other JSON pointers) are
left in place.

Invariants:
    - The input schema is never mutated; a new tree is returned
    - Lookup errors propagate unchanged
    - Substituted schemas are inserted as returned by the lookup and
      are not resolved again
"""

from __future__ import annotations

import copy
import logging
import re
from collections.abc import Callable, Mapping
from typing import Any

logger = logging.getLogger(__name__)

REF_MATCH = re.compile(r"#/definitions/(\w+)", re.ASCII)

SchemaLookup = Callable[[str, str], Any]


def resolve_schema_refs(namespace: str, schema: Any, lookup: SchemaLookup) -> Any:
    """Replace internal '$ref' fragments with registered schemas.

    Args:
        namespace: Namespace the schema belongs to
        schema: Schema tree (any value; non-mappings are returned as is)
        lookup: Callable (namespace, name) -> schema, raising LookupError on miss

    Returns:
        A new schema tree with references substituted

    Raises:
        LookupError: Whatever the lookup raises for an unknown name

    Example:
        >>> resolve_schema_refs(
        ...     "ns1",
        ...     {"properties": {"w": {"$ref": "#/definitions/Widget"}}},
        ...     lambda ns, name: {"type": "object"},
        ... )
        {'properties': {'w': {'type': 'object'}}}
    """
    return _resolve(namespace, copy.deepcopy(schema), lookup)


def _resolve(namespace: str, schema: Any, lookup: SchemaLookup) -> Any:
    # schema is a private copy from here down
    if not isinstance(schema, Mapping):
        return schema

    ref = schema.get("$ref")
    if ref:
        match = REF_MATCH.fullmatch(ref) if isinstance(ref, str) else None
        if match:
            logger.debug(f"Resolving $ref {ref} in namespace {namespace}")
            return lookup(namespace, match.group(1))
        logger.debug(f"Leaving unsupported $ref {ref!r} in place")

    properties = schema.get("properties")
    if isinstance(properties, Mapping):
        for key in properties:
            properties[key] = _resolve(namespace, properties[key], lookup)

    if schema.get("items"):
        schema["items"] = _resolve(namespace, schema["items"], lookup)

    return schema
