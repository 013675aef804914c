"""
Namespaced Schema Registry for DocDB.

The SchemaRegistry holds the JSON-Schema-like documents that each
namespace defines under '#/definitions/<Name>'. It provides:
- Registration of schemas per namespace
- Lookup by (namespace, name) for reference resolution
- Schema fingerprinting for consistency checks
- Freeze mechanism to prevent runtime modifications

Invariants:
    - Registry is mutable during startup, frozen before serving
    - Once frozen, no new schemas can be registered
    - (namespace, name) pairs are unique
    - Lookups return copies; registered schemas are never aliased
    - Fingerprint changes when any registered schema changes

How to change safely:
    - Register all schemas before calling freeze_registry()
    - Register stored (internal-form) documents via register_stored_schema()

Example:
    >>> registry = SchemaRegistry()
    >>> registry.register_schema("ns1", "Widget", {"type": "object"})
    >>> registry.get_schema("ns1", "Widget")
    {'type': 'object'}
    >>> registry.resolve("ns1", {"$ref": "#/definitions/Widget"})
    {'type': 'object'}
"""

from __future__ import annotations

import copy
import hashlib
import json
import logging
import threading
from typing import Any, Dict, Iterator, Optional

from ..document.keys import decode_document
from ..errors import DuplicateRegistrationError, RegistryFrozenError, SchemaNotFoundError
from .refs import resolve_schema_refs

logger = logging.getLogger(__name__)

# Global registry instance
_global_registry: Optional[SchemaRegistry] = None
_registry_lock = threading.Lock()


class SchemaRegistry:
    """Registry of schema documents keyed by namespace and name.

    Thread-safety:
        - Registration is thread-safe (uses internal lock)
        - Lookups after freeze are lock-free
        - Freeze is atomic and irreversible

    Attributes:
        frozen: Whether the registry is frozen (immutable)
        fingerprint: SHA-256 hash of all schemas (computed on freeze)
    """

    def __init__(self) -> None:
        """Initialize an empty, mutable registry."""
        self._schemas: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._frozen = False
        self._fingerprint: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def frozen(self) -> bool:
        """Whether the registry is frozen."""
        return self._frozen

    @property
    def fingerprint(self) -> Optional[str]:
        """Schema fingerprint (available after freeze)."""
        return self._fingerprint

    def register_schema(self, namespace: str, name: str, schema: Dict[str, Any]) -> None:
        """Register a schema in external form.

        The registry keeps its own copy; later changes to `schema`
        do not affect the registered value.

        Args:
            namespace: Owning namespace
            name: Definition name referenced as '#/definitions/<name>'
            schema: Schema document

        Raises:
            RegistryFrozenError: If registry is frozen
            DuplicateRegistrationError: If (namespace, name) is taken
        """
        with self._lock:
            if self._frozen:
                raise RegistryFrozenError(
                    f"Cannot register schema '{name}' in '{namespace}': registry is frozen"
                )

            definitions = self._schemas.setdefault(namespace, {})
            if name in definitions:
                raise DuplicateRegistrationError(namespace, name)

            definitions[name] = copy.deepcopy(schema)
            logger.debug(f"Registered schema: {namespace}/{name}")

    def register_stored_schema(self, namespace: str, name: str, stored: Dict[str, Any]) -> None:
        """Register a schema document read back from storage (internal form)."""
        self.register_schema(namespace, name, decode_document(stored))

    def get_schema(self, namespace: str, name: str) -> Dict[str, Any]:
        """Get a copy of a registered schema.

        Raises:
            SchemaNotFoundError: If nothing is registered under (namespace, name)
        """
        schema = self._schemas.get(namespace, {}).get(name)
        if schema is None:
            raise SchemaNotFoundError(namespace, name)
        return copy.deepcopy(schema)

    def has_schema(self, namespace: str, name: str) -> bool:
        """Check whether (namespace, name) is registered."""
        return name in self._schemas.get(namespace, {})

    def namespaces(self) -> Iterator[str]:
        """Iterate over namespaces with at least one schema."""
        yield from self._schemas.keys()

    def schemas(self, namespace: str) -> Iterator[str]:
        """Iterate over schema names registered in a namespace."""
        yield from self._schemas.get(namespace, {}).keys()

    def resolve(self, namespace: str, schema: Any) -> Any:
        """Resolve '#/definitions/...' references against this registry."""
        return resolve_schema_refs(namespace, schema, self.get_schema)

    def freeze(self) -> str:
        """Freeze the registry and compute fingerprint.

        Returns:
            Schema fingerprint string

        Raises:
            RegistryFrozenError: If already frozen
        """
        with self._lock:
            if self._frozen:
                raise RegistryFrozenError("Registry is already frozen")

            self._fingerprint = self._compute_fingerprint()
            self._frozen = True
            logger.info(
                f"Schema registry frozen with {len(self._schemas)} namespaces, "
                f"fingerprint={self._fingerprint}"
            )
            return self._fingerprint

    def _compute_fingerprint(self) -> str:
        """Compute SHA-256 fingerprint over canonical JSON of all schemas."""
        canonical = json.dumps(self.to_dict(), sort_keys=True, separators=(',', ':'))
        hash_bytes = hashlib.sha256(canonical.encode('utf-8')).hexdigest()
        return f"sha256:{hash_bytes}"

    def to_dict(self) -> dict:
        """Convert registry to {namespace: {name: schema}}."""
        return copy.deepcopy(self._schemas)

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Convert registry to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    @classmethod
    def from_dict(cls, data: dict) -> SchemaRegistry:
        """Create registry (not frozen) from {namespace: {name: schema}}."""
        registry = cls()
        for namespace, definitions in data.items():
            for name, schema in definitions.items():
                registry.register_schema(namespace, name, schema)
        return registry

    @classmethod
    def from_json(cls, json_str: str) -> SchemaRegistry:
        """Create registry (not frozen) from JSON string."""
        return cls.from_dict(json.loads(json_str))


def get_registry() -> SchemaRegistry:
    """Get the global schema registry, creating it if needed."""
    global _global_registry
    with _registry_lock:
        if _global_registry is None:
            _global_registry = SchemaRegistry()
        return _global_registry


def freeze_registry() -> str:
    """Freeze the global registry.

    Returns:
        Schema fingerprint

    Raises:
        RegistryFrozenError: If already frozen
    """
    return get_registry().freeze()


def reset_registry() -> None:
    """Reset the global registry (for testing only)."""
    global _global_registry
    with _registry_lock:
        _global_registry = None
