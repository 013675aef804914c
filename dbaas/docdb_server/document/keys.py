"""
Document key transcoding for DocDB.

The storage engine treats some characters in field names as query
operators (most notably '$'). Documents are therefore stored in an
internal form where every reserved character in a key is replaced by a
sentinel character, and converted back to external form on the way out.

Only keys are rewritten; values are never touched.

Invariants:
    - decode_document(encode_document(d)) == d for documents with valid keys
    - encode validates every key; decode never validates and never raises
    - Both transforms are pure and never mutate their input
    - A raw sentinel is not a valid external key character, so encoding
      can never produce two keys that decode to the same external key

How to change safely:
    - Add reserved characters by appending to KEY_REPLACEMENTS only
    - Never change an existing sentinel: stored documents depend on it
    - Sentinels must be disjoint from every literal in the table

Example:
    >>> encode_document({"$ref": "#/definitions/User", "tags": ["a"]})
    {'＄ref': '#/definitions/User', 'tags': ['a']}
    >>> decode_document({"＄ref": "#/definitions/User"})
    {'$ref': '#/definitions/User'}
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ..errors import InvalidKeyError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyReplacement:
    """A reserved literal and the sentinel that stands in for it.

    Attributes:
        name: Label for logs and debugging
        literal: Character reserved by the storage engine
        sentinel: Character written in its place in internal form
    """

    name: str
    literal: str
    sentinel: str


# FULLWIDTH DOLLAR SIGN
DOLLAR = "＄"

KEY_REPLACEMENTS: tuple[KeyReplacement, ...] = (
    KeyReplacement(name="dollar", literal="$", sentinel=DOLLAR),
)

KEY_PATTERN = re.compile(r"\$|\$ref|\$id|\$comment|\$schema|[A-Za-z]\w*", re.ASCII)


def is_valid_key(key: Any) -> bool:
    """Check whether a key is acceptable in external form."""
    return isinstance(key, str) and KEY_PATTERN.fullmatch(key) is not None


def encode_key(key: str) -> str:
    """Convert a key to internal form.

    This is the raw substitution; it does not validate. Use it for
    building storage paths from keys that are already known to be valid
    (or are composite, e.g. dotted paths). encode_document validates.

    Args:
        key: Key in external form

    Returns:
        Key with every reserved literal replaced by its sentinel
    """
    for replacement in KEY_REPLACEMENTS:
        key = key.replace(replacement.literal, replacement.sentinel)
    return key


def decode_key(key: str) -> str:
    """Convert a key from internal form back to external form."""
    for replacement in KEY_REPLACEMENTS:
        key = key.replace(replacement.sentinel, replacement.literal)
    return key


def encode_document(doc: Any) -> Any:
    """Convert a document tree to internal form.

    Scalars and None pass through. Lists and tuples are encoded
    element-wise and keep their type. Mappings become new dicts.

    Raises:
        InvalidKeyError: On the first key that fails validation
    """
    if isinstance(doc, Mapping):
        encoded = {}
        for key, value in doc.items():
            if not is_valid_key(key):
                raise InvalidKeyError(key)
            new_key = encode_key(key)
            encoded[new_key] = encode_document(value)
        return encoded
    if isinstance(doc, list):
        return [encode_document(item) for item in doc]
    if isinstance(doc, tuple):
        return tuple(encode_document(item) for item in doc)
    return doc


def decode_document(doc: Any) -> Any:
    """Convert a document tree from internal form to external form.

    Decoding never fails. If two internal keys decode to the same
    external key (only possible for data not produced by encode), the
    later key wins and the collision is logged.
    """
    if isinstance(doc, Mapping):
        decoded = {}
        for key, value in doc.items():
            new_key = decode_key(key) if isinstance(key, str) else key
            if new_key in decoded:
                logger.warning(
                    f"Decoded key collision on {new_key!r}; keeping the last value"
                )
            decoded[new_key] = decode_document(value)
        return decoded
    if isinstance(doc, list):
        return [decode_document(item) for item in doc]
    if isinstance(doc, tuple):
        return tuple(decode_document(item) for item in doc)
    return doc
