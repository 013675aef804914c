"""
ACL vocabulary and canonical templates for DocDB documents.

This module supplies:
- Permission scopes (_all, _user, _system, _owner)
- ACL actions (read, write, append, delete)
- The canonical ACL and ACL-set templates attached to new documents
- The System Info stamp used as default timestamps and attribution

Enforcement (checking an actor's scope against an action list) lives
with the caller; nothing here grants or denies access.

Invariants:
    - Scopes are flat tokens; membership is exact match
    - Templates are frozen and share no mutable state with callers
    - SYSTEM_INFO is captured once at import and never changes

How to change safely:
    - New scopes must use new tokens; stored ACLs reference existing ones
    - Never edit a template in place; add a new template instead
    - Callers customise templates via copy_acl_set() or to_dict()

Example:
    >>> acl = copy_acl_set(OWNER_ACL_SET)
    >>> acl["allow"]["read"]
    ['_owner']
    >>> acl["allow"]["read"].append(PermissionScope.ALL.value)
    >>> OWNER_ACL_SET.allow.read
    (<PermissionScope.OWNER: '_owner'>,)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class PermissionScope(Enum):
    """Actor classes an ACL can grant an action to."""

    ALL = "_all"  # Any actor
    USER = "_user"  # Any authenticated actor
    SYSTEM = "_system"  # The service itself
    OWNER = "_owner"  # The document's designated owner


class AclAction(Enum):
    """Actions gated by an ACL."""

    READ = "read"
    WRITE = "write"
    APPEND = "append"
    DELETE = "delete"


@dataclass(frozen=True)
class Acl:
    """Scopes authorised for each action on a document.

    Attributes:
        read: Scopes that may read
        write: Scopes that may overwrite
        append: Scopes that may append
        delete: Scopes that may delete
    """

    read: tuple[PermissionScope, ...] = ()
    write: tuple[PermissionScope, ...] = ()
    append: tuple[PermissionScope, ...] = ()
    delete: tuple[PermissionScope, ...] = ()

    @classmethod
    def uniform(cls, scope: PermissionScope) -> Acl:
        """Grant every action to a single scope."""
        return cls(read=(scope,), write=(scope,), append=(scope,), delete=(scope,))

    def scopes_for(self, action: AclAction) -> tuple[PermissionScope, ...]:
        """Get the scopes authorised for an action."""
        return getattr(self, action.value)

    def to_dict(self) -> dict[str, list[str]]:
        """Convert to dictionary for storage.

        Every call returns new lists, so the result may be mutated freely.
        """
        return {
            action.value: [scope.value for scope in self.scopes_for(action)]
            for action in AclAction
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Acl:
        """Create from dictionary.

        Raises:
            ValueError: If a scope token is unknown
        """
        return cls(
            **{
                action.value: tuple(PermissionScope(s) for s in data.get(action.value, ()))
                for action in AclAction
            }
        )


@dataclass(frozen=True)
class AclSet:
    """An ACL paired with the ACL governing changes to it.

    Attributes:
        allow: Who may act on the document
        modify: Who may alter the document's ACL set
    """

    allow: Acl
    modify: Acl

    def to_dict(self) -> dict[str, dict[str, list[str]]]:
        """Convert to dictionary for storage."""
        return {
            "allow": self.allow.to_dict(),
            "modify": self.modify.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AclSet:
        """Create from dictionary."""
        return cls(
            allow=Acl.from_dict(data.get("allow", {})),
            modify=Acl.from_dict(data.get("modify", {})),
        )


@dataclass(frozen=True)
class SystemInfo:
    """Creation/update stamp for documents that lack their own.

    Attributes:
        created: Creation time (UTC)
        updated: Last update time (UTC)
        created_by: Scope credited with creating the document
    """

    created: datetime
    updated: datetime
    created_by: PermissionScope = PermissionScope.SYSTEM

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            "created": self.created,
            "updated": self.updated,
            "created_by": self.created_by.value,
        }


START_TIME = datetime.now(timezone.utc)

SYSTEM_INFO = SystemInfo(created=START_TIME, updated=START_TIME)

OWNER_ACL = Acl.uniform(PermissionScope.OWNER)

SYSTEM_ACL = Acl.uniform(PermissionScope.SYSTEM)

READ_ONLY_ACL = Acl(
    read=(PermissionScope.ALL,),
    write=(PermissionScope.SYSTEM,),
    append=(PermissionScope.SYSTEM,),
    delete=(PermissionScope.SYSTEM,),
)

OWNER_ACL_SET = AclSet(allow=OWNER_ACL, modify=OWNER_ACL)

READ_ONLY_ACL_SET = AclSet(allow=READ_ONLY_ACL, modify=SYSTEM_ACL)

PRIVATE_ACL_SET = AclSet(allow=SYSTEM_ACL, modify=SYSTEM_ACL)


def copy_acl_set(template: AclSet) -> dict[str, dict[str, list[str]]]:
    """Get an independent, mutable copy of a template for a new document.

    Args:
        template: One of the ACL set templates (or any AclSet)

    Returns:
        Storage-form mapping sharing no lists with any other copy
    """
    return template.to_dict()
