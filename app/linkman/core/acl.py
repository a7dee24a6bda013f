"""Access control entries and lists used to gate read visibility of categories and links."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from app.linkman.core.context import UserContext

READ = "read"


def normalize_names(values: Iterable[str] | None) -> frozenset[str]:
    """Drop empty or blank names and surrounding whitespace."""
    if not values:
        return frozenset()
    return frozenset(str(value).strip() for value in values if value is not None and str(value).strip())


@dataclass(frozen=True)
class AccessControlEntry:
    """A single permission grant.

    Instances are immutable, so an entry can be shared between categories, links and callers
    without copying.
    """

    guest: bool = False
    users: frozenset[str] = field(default_factory=frozenset)
    roles: frozenset[str] = field(default_factory=frozenset)
    groups: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "guest", bool(self.guest))
        object.__setattr__(self, "users", normalize_names(self.users))
        object.__setattr__(self, "roles", normalize_names(self.roles))
        object.__setattr__(self, "groups", normalize_names(self.groups))

    @property
    def is_empty(self) -> bool:
        return not self.guest and not self.users and not self.roles and not self.groups

    def unmodifiable(self) -> "AccessControlEntry":
        # Entries are frozen, so the entry is its own read-only view.
        return self


@dataclass(frozen=True, eq=False)
class AccessControlList:
    owner: str | None = None
    entries: Mapping[str, AccessControlEntry] = field(default_factory=dict)

    def __post_init__(self) -> None:
        normalized = {}
        for permission, entry in (self.entries or {}).items():
            if permission is None or entry is None:
                continue
            normalized[permission.lower()] = entry
        object.__setattr__(self, "entries", MappingProxyType(normalized))

    @classmethod
    def readable_by(
        cls,
        *,
        owner: str | None = None,
        guest: bool = False,
        users: Iterable[str] = (),
        roles: Iterable[str] = (),
        groups: Iterable[str] = (),
    ) -> "AccessControlList":
        entry = AccessControlEntry(
            guest=guest,
            users=frozenset(users),
            roles=frozenset(roles),
            groups=frozenset(groups),
        )
        return cls(owner=owner, entries={READ: entry})

    @property
    def read(self) -> AccessControlEntry:
        return self.entries.get(READ) or AccessControlEntry()

    @property
    def is_public(self) -> bool:
        return self.read.guest

    def _key(self) -> tuple:
        return self.owner, tuple(sorted(self.entries.items(), key=lambda item: item[0]))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AccessControlList):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())


def matches(entry: AccessControlEntry, user_context: UserContext) -> bool:
    """Return whether the entry grants access to the caller.

    A guest entry matches everyone, anonymous callers included, and the user, role and group sets
    are not consulted. Otherwise the caller needs its user id in ``users`` or a role or group in
    common with the entry. An entry without guest access and with empty sets matches nobody.
    """
    if entry.guest:
        return True
    if user_context.user_id and user_context.user_id in entry.users:
        return True
    if not entry.roles.isdisjoint(user_context.roles):
        return True
    return not entry.groups.isdisjoint(user_context.groups)


def acl_matches(acl: AccessControlList | None, user_context: UserContext, permission: str = READ) -> bool:
    if acl is None:
        return False
    if user_context.user_id and acl.owner == user_context.user_id:
        return True
    entry = acl.entries.get(permission)
    if entry is None:
        return False
    return matches(entry, user_context)
