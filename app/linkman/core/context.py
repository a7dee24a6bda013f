from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class UserContext:
    """Resolved identity of a caller: user id, roles and group ids.

    The anonymous caller is a context with no user id and empty role and group sets.
    """

    user_id: str | None = None
    roles: frozenset[str] = field(default_factory=frozenset)
    groups: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "user_id", self.user_id or None)
        object.__setattr__(self, "roles", frozenset(role for role in (self.roles or ()) if role))
        object.__setattr__(self, "groups", frozenset(group for group in (self.groups or ()) if group))

    @classmethod
    def anonymous(cls) -> "UserContext":
        return cls()

    @property
    def is_anonymous(self) -> bool:
        return self.user_id is None and not self.roles and not self.groups

