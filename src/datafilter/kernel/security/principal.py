"""Kernel security – Principal, Role, Privilege."""
from __future__ import annotations

import dataclasses
from typing import Any

SUPERUSER_ROLE = "System Developer"


@dataclasses.dataclass(frozen=True)
class Privilege:
    """Named privilege (e.g. 'View Encounters')."""
    name: str

    def __str__(self) -> str:
        return self.name


@dataclasses.dataclass(frozen=True)
class Role:
    """Named role carrying privileges and, optionally, parent roles it inherits."""
    name: str
    privileges: frozenset[Privilege] = frozenset()
    inherited_roles: frozenset[Role] = frozenset()

    def __str__(self) -> str:
        return self.name

    def all_parent_roles(self) -> frozenset[Role]:
        """Return every role this one inherits from, transitively."""
        seen: set[Role] = set()
        pending = list(self.inherited_roles)
        while pending:
            role = pending.pop()
            if role in seen:
                continue
            seen.add(role)
            pending.extend(role.inherited_roles)
        return frozenset(seen)

    def has_privilege(self, privilege: str | Privilege) -> bool:
        name = privilege.name if isinstance(privilege, Privilege) else privilege
        return any(p.name == name for p in self.privileges)


@dataclasses.dataclass(frozen=True)
class Principal:
    """Authenticated user on whose behalf records are read."""
    subject: str
    user_id: str | None = None
    roles: frozenset[Role] = frozenset()
    privileges: frozenset[Privilege] = frozenset()
    claims: dict[str, Any] = dataclasses.field(default_factory=dict, hash=False, compare=False)
    super_user: bool = False

    @property
    def is_super_user(self) -> bool:
        return self.super_user or any(r.name == SUPERUSER_ROLE for r in self.all_roles())

    def all_roles(self) -> frozenset[Role]:
        """Direct roles plus everything they inherit."""
        roles: set[Role] = set(self.roles)
        for role in self.roles:
            roles.update(role.all_parent_roles())
        return frozenset(roles)

    def role_names(self) -> frozenset[str]:
        return frozenset(r.name for r in self.all_roles())

    def has_role(self, role: str | Role) -> bool:
        name = role.name if isinstance(role, Role) else role
        return name in self.role_names()

    def has_privilege(self, privilege: str | Privilege) -> bool:
        if self.is_super_user:
            return True
        name = privilege.name if isinstance(privilege, Privilege) else privilege
        if any(p.name == name for p in self.privileges):
            return True
        return any(r.has_privilege(name) for r in self.all_roles())


__all__ = ["SUPERUSER_ROLE", "Principal", "Privilege", "Role"]
