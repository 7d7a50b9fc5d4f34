"""
Comando Auth - Core types.

Defines:
- UserView: the in-memory view of the current user
- UserFinder: collaborator protocol for identity lookups
- session_user: default lookup that reads the user from session fields
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Protocol


SESSION_USER_KEYS = ("user_id", "user_name", "user_email", "user_roles")


@dataclass(frozen=True)
class UserView:
    """
    Current user as seen by the controller layer.

    Immutable once created; cached on the controller context for the rest
    of the request.
    """

    id: Any
    name: str = "User"
    email: Optional[str] = None
    roles: tuple = field(default_factory=tuple)

    def has_role(self, role: str) -> bool:
        return role in self.roles

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "roles": list(self.roles),
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> UserView:
        """Build a view from a mapping with id/name/email/roles keys."""
        return cls(
            id=data["id"],
            name=data.get("name") or "User",
            email=data.get("email"),
            roles=tuple(data.get("roles") or ()),
        )


class UserFinder(Protocol):
    """Protocol for identity lookups (backed by a user store)."""

    def __call__(self, user_id: Any, session: Mapping[str, Any]) -> Optional[UserView]:
        """Return the user for ``user_id`` or None if it does not exist."""
        ...


def session_user(user_id: Any, session: Mapping[str, Any]) -> Optional[UserView]:
    """
    Default UserFinder: build the user from session-stored fields.

    Stands in for a real user store; ``user_name``, ``user_email`` and
    ``user_roles`` are written by ``AuthAdapter.login``.
    """
    if user_id is None:
        return None
    roles = session.get("user_roles") or ()
    if isinstance(roles, str):
        roles = (roles,)
    return UserView(
        id=user_id,
        name=session.get("user_name") or "User",
        email=session.get("user_email"),
        roles=tuple(roles),
    )
