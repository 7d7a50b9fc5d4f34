"""
Comando Auth - Authorization rule table.

A small role/ownership policy: rules are looked up by action name and
evaluated against the current user and the target resource. Anything not
covered by a rule is denied.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from .core import UserView


class Decision(str, Enum):
    """Authorization decision."""

    ALLOW = "allow"
    DENY = "deny"


Rule = Callable[[UserView, Any], bool]


def owns_resource(user: Optional[UserView], resource: Any) -> bool:
    """
    Check ownership via ``user_id`` or ``owner_id``.

    Resources may be mappings or plain objects.
    """
    if user is None or resource is None:
        return False
    for attribute in ("user_id", "owner_id"):
        if isinstance(resource, Mapping):
            owner = resource.get(attribute)
        else:
            owner = getattr(resource, attribute, None)
        if owner is not None and owner == user.id:
            return True
    return False


def any_authenticated(user: UserView, resource: Any) -> bool:
    return True


def role_or_owner(role: str) -> Rule:
    """Rule allowing users with ``role`` or owners of the resource."""

    def rule(user: UserView, resource: Any) -> bool:
        return user.has_role(role) or owns_resource(user, resource)

    rule.__name__ = f"{role}_or_owner"
    return rule


class AccessPolicy:
    """
    Rule table for ``can(action, resource)``.

    Defaults:
        - users with a superuser role ("admin") may do everything
        - "read" is allowed for any authenticated user
        - "create", "update", "delete" need the "editor" role or ownership
        - everything else is denied

    Example:
        policy = AccessPolicy()
        policy.define("publish", role_or_owner("publisher"))
    """

    def __init__(
        self,
        rules: Optional[Dict[str, Rule]] = None,
        superuser_roles: Iterable[str] = ("admin",),
    ):
        self.superuser_roles = frozenset(superuser_roles)
        if rules is None:
            editor_rule = role_or_owner("editor")
            rules = {
                "read": any_authenticated,
                "create": editor_rule,
                "update": editor_rule,
                "delete": editor_rule,
            }
        self._rules: Dict[str, Rule] = dict(rules)

    def define(self, action: str, rule: Rule) -> None:
        """Add or replace the rule for ``action``."""
        self._rules[action] = rule

    def rule_for(self, action: str) -> Optional[Rule]:
        return self._rules.get(action)

    def decide(self, user: Optional[UserView], action: str, resource: Any = None) -> Decision:
        if user is None:
            return Decision.DENY
        if self.superuser_roles.intersection(user.roles):
            return Decision.ALLOW
        rule = self._rules.get(action)
        if rule is not None and rule(user, resource):
            return Decision.ALLOW
        return Decision.DENY

    def allows(self, user: Optional[UserView], action: str, resource: Any = None) -> bool:
        return self.decide(user, action, resource) is Decision.ALLOW
