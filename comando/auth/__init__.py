"""
Comando Auth - session-backed authentication and a small authorization
rule table.
"""

from .core import UserView, UserFinder, session_user
from .authz import AccessPolicy, Decision, owns_resource, role_or_owner, any_authenticated
from .adapter import AuthAdapter

__all__ = [
    "UserView",
    "UserFinder",
    "session_user",
    "AccessPolicy",
    "Decision",
    "owns_resource",
    "role_or_owner",
    "any_authenticated",
    "AuthAdapter",
]
