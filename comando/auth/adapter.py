"""
Comando Auth - Controller adapter.

Derives the current user from session state, answers permission checks
through an AccessPolicy and turns failures into responses (302 to the login
page, 403 JSON) rather than exceptions: unauthenticated and forbidden
requests are ordinary control flow for a controller.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, TYPE_CHECKING, Union

from .authz import AccessPolicy, owns_resource
from .core import SESSION_USER_KEYS, UserFinder, UserView, session_user

if TYPE_CHECKING:
    from ..config import ComandoConfig
    from ..controller.context import ControllerContext
    from ..response import Response, ResponseBuilder


logger = logging.getLogger("comando.auth")


class AuthAdapter:
    """
    Session-backed authentication and authorization helpers.

    The current user is resolved at most once per context and cached on it
    (``context.current_user``); ``login``/``logout`` update that cache.

    Args:
        context: Per-invocation controller context
        responses: Response builder for redirect/403 outcomes
        policy: Authorization rule table
        finder: User lookup collaborator (defaults to session fields)
        config: Controller configuration (login path)
    """

    def __init__(
        self,
        context: "ControllerContext",
        responses: "ResponseBuilder",
        *,
        policy: Optional[AccessPolicy] = None,
        finder: Optional[UserFinder] = None,
        config: Optional["ComandoConfig"] = None,
    ):
        self.context = context
        self.responses = responses
        self.policy = policy or AccessPolicy()
        self.finder = finder or session_user
        self.login_path = config.login_path if config else "/login"

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def current_user(self) -> Optional[UserView]:
        if self.context.user_resolved:
            return self.context.current_user

        session = self.context.session
        user_id = session.get("user_id")
        user = self.finder(user_id, session) if user_id is not None else None

        self.context.current_user = user
        self.context.user_resolved = True
        return user

    def authenticated(self) -> bool:
        return self.current_user() is not None

    def guest(self) -> bool:
        return not self.authenticated()

    def has_role(self, role: str) -> bool:
        user = self.current_user()
        return user is not None and user.has_role(role)

    def owns_resource(self, resource: Any) -> bool:
        return owns_resource(self.current_user(), resource)

    # ------------------------------------------------------------------
    # Callbacks (return a Response to halt, None to continue)
    # ------------------------------------------------------------------

    def authenticate(self) -> Optional["Response"]:
        """Redirect guests to the login page."""
        if self.guest():
            logger.debug("Unauthenticated request, redirecting to %s", self.login_path)
            return self.responses.redirect(self.login_path)
        return None

    def can(self, action: str, resource: Any = None) -> bool:
        return self.policy.allows(self.current_user(), action, resource)

    def authorize(self, action: str, resource: Any = None) -> Optional["Response"]:
        """403 when there is no user or the policy denies ``action``."""
        user = self.current_user()
        if user is None:
            return self.responses.forbidden("Authentication required")
        if not self.can(action, resource):
            logger.info("User %s denied %r on %r", user.id, action, resource)
            return self.responses.forbidden("Insufficient permissions")
        return None

    def require_role(self, role: str) -> Optional["Response"]:
        if not self.has_role(role):
            return self.responses.forbidden(f"Role '{role}' required")
        return None

    def require_admin(self) -> Optional["Response"]:
        return self.require_role("admin")

    def require_editor(self) -> Optional["Response"]:
        if not (self.has_role("admin") or self.has_role("editor")):
            return self.responses.forbidden("Editor role required")
        return None

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def login(self, user: Union[UserView, Mapping[str, Any]]) -> UserView:
        """Store the user's fields in the session and cache the view."""
        if not isinstance(user, UserView):
            user = UserView.from_mapping(user)

        session = self.context.session
        session["user_id"] = user.id
        session["user_name"] = user.name
        session["user_email"] = user.email
        session["user_roles"] = list(user.roles)

        self.context.current_user = user
        self.context.user_resolved = True
        logger.debug("User %s logged in", user.id)
        return user

    def logout(self) -> None:
        session = self.context.session
        for key in SESSION_USER_KEYS:
            session.pop(key, None)
        self.context.current_user = None
        self.context.user_resolved = True

    def remember(self, token: str) -> None:
        """Keep a persistent-login token in the session."""
        self.context.session["remember_token"] = token

    def forget(self) -> None:
        self.context.session.pop("remember_token", None)
