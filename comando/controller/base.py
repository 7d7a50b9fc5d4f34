"""
Controller Base Class

Provides the Controller composition root. A controller owns one
ControllerContext plus a set of collaborators built around it:

    params      ParameterAccessor    typed parameter reads, require/permit
    validate    ParameterValidator   400-returning parameter checks
    responses   ResponseBuilder      latched response helpers
    auth        AuthAdapter          current user, authenticate/authorize
    negotiator  ContentNegotiator    respond_to
    callbacks   CallbackChain        before/around/after hooks
    rescues     RescueRegistry       rescue_from handlers

The short Rails-style methods (``self.json``, ``self.authorize`` ...) just
delegate to those collaborators.
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional, Union

from ..auth import AccessPolicy, AuthAdapter, UserFinder, UserView
from ..config import ComandoConfig
from ..faults import RescueRegistry, UnknownActionFault
from ..params import ParameterValidator, StrongParameters
from ..request import Request
from ..response import JsonEncoder, Response, ResponseBuilder
from ..templates import TemplateEngine
from .actions import ActionRegistry
from .callbacks import AFTER, AROUND, BEFORE, ActionNames, CallbackChain
from .context import ControllerContext
from .negotiation import ContentNegotiator, Producer
from .rest import RestfulActions

logger = logging.getLogger("comando.controller")


class Controller(RestfulActions):
    """
    Base Controller class.

    Subclasses declare actions with ``@action`` and register callbacks and
    rescue handlers in ``setup``, which runs once per instance:

    Example:
        class PostsController(Controller):
            def setup(self):
                self.before_action("authenticate", except_=["index", "show"])
                self.rescue_from("RecordNotFound", lambda c, msg: c.not_found(msg))

            @action
            def create(self):
                attrs = self.params_require("post").permit("title", "body")
                return self.created(attrs, location="/posts")

        response = PostsController(request).execute_action("create")
    """

    __actions__: ActionRegistry

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls.__actions__ = ActionRegistry.collect(cls)

    def __init__(
        self,
        request: Union[Request, Mapping[str, Any], None] = None,
        *,
        config: Optional[ComandoConfig] = None,
        templates: Optional[TemplateEngine] = None,
        user_finder: Optional[UserFinder] = None,
        policy: Optional[AccessPolicy] = None,
        encoder: Optional[JsonEncoder] = None,
    ):
        if request is None:
            request = Request()
        elif not isinstance(request, Request):
            request = Request.from_mapping(request)

        self.config = config or ComandoConfig()
        if templates is None and self.config.template_dirs:
            templates = TemplateEngine(self.config.template_dirs)

        self.context = ControllerContext.from_request(request, self.config)
        self.responses = ResponseBuilder(
            self.context, templates=templates, config=self.config, encoder=encoder,
        )
        self.validate = ParameterValidator(self.context.params, self.responses)
        self.auth = AuthAdapter(
            self.context, self.responses, policy=policy, finder=user_finder, config=self.config,
        )
        self.negotiator = ContentNegotiator(self.context, self.responses)
        self.callbacks = CallbackChain(self)
        self.rescues = RescueRegistry()

        self.setup()

    def setup(self) -> None:
        """Register callbacks and rescue handlers. Called once from the constructor."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} path={self.context.path!r} rendered={self.rendered}>"

    # ========================================================================
    # Context
    # ========================================================================

    @property
    def request(self) -> Request:
        return self.context.request

    @property
    def params(self):
        return self.context.params

    @property
    def session(self):
        return self.context.session

    @property
    def flash_messages(self):
        return self.context.flash

    @property
    def rendered(self) -> bool:
        return self.context.rendered

    @classmethod
    def action_names(cls) -> list:
        return cls.__actions__.names()

    # ========================================================================
    # Action execution
    # ========================================================================

    def execute_action(self, action_name: str) -> Optional[Response]:
        """
        Run ``action_name`` with its before/around/after callbacks.

        Raises:
            UnknownActionFault: If no action is registered under that name
        """
        method_name = self.__actions__.resolve(action_name)
        if method_name is None:
            raise UnknownActionFault(type(self).__name__, action_name)

        logger.debug("%s#%s", type(self).__name__, action_name)
        return self.callbacks.run(action_name, getattr(self, method_name))

    def before_action(self, callback, *, only: ActionNames = None, except_: ActionNames = None):
        self.callbacks.register(BEFORE, callback, only=only, except_=except_)
        return self

    def prepend_before_action(self, callback, *, only: ActionNames = None, except_: ActionNames = None):
        self.callbacks.register(BEFORE, callback, only=only, except_=except_, prepend=True)
        return self

    def around_action(self, callback, *, only: ActionNames = None, except_: ActionNames = None):
        self.callbacks.register(AROUND, callback, only=only, except_=except_)
        return self

    def after_action(self, callback, *, only: ActionNames = None, except_: ActionNames = None):
        self.callbacks.register(AFTER, callback, only=only, except_=except_)
        return self

    def skip_before_action(self, callback) -> int:
        return self.callbacks.skip(BEFORE, callback)

    def skip_around_action(self, callback) -> int:
        return self.callbacks.skip(AROUND, callback)

    def skip_after_action(self, callback) -> int:
        return self.callbacks.skip(AFTER, callback)

    # ========================================================================
    # Error handling
    # ========================================================================

    def rescue_from(self, kind, handler: Callable[["Controller", Optional[str]], Response]) -> None:
        """Register ``handler(controller, message)`` for an error kind (name or class)."""
        self.rescues.register(kind, handler)

    def handle_exception(self, kind, message: Optional[str] = None) -> Response:
        """Run the rescue handler for ``kind`` or fall back to a generic 500."""
        handler = self.rescues.resolve(kind)
        if handler is not None:
            return handler(self, message)
        return self.responses.internal_error(f"An error occurred: {message or 'Unknown error'}")

    # ========================================================================
    # Parameters
    # ========================================================================

    def param(self, key: str, default: Any = None) -> Any:
        return self.params.get(key, default)

    def has_param(self, key: str) -> bool:
        return self.params.has(key)

    def param_as_string(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.params.as_string(key, default)

    def param_as_number(self, key: str, default=None):
        return self.params.as_number(key, default)

    def param_as_integer(self, key: str, default: Optional[int] = None) -> Optional[int]:
        return self.params.as_integer(key, default)

    def param_as_boolean(self, key: str, default: Optional[bool] = None) -> Optional[bool]:
        return self.params.as_boolean(key, default)

    def params_require(self, key: str) -> StrongParameters:
        return self.params.require(key)

    def permit(self, *keys) -> Dict[str, Any]:
        return self.params.permit(*keys)

    # ========================================================================
    # Responses
    # ========================================================================

    def render(self, view: str, data: Optional[Dict[str, Any]] = None, status: int = 200) -> Response:
        return self.responses.render(view, data, status)

    def json(self, data: Any, status: int = 200) -> Response:
        return self.responses.json(data, status)

    def redirect(self, path: str, status: int = 302) -> Response:
        return self.responses.redirect(path, status)

    def ok(self, body: str = "OK", **kwargs) -> Response:
        return self.responses.ok(body, **kwargs)

    def created(self, body: Any = None, location: Optional[str] = None) -> Response:
        return self.responses.created(body, location)

    def no_content(self) -> Response:
        return self.responses.no_content()

    def bad_request(self, message: str = "Bad Request", errors: Any = None) -> Response:
        return self.responses.bad_request(message, errors)

    def unauthorized(self, message: str = "Unauthorized") -> Response:
        return self.responses.unauthorized(message)

    def forbidden(self, message: str = "Forbidden") -> Response:
        return self.responses.forbidden(message)

    def not_found(self, message: str = "Not Found") -> Response:
        return self.responses.not_found(message)

    def unprocessable_entity(self, message: str = "Unprocessable Entity", errors: Any = None) -> Response:
        return self.responses.unprocessable_entity(message, errors)

    def internal_error(self, message: str = "Internal Server Error", details: Any = None) -> Response:
        return self.responses.internal_error(message, details)

    internal_server_error = internal_error

    def service_unavailable(self, message: str = "Service Unavailable", retry_after: Optional[int] = None) -> Response:
        return self.responses.service_unavailable(message, retry_after)

    def respond_to(self, formats: Mapping[str, Producer]) -> Response:
        return self.negotiator.respond_to(formats)

    def flash(self, message: str, type: str = "notice") -> None:
        self.context.flash.add(message, type)

    # ========================================================================
    # Authentication & authorization
    # ========================================================================

    def current_user(self) -> Optional[UserView]:
        return self.auth.current_user()

    def authenticated(self) -> bool:
        return self.auth.authenticated()

    def guest(self) -> bool:
        return self.auth.guest()

    def authenticate(self) -> Optional[Response]:
        return self.auth.authenticate()

    def authorize(self, action: str, resource: Any = None) -> Optional[Response]:
        return self.auth.authorize(action, resource)

    def can(self, action: str, resource: Any = None) -> bool:
        return self.auth.can(action, resource)

    def has_role(self, role: str) -> bool:
        return self.auth.has_role(role)

    def require_role(self, role: str) -> Optional[Response]:
        return self.auth.require_role(role)

    def require_admin(self) -> Optional[Response]:
        return self.auth.require_admin()

    def require_editor(self) -> Optional[Response]:
        return self.auth.require_editor()

    def login(self, user) -> UserView:
        return self.auth.login(user)

    def logout(self) -> None:
        self.auth.logout()

    def remember(self, token: str) -> None:
        self.auth.remember(token)

    def forget(self) -> None:
        self.auth.forget()


Controller.__actions__ = ActionRegistry.collect(Controller)
