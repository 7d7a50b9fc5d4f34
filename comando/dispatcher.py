"""
Dispatcher - runs one action invocation end to end.

Resolves the controller, builds its context from the inbound request
mapping, executes the action through the callback pipeline and maps
exceptions to responses:

    registered rescue_from handler   -> handler's response
    MissingParameterFault            -> 400
    DoubleRenderFault                -> propagates (programming error)
    UnknownActionFault               -> propagates (routing error)
    anything else                    -> handle_exception (generic 500)

Routing itself stays outside: callers pass the controller and action
names they already resolved.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Type, Union

from .auth import AccessPolicy, UserFinder
from .config import ComandoConfig
from .controller import Controller
from .faults import (
    DoubleRenderFault,
    Fault,
    MissingParameterFault,
    Severity,
    UnknownActionFault,
    UnknownControllerFault,
)
from .request import Request
from .response import JsonEncoder, NoContent, Response
from .templates import TemplateEngine

logger = logging.getLogger("comando.dispatcher")

PROPAGATED_FAULTS = (DoubleRenderFault, UnknownActionFault)

SEVERITY_LOG_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.WARN: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.FATAL: logging.CRITICAL,
}


class Dispatcher:
    """
    Controller registry and invocation driver.

    Example:
        dispatcher = Dispatcher(ConfigLoader.load())
        dispatcher.register("posts", PostsController)
        response = dispatcher.dispatch("posts", "show", {"params": {"id": "1"}})
    """

    def __init__(
        self,
        config: Optional[ComandoConfig] = None,
        *,
        templates: Optional[TemplateEngine] = None,
        user_finder: Optional[UserFinder] = None,
        policy: Optional[AccessPolicy] = None,
        encoder: Optional[JsonEncoder] = None,
    ):
        self.config = config or ComandoConfig()
        if templates is None and self.config.template_dirs:
            templates = TemplateEngine(self.config.template_dirs)
        self.templates = templates
        self.user_finder = user_finder
        self.policy = policy
        self.encoder = encoder
        self._controllers: Dict[str, Type[Controller]] = {}

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def register(self, name: str, controller_cls: Optional[Type[Controller]] = None):
        """
        Register a controller class under ``name``.

        Usable directly or as a class decorator:

            @dispatcher.register("posts")
            class PostsController(Controller): ...
        """

        def decorator(cls: Type[Controller]) -> Type[Controller]:
            if not (isinstance(cls, type) and issubclass(cls, Controller)):
                raise TypeError(f"{cls!r} is not a Controller subclass")
            self._controllers[name] = cls
            return cls

        if controller_cls is not None:
            return decorator(controller_cls)
        return decorator

    def resolve(self, name: str) -> Type[Controller]:
        try:
            return self._controllers[name]
        except KeyError:
            raise UnknownControllerFault(name) from None

    def __contains__(self, name: str) -> bool:
        return name in self._controllers

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def build(
        self,
        controller: Union[str, Type[Controller]],
        request: Union[Request, Mapping[str, Any], None] = None,
    ) -> Controller:
        """Instantiate a controller with this dispatcher's collaborators."""
        controller_cls = self.resolve(controller) if isinstance(controller, str) else controller
        return controller_cls(
            request,
            config=self.config,
            templates=self.templates,
            user_finder=self.user_finder,
            policy=self.policy,
            encoder=self.encoder,
        )

    def dispatch(
        self,
        controller: Union[str, Type[Controller]],
        action: str,
        request: Union[Request, Mapping[str, Any], None] = None,
    ) -> Response:
        instance = self.build(controller, request)

        try:
            response = instance.execute_action(action)
        except PROPAGATED_FAULTS:
            raise
        except Exception as exc:
            response = self.rescue(instance, action, exc)

        if response is None:
            logger.warning("%s#%s returned no response", type(instance).__name__, action)
            return NoContent()
        return response

    def rescue(self, instance: Controller, action: str, exc: Exception) -> Response:
        """Map an exception raised during an action to a response."""
        # Whatever the failed action rendered was never returned
        instance.context.rendered = False
        message = exc.message if isinstance(exc, Fault) else str(exc)
        where = f"{type(instance).__name__}#{action}"

        if isinstance(exc, Fault):
            self._log_fault(exc, where)

        if exc in instance.rescues:
            return instance.handle_exception(exc, message)

        if isinstance(exc, MissingParameterFault):
            return instance.bad_request(message)

        if not isinstance(exc, Fault):
            logger.exception("Unhandled error in %s", where)
        return instance.handle_exception(exc, message)

    @staticmethod
    def _log_fault(fault: Fault, where: str) -> None:
        """Log a fault at the level its severity maps to."""
        level = SEVERITY_LOG_LEVELS.get(fault.severity, logging.ERROR)
        logger.log(
            level,
            "[%s] %s in %s: %s",
            fault.domain.value.upper(),
            fault.code,
            where,
            fault.message,
            extra={"fault": fault.to_dict()},
        )
