"""
Comando - Rails-style controller layer.

Integrates:
- Controller: composition root with action registry and Rails-style helpers
- Callbacks: before/around/after action hooks with only/except filters
- Negotiation: respond_to over request format, Accept header and path extension
- Params: typed accessors, strong parameters and validation helpers
- Auth: session-backed current user and a role/ownership rule table
- Faults: structured error signals and rescue_from handlers
- Templates: Jinja2 view rendering
"""

__version__ = "0.1.0"

from .config import ComandoConfig, ConfigLoader
from .request import Request, Headers
from .response import (
    Response,
    ResponseBuilder,
    encode_json,
    Ok,
    Created,
    NoContent,
    BadRequest,
    Unauthorized,
    Forbidden,
    NotFound,
    NotAcceptable,
    UnprocessableEntity,
    InternalError,
    ServiceUnavailable,
)

from .faults import (
    Fault,
    FaultDomain,
    Severity,
    MissingParameterFault,
    DoubleRenderFault,
    UnknownActionFault,
    UnknownControllerFault,
    TemplateRenderFault,
    ConfigInvalidFault,
    RescueRegistry,
)

from .params import ParameterAccessor, StrongParameters, ParameterValidator
from .sessions import FlashMessages
from .auth import AccessPolicy, AuthAdapter, UserView, session_user
from .templates import TemplateEngine

from .controller import (
    action,
    Controller,
    ControllerContext,
    CallbackChain,
    CallbackRegistration,
    ContentNegotiator,
)

from .dispatcher import Dispatcher

__all__ = [
    "__version__",
    "ComandoConfig",
    "ConfigLoader",
    "Request",
    "Headers",
    "Response",
    "ResponseBuilder",
    "encode_json",
    "Ok",
    "Created",
    "NoContent",
    "BadRequest",
    "Unauthorized",
    "Forbidden",
    "NotFound",
    "NotAcceptable",
    "UnprocessableEntity",
    "InternalError",
    "ServiceUnavailable",
    "Fault",
    "FaultDomain",
    "Severity",
    "MissingParameterFault",
    "DoubleRenderFault",
    "UnknownActionFault",
    "UnknownControllerFault",
    "TemplateRenderFault",
    "ConfigInvalidFault",
    "RescueRegistry",
    "ParameterAccessor",
    "StrongParameters",
    "ParameterValidator",
    "FlashMessages",
    "AccessPolicy",
    "AuthAdapter",
    "UserView",
    "session_user",
    "TemplateEngine",
    "action",
    "Controller",
    "ControllerContext",
    "CallbackChain",
    "CallbackRegistration",
    "ContentNegotiator",
    "Dispatcher",
]
