"""
Controller Context - per-invocation controller state.

One context is created when dispatch starts and discarded once the response
triple has been returned. It is never shared between invocations.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, MutableMapping, Optional, TYPE_CHECKING

from ..params import ParameterAccessor
from ..request import Request
from ..sessions import FlashMessages

if TYPE_CHECKING:
    from ..auth import UserView
    from ..config import ComandoConfig


@dataclass
class ControllerContext:
    """
    State owned by a single action invocation.

    Attributes:
        request: The inbound request
        params: Typed accessor over the request parameters
        session: Session mapping (shared with the external session store)
        flash: Flash messages, mirrored into the session
        rendered: Latch set once a response has been produced
        current_user: Cached user view (valid once ``user_resolved`` is set)
        user_resolved: Whether the current user has been looked up
        format: Format chosen by the last content negotiation
        state: Free-form per-request storage for callbacks and actions
    """

    request: Request
    params: ParameterAccessor
    session: MutableMapping[str, Any]
    flash: FlashMessages
    rendered: bool = False
    current_user: Optional["UserView"] = None
    user_resolved: bool = False
    format: Optional[str] = None
    state: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_request(
        cls,
        request: Request,
        config: Optional["ComandoConfig"] = None,
    ) -> "ControllerContext":
        session_key = config.flash_session_key if config else "flash"
        return cls(
            request=request,
            params=ParameterAccessor(request.params),
            session=request.session,
            flash=FlashMessages(request.session, request.flash, session_key=session_key),
        )

    @property
    def path(self) -> str:
        return self.request.path

    @property
    def headers(self):
        return self.request.headers
