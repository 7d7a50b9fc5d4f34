"""
Content negotiation - pick one response producer per request.

Format resolution order:
    1. explicit ``request.format``
    2. ``Accept`` header (substring match, in ACCEPT_FORMATS order)
    3. trailing ``.ext`` on the request path
    4. none

Dispatch:
    - a resolved format with a producer: call it
    - no resolved format and an ``html`` producer: call ``html``
    - anything else: 406 Not Acceptable
"""

from __future__ import annotations

import logging
from typing import Callable, Mapping, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from ..request import Request
    from ..response import Response, ResponseBuilder
    from .context import ControllerContext

logger = logging.getLogger("comando.controller.negotiation")

Producer = Callable[[], "Response"]

ACCEPT_FORMATS: Tuple[Tuple[str, str], ...] = (
    ("application/json", "json"),
    ("application/xml", "xml"),
    ("text/html", "html"),
)

DEFAULT_FORMAT = "html"


def resolve_format(request: "Request") -> Optional[str]:
    """Determine the requested format, or None when the client expressed none."""
    if request.format:
        return request.format

    accept = request.header("Accept")
    if accept:
        for media_type, fmt in ACCEPT_FORMATS:
            if media_type in accept:
                return fmt

    split = request.extension()
    if split is not None:
        return split[1]

    return None


class ContentNegotiator:
    """
    ``respond_to`` implementation for one controller context.

    Example:
        return negotiator.respond_to({
            "html": lambda: responses.render("users/index", {"users": users}),
            "json": lambda: responses.json(users),
        })
    """

    def __init__(self, context: "ControllerContext", responses: "ResponseBuilder"):
        self.context = context
        self.responses = responses

    def resolve(self) -> Optional[str]:
        return resolve_format(self.context.request)

    def respond_to(self, formats: Mapping[str, Producer]) -> "Response":
        requested = self.resolve()
        self.context.format = requested

        if requested is not None and requested in formats:
            logger.debug("Responding with %s", requested)
            return formats[requested]()

        if requested is None and DEFAULT_FORMAT in formats:
            self.context.format = DEFAULT_FORMAT
            return formats[DEFAULT_FORMAT]()

        logger.debug("No producer for format %r (have %s)", requested, sorted(formats))
        return self.responses.not_acceptable()
