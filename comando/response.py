"""
Response - Canonical {status, headers, body} triple and builders.

Provides:
- Response: immutable status/headers/body triple with JSON/HTML/redirect factories
- Status helpers (Ok, Created, NoContent, BadRequest, ...) that build bare responses
- ResponseBuilder: controller-facing helpers guarded by the per-context render latch
"""

from __future__ import annotations

import html
import json
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, TYPE_CHECKING

from .faults import DoubleRenderFault

if TYPE_CHECKING:
    from .config import ComandoConfig
    from .controller.context import ControllerContext
    from .templates import TemplateEngine


logger = logging.getLogger("comando.response")

HTML_CONTENT_TYPE = "text/html; charset=utf-8"
JSON_CONTENT_TYPE = "application/json; charset=utf-8"

JsonEncoder = Callable[[Any], str]


def _json_default_serializer(o):
    """Default JSON serializer for non-standard types."""
    if isinstance(o, (set, frozenset, tuple)):
        return list(o)
    if hasattr(o, "isoformat"):
        return o.isoformat()
    if isinstance(o, Mapping):
        return dict(o)
    if hasattr(o, "to_dict"):
        return o.to_dict()
    return str(o)


def encode_json(value: Any) -> str:
    """Default JSON codec."""
    return json.dumps(value, default=_json_default_serializer)


def _error_body(message: str, **extra: Any) -> Dict[str, Any]:
    body = {"status": "error", "message": message}
    body.update({key: value for key, value in extra.items() if value is not None})
    return body


# ============================================================================
# Response
# ============================================================================

@dataclass(frozen=True)
class Response:
    """
    Immutable HTTP response triple.

    Headers are exposed as a read-only mapping; build a new Response
    with ``with_headers`` instead of mutating one.
    """

    status: int = 200
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str = ""

    def __post_init__(self):
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    # ========================================================================
    # Factory Methods
    # ========================================================================

    @classmethod
    def json(
        cls,
        obj: Any,
        status: int = 200,
        *,
        encoder: Optional[JsonEncoder] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> "Response":
        """
        Create JSON response.

        Args:
            obj: Object to serialize
            status: HTTP status
            encoder: Custom JSON encoder (defaults to ``encode_json``)
            headers: Additional headers
        """
        merged = {
            "Content-Type": JSON_CONTENT_TYPE,
            "X-Content-Type-Options": "nosniff",
        }
        if headers:
            merged.update(headers)
        return cls(status=status, headers=merged, body=(encoder or encode_json)(obj))

    @classmethod
    def html(
        cls,
        content: str,
        status: int = 200,
        *,
        headers: Optional[Mapping[str, str]] = None,
    ) -> "Response":
        """Create HTML response."""
        merged = {"Content-Type": HTML_CONTENT_TYPE}
        if headers:
            merged.update(headers)
        return cls(status=status, headers=merged, body=content)

    @classmethod
    def redirect(cls, url: str, status: int = 302) -> "Response":
        """
        Create redirect response.

        Args:
            url: Redirect target (sent as ``Location``)
            status: HTTP status (default 302 Found)
        """
        escaped = html.escape(url, quote=True)
        return cls(
            status=status,
            headers={"Location": url, "Content-Type": HTML_CONTENT_TYPE},
            body=f'<html><body>Redirecting to <a href="{escaped}">{escaped}</a></body></html>',
        )

    # ========================================================================
    # Accessors
    # ========================================================================

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return default

    def with_headers(self, **headers: str) -> "Response":
        """Return a copy with extra headers (underscores become dashes)."""
        merged = dict(self.headers)
        for key, value in headers.items():
            merged[key.replace("_", "-")] = value
        return Response(status=self.status, headers=merged, body=self.body)

    def json_body(self) -> Any:
        """Decode the body as JSON."""
        return json.loads(self.body) if self.body else None

    @property
    def is_redirect(self) -> bool:
        return 300 <= self.status < 400 and "Location" in self.headers


# ============================================================================
# Status Helpers
# ============================================================================

def Ok(body: str = "OK", content_type: str = HTML_CONTENT_TYPE) -> Response:
    """200 OK response."""
    return Response(status=200, headers={"Content-Type": content_type}, body=body)


def Created(body: Any = None, location: Optional[str] = None, **kwargs) -> Response:
    """201 Created response."""
    headers = {"Location": location} if location else None
    return Response.json(body if body is not None else {"status": "created"}, 201, headers=headers, **kwargs)


def NoContent() -> Response:
    """204 No Content response."""
    return Response(status=204, headers={}, body="")


def BadRequest(message: str = "Bad Request", errors: Any = None, **kwargs) -> Response:
    """400 Bad Request response."""
    return Response.json(_error_body(message, errors=errors), 400, **kwargs)


def Unauthorized(message: str = "Unauthorized", **kwargs) -> Response:
    """401 Unauthorized response."""
    return Response.json(_error_body(message), 401, headers={"WWW-Authenticate": "Bearer"}, **kwargs)


def Forbidden(message: str = "Forbidden", **kwargs) -> Response:
    """403 Forbidden response."""
    return Response.json(_error_body(message), 403, **kwargs)


def NotFound(message: str = "Not Found", **kwargs) -> Response:
    """404 Not Found response."""
    return Response.json(_error_body(message), 404, **kwargs)


def NotAcceptable(**kwargs) -> Response:
    """406 Not Acceptable response."""
    return Response.json({"error": "Not Acceptable"}, 406, **kwargs)


def UnprocessableEntity(message: str = "Unprocessable Entity", errors: Any = None, **kwargs) -> Response:
    """422 Unprocessable Entity response."""
    return Response.json(_error_body(message, errors=errors), 422, **kwargs)


def InternalError(message: str = "Internal Server Error", details: Any = None, **kwargs) -> Response:
    """500 Internal Server Error response."""
    return Response.json(_error_body(message, details=details), 500, **kwargs)


def ServiceUnavailable(message: str = "Service Unavailable", retry_after: int = 3600, **kwargs) -> Response:
    """503 Service Unavailable response."""
    return Response.json(_error_body(message), 503, headers={"Retry-After": str(retry_after)}, **kwargs)


# ============================================================================
# ResponseBuilder
# ============================================================================

class ResponseBuilder:
    """
    Controller-facing response helpers.

    Every helper goes through ``_commit``, which checks and sets the
    context's ``rendered`` latch, so at most one response is produced per
    invocation. A second call raises DoubleRenderFault.

    Args:
        context: Per-invocation controller context (owns the latch)
        templates: Template engine used by ``render``
        config: Controller configuration
        encoder: JSON codec
    """

    def __init__(
        self,
        context: "ControllerContext",
        *,
        templates: Optional["TemplateEngine"] = None,
        config: Optional["ComandoConfig"] = None,
        encoder: Optional[JsonEncoder] = None,
    ):
        self.context = context
        self.templates = templates
        self.config = config
        self.encoder = encoder or encode_json

    def _guard(self, helper: str) -> None:
        if self.context.rendered:
            logger.error("Double render in %s", helper)
            raise DoubleRenderFault(helper)

    def _commit(self, helper: str, build: Callable[[], Response]) -> Response:
        self._guard(helper)
        response = build()
        self.context.rendered = True
        return response

    # ------------------------------------------------------------------
    # Core helpers
    # ------------------------------------------------------------------

    def render(self, view: str, data: Optional[Dict[str, Any]] = None, status: int = 200) -> Response:
        """
        Render a view through the template engine.

        ``flash``, ``session`` and ``params`` are injected into the template
        data alongside the caller's values.
        """
        self._guard("render")
        if self.templates is None:
            from .templates import TemplateEngine
            self.templates = TemplateEngine()

        payload = dict(data or {})
        payload["flash"] = dict(self.context.flash)
        payload["session"] = dict(self.context.session)
        payload["params"] = self.context.params.all()

        body = self.templates.render_template(view, payload)
        self.context.rendered = True
        return Response.html(body, status)

    def json(self, data: Any, status: int = 200) -> Response:
        return self._commit("json", lambda: Response.json(data, status, encoder=self.encoder))

    def redirect(self, path: str, status: int = 302) -> Response:
        return self._commit("redirect", lambda: Response.redirect(path, status))

    # ------------------------------------------------------------------
    # Status helpers
    # ------------------------------------------------------------------

    def ok(self, body: str = "OK", content_type: str = HTML_CONTENT_TYPE) -> Response:
        return self._commit("ok", lambda: Ok(body, content_type))

    def created(self, body: Any = None, location: Optional[str] = None) -> Response:
        return self._commit("created", lambda: Created(body, location, encoder=self.encoder))

    def no_content(self) -> Response:
        return self._commit("no_content", NoContent)

    def bad_request(self, message: str = "Bad Request", errors: Any = None) -> Response:
        return self._commit("bad_request", lambda: BadRequest(message, errors, encoder=self.encoder))

    def unauthorized(self, message: str = "Unauthorized") -> Response:
        return self._commit("unauthorized", lambda: Unauthorized(message, encoder=self.encoder))

    def forbidden(self, message: str = "Forbidden") -> Response:
        return self._commit("forbidden", lambda: Forbidden(message, encoder=self.encoder))

    def not_found(self, message: str = "Not Found") -> Response:
        return self._commit("not_found", lambda: NotFound(message, encoder=self.encoder))

    def not_acceptable(self) -> Response:
        return self._commit("not_acceptable", lambda: NotAcceptable(encoder=self.encoder))

    def unprocessable_entity(self, message: str = "Unprocessable Entity", errors: Any = None) -> Response:
        return self._commit(
            "unprocessable_entity",
            lambda: UnprocessableEntity(message, errors, encoder=self.encoder),
        )

    def internal_error(self, message: str = "Internal Server Error", details: Any = None) -> Response:
        # Details are only exposed in development
        if details is not None and not (self.config and self.config.is_development):
            details = None
        return self._commit("internal_error", lambda: InternalError(message, details, encoder=self.encoder))

    internal_server_error = internal_error

    def service_unavailable(self, message: str = "Service Unavailable", retry_after: Optional[int] = None) -> Response:
        if retry_after is None:
            retry_after = self.config.retry_after if self.config else 3600
        return self._commit(
            "service_unavailable",
            lambda: ServiceUnavailable(message, retry_after, encoder=self.encoder),
        )


__all__ = [
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
    "HTML_CONTENT_TYPE",
    "JSON_CONTENT_TYPE",
]
