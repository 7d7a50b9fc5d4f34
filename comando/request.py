"""
Request - Inbound request shape consumed by controllers.

The transport, router and body parser live outside this package. They hand
over a plain mapping (``params``, ``session``, ``flash``, ``headers``,
``path``, ``format``, ...) which is wrapped here into a Request with
case-insensitive header access.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Mapping, MutableMapping, Optional, Tuple


# ============================================================================
# Headers
# ============================================================================

class Headers(Mapping[str, str]):
    """
    Case-insensitive header access with original casing preserved.

    Lookups by any casing succeed; iteration yields the names as supplied
    by the transport.
    """

    def __init__(self, raw: Optional[Mapping[str, Any]] = None):
        self._raw: Dict[str, str] = {}
        self._index: Dict[str, str] = {}
        for name, value in (raw or {}).items():
            if value is None:
                continue
            self._raw[name] = str(value)
            self._index.setdefault(name.lower(), name)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get header value (case-insensitive)."""
        original = self._index.get(name.lower())
        if original is None:
            return default
        return self._raw[original]

    def has(self, name: str) -> bool:
        return name.lower() in self._index

    def __getitem__(self, name: str) -> str:
        value = self.get(name)
        if value is None:
            raise KeyError(f"Header '{name}' not found")
        return value

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __iter__(self) -> Iterator[str]:
        return iter(self._raw)

    def __len__(self) -> int:
        return len(self._raw)

    def items_list(self) -> list:
        return list(self._raw.items())

    def __repr__(self) -> str:
        return f"Headers({self.items_list()})"


# ============================================================================
# Request
# ============================================================================

@dataclass
class Request:
    """
    Inbound request.

    Attributes:
        params: Merged path, query and body parameters
        session: Session mapping, persisted by an external store
        flash: Flash messages carried over from the previous request
        headers: Request headers (case-insensitive)
        path: Request path
        format: Explicit response format override
        method: HTTP method
        body: Raw request body
        data: Parsed request body (JSON or form), if the transport decoded it
    """

    params: Dict[str, Any] = field(default_factory=dict)
    session: MutableMapping[str, Any] = field(default_factory=dict)
    flash: Dict[str, str] = field(default_factory=dict)
    headers: Headers = field(default_factory=Headers)
    path: str = "/"
    format: Optional[str] = None
    method: str = "GET"
    body: str = ""
    data: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        if not isinstance(self.headers, Headers):
            self.headers = Headers(self.headers)

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]] = None) -> "Request":
        """
        Build a Request from the plain mapping handed over by the transport.

        Missing fields take their defaults. ``session`` is kept by reference
        so that writes reach the external session store.
        """
        raw = raw or {}
        session = raw.get("session")
        return cls(
            params=dict(raw.get("params") or {}),
            session=session if session is not None else {},
            flash=dict(raw.get("flash") or {}),
            headers=Headers(raw.get("headers") or {}),
            path=raw.get("path") or "/",
            format=raw.get("format"),
            method=(raw.get("method") or "GET").upper(),
            body=raw.get("body") or "",
            data=raw.get("data"),
        )

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get a single header value (case-insensitive)."""
        return self.headers.get(name, default)

    @property
    def content_type(self) -> str:
        return (self.header("content-type") or "").lower()

    def is_json(self) -> bool:
        """Check if request content-type is JSON."""
        return "application/json" in self.content_type

    def is_form(self) -> bool:
        """Check if request content-type is URL-encoded form data."""
        return "application/x-www-form-urlencoded" in self.content_type

    def request_data(self) -> Dict[str, Any]:
        """Parsed body data (JSON object or form fields), or an empty dict."""
        return self.data or {}

    def request_body(self) -> str:
        """Raw request body."""
        return self.body or ""

    def extension(self) -> Optional[Tuple[str, str]]:
        """Split a trailing ``.ext`` off the path, returning (stem, ext) or None."""
        tail = self.path.rsplit("/", 1)[-1]
        if "." not in tail:
            return None
        stem, ext = self.path.rsplit(".", 1)
        if not ext or not (ext.isascii() and ext.isalnum()):
            return None
        return stem, ext
