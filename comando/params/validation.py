"""
Parameter validation helpers.

Each check returns ``None`` when the parameter passes (or is absent and not
required) and a 400 response otherwise, so they slot directly into
before-action callbacks:

    def setup(self):
        self.before_action(lambda c: c.validate.validate_email("email", required=True),
                           only=["create"])
"""

import re
from typing import Any, Callable, Iterable, Optional, TYPE_CHECKING

from .accessor import ParameterAccessor

if TYPE_CHECKING:
    from ..response import Response, ResponseBuilder

EMAIL_PATTERN = re.compile(r"^[\w.\-]+@[\w.\-]+\.\w+$")
UNSAFE_CHARACTERS = re.compile(r"[<>\"'&]")


class ParameterValidator:
    """Validation checks over a ParameterAccessor that answer with 400s."""

    def __init__(self, params: ParameterAccessor, responses: "ResponseBuilder"):
        self.params = params
        self.responses = responses

    def require_params(self, *keys: str) -> Optional["Response"]:
        missing = [key for key in keys if not self.params.has(key)]
        if missing:
            return self.responses.bad_request("Missing required parameters", missing)
        return None

    def validate_param(
        self,
        key: str,
        validator: Callable[[Any], bool],
        error_message: Optional[str] = None,
    ) -> Optional["Response"]:
        value = self.params.get(key)
        if value is not None and not validator(value):
            return self.responses.bad_request(error_message or f"Invalid parameter: {key}")
        return None

    def validate_email(self, key: str, required: bool = False) -> Optional["Response"]:
        value = self.params.get(key)
        if value is None:
            if required:
                return self.responses.bad_request("Email is required")
            return None
        if not EMAIL_PATTERN.match(str(value)):
            return self.responses.bad_request("Invalid email format")
        return None

    def validate_length(
        self,
        key: str,
        min_length: Optional[int] = None,
        max_length: Optional[int] = None,
    ) -> Optional["Response"]:
        value = self.params.as_string(key)
        if value is None:
            return None
        if min_length is not None and len(value) < min_length:
            return self.responses.bad_request(
                f"Parameter '{key}' must be at least {min_length} characters"
            )
        if max_length is not None and len(value) > max_length:
            return self.responses.bad_request(
                f"Parameter '{key}' must be at most {max_length} characters"
            )
        return None

    def validate_range(
        self,
        key: str,
        min_value: Optional[float] = None,
        max_value: Optional[float] = None,
    ) -> Optional["Response"]:
        value = self.params.as_number(key)
        if value is None:
            return None
        if min_value is not None and value < min_value:
            return self.responses.bad_request(f"Parameter '{key}' must be at least {min_value}")
        if max_value is not None and value > max_value:
            return self.responses.bad_request(f"Parameter '{key}' must be at most {max_value}")
        return None

    def validate_inclusion(self, key: str, allowed_values: Iterable[Any]) -> Optional["Response"]:
        value = self.params.get(key)
        if value is None:
            return None
        allowed = list(allowed_values)
        if value in allowed:
            return None
        return self.responses.bad_request(
            f"Parameter '{key}' must be one of: {', '.join(str(v) for v in allowed)}"
        )

    def sanitize_string(self, key: str) -> Optional[str]:
        """Trim whitespace and strip HTML-significant characters."""
        value = self.params.as_string(key)
        if value is None:
            return None
        return UNSAFE_CHARACTERS.sub("", value.strip())
