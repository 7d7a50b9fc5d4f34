"""
Parameter Accessor - typed reads over the merged request parameters.

Parameters arrive as a loosely typed bag (path + query + body). Callers read
them through explicit coercions instead of relying on whatever type the
transport happened to produce:

    as_string   str(value)
    as_number   int if the text is integral, else float; default on failure
    as_integer  as_number, floored
    as_boolean  true/1/yes/on, false/0/no/off, non-zero numbers, bools
"""

import math
from typing import Any, Dict, Mapping, Optional, Union

from ..faults import MissingParameterFault
from .strong import StrongParameters, _is_empty, permit_mapping

Number = Union[int, float]

TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})
FALSE_STRINGS = frozenset({"false", "0", "no", "off"})


def coerce_number(value: Any) -> Optional[Number]:
    """Parse a number, returning None when the value is not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    # JSON bodies can carry Infinity/NaN; neither is a usable parameter
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def coerce_boolean(value: Any) -> Optional[bool]:
    """Interpret common boolean spellings, returning None when ambiguous."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUE_STRINGS:
            return True
        if lowered in FALSE_STRINGS:
            return False
    return None


class ParameterAccessor:
    """
    Typed accessor over a flat parameter mapping.

    The mapping is owned by the controller context; accessors never copy it
    except through ``all``/``permit``.
    """

    def __init__(self, params: Optional[Dict[str, Any]] = None):
        self._params: Dict[str, Any] = params if params is not None else {}

    @property
    def raw(self) -> Dict[str, Any]:
        return self._params

    def all(self) -> Dict[str, Any]:
        """Shallow copy of every parameter."""
        return dict(self._params)

    def get(self, key: str, default: Any = None) -> Any:
        value = self._params.get(key)
        return default if value is None else value

    def has(self, key: str) -> bool:
        return self._params.get(key) is not None

    def set(self, key: str, value: Any) -> None:
        self._params[key] = value

    def __contains__(self, key: str) -> bool:
        return self.has(key)

    def __getitem__(self, key: str) -> Any:
        return self._params[key]

    # ------------------------------------------------------------------
    # Typed reads
    # ------------------------------------------------------------------

    def as_string(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self._params.get(key)
        if value is None:
            return default
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    def as_number(self, key: str, default: Optional[Number] = None) -> Optional[Number]:
        value = self._params.get(key)
        if value is None:
            return default
        number = coerce_number(value)
        return default if number is None else number

    def as_integer(self, key: str, default: Optional[int] = None) -> Optional[int]:
        number = self.as_number(key)
        if number is None:
            return default
        return math.floor(number)

    def as_boolean(self, key: str, default: Optional[bool] = None) -> Optional[bool]:
        value = self._params.get(key)
        if value is None:
            return default
        result = coerce_boolean(value)
        return default if result is None else result

    def nested(self, *keys: str) -> Any:
        """Walk nested mappings, returning None as soon as a key is missing."""
        current: Any = self._params
        for key in keys:
            if not isinstance(current, Mapping) or current.get(key) is None:
                return None
            current = current[key]
        return current

    # ------------------------------------------------------------------
    # Strong parameters
    # ------------------------------------------------------------------

    def require(self, key: str) -> StrongParameters:
        """
        Require a top-level key and wrap it for permitting.

        Raises:
            MissingParameterFault: If the key is absent or its value is empty
        """
        value = self._params.get(key)
        if _is_empty(value):
            raise MissingParameterFault(key)
        return StrongParameters(value)

    def permit(self, *keys: Any) -> Dict[str, Any]:
        """Filter the whole parameter bag down to the listed keys."""
        return permit_mapping(self._params, keys)

    def pagination(self, default_page: int = 1, default_per_page: int = 20) -> Dict[str, int]:
        """
        Read ``page``/``per_page`` with limits applied.

        Returns:
            Dict with page, per_page, offset and limit
        """
        page = max(1, self.as_integer("page", default_page))
        per_page = min(100, max(1, self.as_integer("per_page", default_per_page)))
        return {
            "page": page,
            "per_page": per_page,
            "offset": (page - 1) * per_page,
            "limit": per_page,
        }
