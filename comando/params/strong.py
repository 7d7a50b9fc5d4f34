"""
Strong Parameters - allow-list filtering of untrusted nested input.

``permit`` is the only way parameter subtrees reach model code: keys that
are not listed are dropped, nested mappings are filtered recursively, and
the result is always a freshly built dict.
"""

import copy
from typing import Any, Dict, Iterator, List, Mapping, Union

from ..faults import MissingParameterFault

PermitKey = Union[str, Mapping[str, List[Any]]]


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, (str, Mapping)) and len(value) == 0)


def permit_mapping(data: Any, keys: tuple) -> Dict[str, Any]:
    """
    Filter ``data`` down to the permitted ``keys``.

    Each key is either a plain string (copy that value if present) or a
    mapping of ``{subkey: [nested keys]}``:

    - a nested mapping is filtered recursively with the nested keys
    - a list of mappings is filtered element by element
    - an empty nested key list permits a list of scalars as-is
    """
    result: Dict[str, Any] = {}
    if not isinstance(data, Mapping):
        return result

    for key in keys:
        if isinstance(key, Mapping):
            for nested_key, nested_allowed in key.items():
                if nested_key not in data or data[nested_key] is None:
                    continue
                if isinstance(nested_allowed, str):
                    nested_allowed = (nested_allowed,)
                filtered = _permit_nested(data[nested_key], tuple(nested_allowed or ()))
                if filtered is not None:
                    result[nested_key] = filtered
        elif isinstance(key, str):
            if key in data:
                result[key] = copy.deepcopy(data[key])
        else:
            raise TypeError(f"permit() keys must be strings or mappings, got {type(key).__name__}")

    return result


def _permit_nested(value: Any, allowed: tuple) -> Any:
    if isinstance(value, Mapping):
        return permit_mapping(value, allowed)
    if isinstance(value, list):
        if not allowed:
            return [item for item in value if not isinstance(item, (Mapping, list))]
        return [permit_mapping(item, allowed) for item in value if isinstance(item, Mapping)]
    return None


class StrongParameters(Mapping[str, Any]):
    """
    Read-only view over one parameter subtree.

    Values stay readable (``view["name"]``) but only ``permit`` produces a
    dict meant to be handed on.

    Example:
        user = params.require("user")
        attrs = user.permit("name", "email", {"address": ["city", "zip"]})
    """

    def __init__(self, data: Any):
        self._data = data

    @property
    def data(self) -> Any:
        return self._data

    def permit(self, *keys: PermitKey) -> Dict[str, Any]:
        return permit_mapping(self._data, keys)

    def require(self, key: str) -> "StrongParameters":
        """Require a nested key inside this subtree."""
        if not isinstance(self._data, Mapping) or _is_empty(self._data.get(key)):
            raise MissingParameterFault(key)
        return StrongParameters(self._data[key])

    def __getitem__(self, key: str) -> Any:
        if not isinstance(self._data, Mapping):
            raise KeyError(key)
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        if isinstance(self._data, Mapping):
            return iter(self._data)
        return iter(())

    def __len__(self) -> int:
        return len(self._data) if isinstance(self._data, Mapping) else 0

    def __repr__(self) -> str:
        return f"StrongParameters({self._data!r})"
