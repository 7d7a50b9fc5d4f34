"""
Comando Faults - Rescue handler registry.

Controllers register handlers for named error kinds with ``rescue_from``.
Kinds are resolved by name only: a string is used as-is and an exception
class (or instance) is keyed by its class name. Registering the same kind
twice replaces the earlier handler.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, Optional, Union

RescueKind = Union[str, type, BaseException]
RescueHandler = Callable[[Any, Optional[str]], Any]


def kind_name(kind: RescueKind) -> str:
    """Normalize a rescue kind to its registry key."""
    if isinstance(kind, str):
        return kind
    if isinstance(kind, type):
        return kind.__name__
    if isinstance(kind, BaseException):
        return type(kind).__name__
    raise TypeError(f"Cannot rescue from {kind!r}: expected a name or exception class")


class RescueRegistry:
    """
    Ordered registry of rescue handlers.

    Example:
        registry = RescueRegistry()
        registry.register("RecordNotFound", lambda ctrl, msg: ctrl.not_found(msg))
        handler = registry.resolve("RecordNotFound")
    """

    def __init__(self):
        self._handlers: Dict[str, RescueHandler] = {}

    def register(self, kind: RescueKind, handler: RescueHandler) -> None:
        if not callable(handler):
            raise TypeError("rescue handler must be callable")
        self._handlers[kind_name(kind)] = handler

    def resolve(self, kind: RescueKind) -> Optional[RescueHandler]:
        return self._handlers.get(kind_name(kind))

    def __contains__(self, kind: RescueKind) -> bool:
        return self.resolve(kind) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)
