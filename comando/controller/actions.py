"""
Action registry.

Controller actions are declared with ``@action`` and collected into an
explicit name -> method table when the controller class is created, so
dispatch never looks up arbitrary attributes by request-supplied names.
"""

from typing import Any, Callable, Dict, Iterator, Optional, TypeVar, Union, overload

F = TypeVar("F", bound=Callable[..., Any])

ACTION_ATTR = "__action_name__"


@overload
def action(func: F) -> F: ...


@overload
def action(name: Optional[str] = None) -> Callable[[F], F]: ...


def action(func_or_name: Union[Callable, str, None] = None):
    """
    Mark a controller method as an action.

    Usage:
        @action
        def index(self): ...

        @action("new")
        def new_form(self): ...
    """

    def mark(func: F, name: Optional[str]) -> F:
        setattr(func, ACTION_ATTR, name or func.__name__)
        return func

    if callable(func_or_name):
        return mark(func_or_name, None)

    def decorator(func: F) -> F:
        return mark(func, func_or_name)

    return decorator


class ActionRegistry:
    """
    Name -> method-name table for one controller class.

    Built once per class from the class and its bases. A subclass that
    redefines an inherited action's method (with or without ``@action``)
    overrides it under the same name.
    """

    def __init__(self, actions: Optional[Dict[str, str]] = None):
        self._actions: Dict[str, str] = dict(actions or {})

    @classmethod
    def collect(cls, controller_cls: type) -> "ActionRegistry":
        actions: Dict[str, str] = {}
        for klass in reversed(controller_cls.__mro__):
            for attr, value in vars(klass).items():
                name = getattr(value, ACTION_ATTR, None)
                if name is not None:
                    # Drop any earlier name bound to the same method
                    actions = {k: v for k, v in actions.items() if v != attr}
                    actions[name] = attr
        return cls(actions)

    def resolve(self, name: str) -> Optional[str]:
        """Method name implementing action ``name``, or None."""
        return self._actions.get(name)

    def names(self) -> list:
        return list(self._actions)

    def __contains__(self, name: str) -> bool:
        return name in self._actions

    def __iter__(self) -> Iterator[str]:
        return iter(self._actions)

    def __len__(self) -> int:
        return len(self._actions)

    def __repr__(self) -> str:
        return f"ActionRegistry({self.names()})"
