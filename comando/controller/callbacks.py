"""
Action callbacks - before/around/after hooks around an action.

Execution order for ``CallbackChain.run(action_name, invoke)``:

1. Before hooks, in registration order. The first one returning a response
   halts the chain; that response is the result and nothing else runs.
2. Around hooks. With none applicable the action is invoked directly.
   Otherwise each hook is called with ``(controller, proceed)`` where
   ``proceed()`` invokes the action; the first hook returning a response
   supplies the result and later around hooks are not tried. Around hooks
   do not nest.
3. After hooks, in registration order, for side effects only.

Exceptions raised by hooks or the action propagate to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Union

logger = logging.getLogger("comando.controller.callbacks")

Callback = Callable[..., Any]
ActionNames = Optional[Union[str, Iterable[str]]]

BEFORE = "before"
AROUND = "around"
AFTER = "after"
KINDS = (BEFORE, AROUND, AFTER)


def _action_set(names: ActionNames) -> Optional[frozenset]:
    if names is None:
        return None
    if isinstance(names, str):
        return frozenset((names,))
    return frozenset(names)


def _callback_name(callback: Callback) -> str:
    return getattr(callback, "__qualname__", None) or getattr(callback, "__name__", None) or repr(callback)


@dataclass(frozen=True)
class CallbackRegistration:
    """
    One registered hook with its action filters.

    A hook applies to ``action_name`` iff (``only`` is absent or contains
    it) and (``except_`` is absent or does not contain it). ``except_``
    wins when a name appears in both.
    """

    callback: Callback
    only: Optional[frozenset] = None
    except_: Optional[frozenset] = None
    source: Any = None

    @classmethod
    def create(
        cls,
        callback: Callback,
        only: ActionNames = None,
        except_: ActionNames = None,
        source: Any = None,
    ) -> "CallbackRegistration":
        return cls(callback, _action_set(only), _action_set(except_), source if source is not None else callback)

    def applies_to(self, action_name: str) -> bool:
        if self.only is not None and action_name not in self.only:
            return False
        if self.except_ is not None and action_name in self.except_:
            return False
        return True

    @property
    def name(self) -> str:
        if isinstance(self.source, str):
            return self.source
        return _callback_name(self.callback)


class CallbackChain:
    """
    Ordered before/around/after hook lists for one controller instance.

    Args:
        owner: The object passed as first argument to every hook
    """

    def __init__(self, owner: Any):
        self.owner = owner
        self._hooks = {kind: [] for kind in KINDS}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def _resolve(self, callback: Union[str, Callback]) -> Callback:
        if isinstance(callback, str):
            method = getattr(self.owner, callback, None)
            if method is None or not callable(method):
                raise AttributeError(
                    f"{type(self.owner).__name__} has no callback method '{callback}'"
                )
            return lambda owner, *args, _method=method: _method(*args)
        if getattr(callback, "__self__", None) is self.owner:
            # Bound methods take no controller argument; adapt to the hook signature
            return lambda owner, *args, _method=callback: _method(*args)
        return callback

    def register(
        self,
        kind: str,
        callback: Union[str, Callback],
        *,
        only: ActionNames = None,
        except_: ActionNames = None,
        prepend: bool = False,
    ) -> CallbackRegistration:
        if kind not in self._hooks:
            raise ValueError(f"Unknown callback kind '{kind}'")
        registration = CallbackRegistration.create(
            self._resolve(callback), only=only, except_=except_, source=callback,
        )
        if prepend:
            self._hooks[kind].insert(0, registration)
        else:
            self._hooks[kind].append(registration)
        return registration

    def skip(self, kind: str, callback: Union[str, Callback]) -> int:
        """Remove every registration of ``callback``; returns how many were removed."""
        hooks = self._hooks[kind]
        kept = [reg for reg in hooks if reg.source != callback and reg.callback != callback]
        removed = len(hooks) - len(kept)
        self._hooks[kind] = kept
        return removed

    def registrations(self, kind: str) -> List[CallbackRegistration]:
        return list(self._hooks[kind])

    def applicable(self, kind: str, action_name: str) -> List[CallbackRegistration]:
        return [reg for reg in self._hooks[kind] if reg.applies_to(action_name)]

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def run_before(self, action_name: str) -> Any:
        for registration in self.applicable(BEFORE, action_name):
            result = registration.callback(self.owner)
            if result is not None:
                logger.debug("Before hook %s halted %r", registration.name, action_name)
                return result
        return None

    def run_around(self, action_name: str, invoke: Callable[[], Any]) -> Any:
        hooks = self.applicable(AROUND, action_name)
        if not hooks:
            return invoke()

        proceeded: List[Any] = []

        def proceed() -> Any:
            result = invoke()
            proceeded.append(result)
            return result

        for registration in hooks:
            result = registration.callback(self.owner, proceed)
            if result is not None:
                return result

        # No around hook returned a response: the action's own result stands,
        # it is not replaced with None
        return proceeded[-1] if proceeded else None

    def run_after(self, action_name: str) -> None:
        for registration in self.applicable(AFTER, action_name):
            registration.callback(self.owner)

    def run(self, action_name: str, invoke: Callable[[], Any]) -> Any:
        halted = self.run_before(action_name)
        if halted is not None:
            return halted

        result = self.run_around(action_name, invoke)
        self.run_after(action_name)
        return result
