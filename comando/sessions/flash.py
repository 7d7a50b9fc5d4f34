"""
Flash messages - short-lived, type-keyed notices.

Messages written during a request are kept on the controller context and
mirrored into the session so they survive the following redirect.
"""

import html
from typing import Dict, Iterator, Mapping, MutableMapping, Optional


class FlashMessages(Mapping[str, str]):
    """
    Flash message store for one controller context.

    Args:
        session: Session mapping messages are mirrored into
        initial: Messages carried over from the previous request
        session_key: Session key holding the mirrored messages

    Usage:
        flash.add("Saved!", "success")
        flash["success"]  # "Saved!"
    """

    DEFAULT_TYPE = "notice"

    def __init__(
        self,
        session: Optional[MutableMapping] = None,
        initial: Optional[Mapping[str, str]] = None,
        session_key: str = "flash",
    ):
        self._session = session
        self._messages: Dict[str, str] = dict(initial or {})
        self.session_key = session_key

    def add(self, message: str, type: str = DEFAULT_TYPE) -> None:
        """Set the message for ``type``, replacing any earlier one."""
        self._messages[type] = message
        if self._session is not None:
            stored = self._session.get(self.session_key)
            if not isinstance(stored, dict):
                stored = {}
                self._session[self.session_key] = stored
            stored[type] = message

    def discard(self, type: Optional[str] = None) -> None:
        """Drop one message type (or all) from the context and the session."""
        stored = self._session.get(self.session_key) if self._session is not None else None
        if type is None:
            self._messages.clear()
            if isinstance(stored, dict):
                stored.clear()
            return
        self._messages.pop(type, None)
        if isinstance(stored, dict):
            stored.pop(type, None)

    def render_html(self) -> str:
        """Render messages as ``<div class="flash-TYPE">`` blocks."""
        return "".join(
            f'<div class="flash-{html.escape(kind)}">{html.escape(str(message))}</div>'
            for kind, message in self._messages.items()
        )

    def __getitem__(self, type: str) -> str:
        return self._messages[type]

    def __iter__(self) -> Iterator[str]:
        return iter(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __repr__(self) -> str:
        return f"FlashMessages({self._messages!r})"
