"""
Comando Sessions - session-backed helpers.

The session itself is a plain mapping persisted by an external store; this
package only layers flash messaging on top of it.
"""

from .flash import FlashMessages

__all__ = ["FlashMessages"]
