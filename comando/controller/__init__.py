"""
Comando Controller - Rails-style controller layer.

Exports:
- Controller: composition root with Rails-style helpers
- action: decorator registering controller actions
- ControllerContext: per-invocation state
- CallbackChain / CallbackRegistration: before/around/after hooks
- ContentNegotiator: respond_to
"""

from .actions import action, ActionRegistry
from .base import Controller
from .callbacks import CallbackChain, CallbackRegistration, BEFORE, AROUND, AFTER
from .context import ControllerContext
from .negotiation import ContentNegotiator, resolve_format, ACCEPT_FORMATS
from .rest import RestfulActions

__all__ = [
    "action",
    "ActionRegistry",
    "Controller",
    "CallbackChain",
    "CallbackRegistration",
    "BEFORE",
    "AROUND",
    "AFTER",
    "ControllerContext",
    "ContentNegotiator",
    "resolve_format",
    "ACCEPT_FORMATS",
    "RestfulActions",
]
