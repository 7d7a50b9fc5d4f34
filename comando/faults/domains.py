"""
Comando Faults - Domain-specific fault types.
"""

from typing import Optional

from .core import Fault, FaultDomain, Severity


# ============================================================================
# PARAMS Faults
# ============================================================================

class MissingParameterFault(Fault):
    """A required top-level parameter is absent or empty."""

    def __init__(self, key: str, **kwargs):
        super().__init__(
            code="PARAM_MISSING",
            message=f"param is missing or the value is empty: {key}",
            domain=FaultDomain.PARAMS,
            metadata={"key": key, **kwargs.get("metadata", {})},
        )
        self.key = key


# ============================================================================
# FLOW Faults
# ============================================================================

class DoubleRenderFault(Fault):
    """A response helper was called after a response was already produced."""

    def __init__(self, helper: Optional[str] = None, **kwargs):
        super().__init__(
            code="DOUBLE_RENDER",
            message="Response already rendered",
            domain=FaultDomain.FLOW,
            severity=Severity.FATAL,
            metadata={"helper": helper, **kwargs.get("metadata", {})},
        )


# ============================================================================
# ROUTING Faults
# ============================================================================

class UnknownActionFault(Fault):
    """The controller has no action registered under the requested name."""

    def __init__(self, controller: str, action: str, **kwargs):
        super().__init__(
            code="ACTION_NOT_FOUND",
            message=f"{controller} has no action '{action}'",
            domain=FaultDomain.ROUTING,
            metadata={"controller": controller, "action": action, **kwargs.get("metadata", {})},
        )


class UnknownControllerFault(Fault):
    """No controller is registered under the requested name."""

    def __init__(self, name: str, **kwargs):
        super().__init__(
            code="CONTROLLER_NOT_FOUND",
            message=f"No controller registered as '{name}'",
            domain=FaultDomain.ROUTING,
            metadata={"controller": name, **kwargs.get("metadata", {})},
        )


# ============================================================================
# RENDER Faults
# ============================================================================

class TemplateRenderFault(Fault):
    """Template lookup or rendering failed."""

    def __init__(self, view: str, reason: str, **kwargs):
        super().__init__(
            code="TEMPLATE_RENDER_FAILED",
            message=f"Failed to render view '{view}': {reason}",
            domain=FaultDomain.RENDER,
            metadata={"view": view, "reason": reason, **kwargs.get("metadata", {})},
        )


# ============================================================================
# CONFIG Faults
# ============================================================================

class ConfigInvalidFault(Fault):
    """Configuration value is invalid."""

    def __init__(self, key: str, reason: str, **kwargs):
        super().__init__(
            code="CONFIG_INVALID",
            message=f"Configuration key '{key}' is invalid: {reason}",
            domain=FaultDomain.CONFIG,
            metadata={"key": key, "reason": reason, **kwargs.get("metadata", {})},
        )


__all__ = [
    "MissingParameterFault",
    "DoubleRenderFault",
    "UnknownActionFault",
    "UnknownControllerFault",
    "TemplateRenderFault",
    "ConfigInvalidFault",
]
