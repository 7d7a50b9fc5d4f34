"""
Comando Faults - Structured error signals.

Expected outcomes (unsupported format, authentication and authorization
failures) are modelled as responses. Faults are reserved for conditions the
calling code cannot treat as ordinary control flow: missing required
parameters, double renders, unknown actions and broken configuration.
"""

from .core import (
    Fault,
    FaultDomain,
    Severity,
    DOMAIN_DEFAULTS,
)

from .domains import (
    MissingParameterFault,
    DoubleRenderFault,
    UnknownActionFault,
    UnknownControllerFault,
    TemplateRenderFault,
    ConfigInvalidFault,
)

from .handlers import RescueRegistry, kind_name

__all__ = [
    "Fault",
    "FaultDomain",
    "Severity",
    "DOMAIN_DEFAULTS",
    "MissingParameterFault",
    "DoubleRenderFault",
    "UnknownActionFault",
    "UnknownControllerFault",
    "TemplateRenderFault",
    "ConfigInvalidFault",
    "RescueRegistry",
    "kind_name",
]
