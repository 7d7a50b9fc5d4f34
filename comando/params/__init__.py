"""
Comando Params - typed parameter access, strong parameters and validation.
"""

from .accessor import ParameterAccessor, coerce_boolean, coerce_number
from .strong import StrongParameters, permit_mapping
from .validation import ParameterValidator

__all__ = [
    "ParameterAccessor",
    "StrongParameters",
    "ParameterValidator",
    "permit_mapping",
    "coerce_boolean",
    "coerce_number",
]
