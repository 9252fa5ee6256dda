"""
Type-specific answer validators.

Each module implements the validators for one family of answer types.
"""

from .choice import validate_mcq, validate_multiple
from .numeric import validate_integer
from .string import validate_string

__all__ = [
    "validate_mcq",
    "validate_multiple",
    "validate_integer",
    "validate_string",
]
