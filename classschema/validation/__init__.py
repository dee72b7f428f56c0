"""Validator implementations used by class schemas.

Class schemas record validator specifications; the validators themselves
are executed by consumers of the schema.
"""

from .errors import ValidationError, ValidationResult
from .validators import (
    EmailAddressValidator,
    IntegerValidator,
    NotEmptyValidator,
    NumberRangeValidator,
    RegularExpressionValidator,
    StringLengthValidator,
    TextValidator,
    ValidatorInterface,
)

__all__ = [
    "EmailAddressValidator",
    "IntegerValidator",
    "NotEmptyValidator",
    "NumberRangeValidator",
    "RegularExpressionValidator",
    "StringLengthValidator",
    "TextValidator",
    "ValidationError",
    "ValidationResult",
    "ValidatorInterface",
]
