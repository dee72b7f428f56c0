"""Core validator implementations.

Validators are referenced from class schemas by short name (``NotEmpty``,
``StringLength``...) and resolved to the classes defined here. Each one is
configured with an options mapping and checks a single value.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sized
import re
import sys
from typing import Any, ClassVar

from .errors import ValidationError, ValidationResult


class ValidatorInterface(ABC):
    """Contract of every validator a class schema may reference."""

    # Option name -> default value
    supported_options: ClassVar[dict[str, Any]] = {}
    # Whether None and "" pass without being checked
    accepts_empty_values: ClassVar[bool] = True

    def __init__(self, options: Mapping[str, Any] | None = None):
        options = dict(options or {})
        unsupported = set(options) - set(self.supported_options)
        if unsupported:
            raise ValueError(
                f"Unsupported validation option(s) for {type(self).__name__}: "
                f"{', '.join(sorted(unsupported))}"
            )
        self.options = {**self.supported_options, **options}

    def validate(self, value: Any) -> ValidationResult:
        """Check a value and collect every error found."""
        result = ValidationResult()
        if self.accepts_empty_values and (value is None or value == ""):
            return result
        error = self.is_valid(value)
        if error is not None:
            result.add_error(error)
        return result

    @abstractmethod
    def is_valid(self, value: Any) -> ValidationError | None:
        """Return an error describing why the value is invalid, or None."""


class NotEmptyValidator(ValidatorInterface):
    """Rejects None, empty strings and empty collections."""

    accepts_empty_values = False

    def is_valid(self, value: Any) -> ValidationError | None:
        if value is None or value == "":
            return ValidationError(
                type="empty_value", message="The given subject was empty."
            )
        if isinstance(value, Sized) and len(value) == 0:
            return ValidationError(
                type="empty_value", message="The given subject was empty."
            )
        return None


class StringLengthValidator(ValidatorInterface):
    """Checks the length of a string against a minimum and maximum."""

    supported_options = {"minimum": 0, "maximum": sys.maxsize}

    def is_valid(self, value: Any) -> ValidationError | None:
        if not isinstance(value, str):
            return ValidationError(
                type="invalid_type", message="The given value is not a string."
            )

        minimum, maximum = self.options["minimum"], self.options["maximum"]
        if not minimum <= len(value) <= maximum:
            return ValidationError(
                type="invalid_length",
                message=f"The length of this text must be between {minimum} "
                f"and {maximum} characters.",
            )
        return None


class EmailAddressValidator(ValidatorInterface):
    """Checks that a value is an email address."""

    EMAIL_PATTERN = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    def is_valid(self, value: Any) -> ValidationError | None:
        if not isinstance(value, str) or not re.match(self.EMAIL_PATTERN, value):
            return ValidationError(
                type="invalid_email",
                message=f"'{value}' is not a valid email address.",
                help="Format: user@domain.com",
            )
        return None


class NumberRangeValidator(ValidatorInterface):
    """Checks that a number lies within a range (inclusive)."""

    supported_options = {"minimum": 0, "maximum": sys.maxsize}

    def is_valid(self, value: Any) -> ValidationError | None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return ValidationError(
                type="invalid_type", message="A valid number is expected."
            )

        minimum, maximum = self.options["minimum"], self.options["maximum"]
        if minimum > maximum:
            minimum, maximum = maximum, minimum
        if not minimum <= value <= maximum:
            return ValidationError(
                type="out_of_range",
                message=f"The given subject was not in the valid range "
                f"({minimum} - {maximum}).",
            )
        return None


class RegularExpressionValidator(ValidatorInterface):
    """Checks a value against a regular expression."""

    supported_options = {"regular_expression": None}

    def __init__(self, options: Mapping[str, Any] | None = None):
        super().__init__(options)
        if not self.options["regular_expression"]:
            raise ValueError(
                "RegularExpressionValidator requires the 'regular_expression' option"
            )
        self.pattern = re.compile(self.options["regular_expression"])

    def is_valid(self, value: Any) -> ValidationError | None:
        if not self.pattern.search(str(value)):
            return ValidationError(
                type="pattern_mismatch",
                message="The given subject did not match the pattern.",
                help=f"Pattern: {self.pattern.pattern}",
            )
        return None


class IntegerValidator(ValidatorInterface):
    """Checks that a value is an integer or an integer string."""

    def is_valid(self, value: Any) -> ValidationError | None:
        if isinstance(value, bool):
            return ValidationError(
                type="invalid_integer", message="A valid integer number is expected."
            )
        if isinstance(value, int):
            return None
        if isinstance(value, str) and re.fullmatch(r"[+-]?\d+", value.strip()):
            return None
        return ValidationError(
            type="invalid_integer", message="A valid integer number is expected."
        )


class TextValidator(ValidatorInterface):
    """Checks that a string contains no markup."""

    TAG_PATTERN = re.compile(r"<[^>]+>")

    def is_valid(self, value: Any) -> ValidationError | None:
        if not isinstance(value, str) or self.TAG_PATTERN.search(value):
            return ValidationError(
                type="invalid_text",
                message="The given subject was not a valid text (e.g. contained "
                "XML tags).",
            )
        return None
