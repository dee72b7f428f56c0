import re
from typing import Any

from classschema.validation import ValidationError, ValidatorInterface

SLUG_PATTERN = re.compile(r"[a-z0-9]+(-[a-z0-9]+)*")


class SlugValidator(ValidatorInterface):
    """Accepts lowercase words joined by dashes."""

    def is_valid(self, value: Any) -> ValidationError | None:
        if not isinstance(value, str) or not SLUG_PATTERN.fullmatch(value):
            return ValidationError(type="invalid_slug", message="Not a slug.")
        return None


class Slugify:
    """Not a validator."""
