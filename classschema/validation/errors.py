"""Error and result data structures for value validators.

Validators referenced from class schemas report their findings with these
structures. The class schema itself never runs validators; consumers do.
"""

from dataclasses import dataclass, field


@dataclass
class ValidationError:
    """Represents a validation error.

    Contains detailed information about what went wrong during validation,
    including context information to help users fix the issue.
    """

    type: str
    message: str
    field: str | None = None
    help: str | None = None

    def __str__(self) -> str:
        """Return a formatted string representation of the error."""
        parts = [f"{self.type}: {self.message}"]

        if self.field:
            parts.append(f"(field: {self.field})")
        if self.help:
            parts.append(f"Help: {self.help}")

        return " ".join(parts)


@dataclass
class ValidationResult:
    """Complete validation result."""

    errors: list[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def error_count(self) -> int:
        """Number of validation errors."""
        return len(self.errors)

    def add_error(self, error: ValidationError) -> None:
        """Add a validation error to the result."""
        self.errors.append(error)

    def extend_errors(self, errors: list[ValidationError]) -> None:
        """Add multiple validation errors to the result."""
        self.errors.extend(errors)

    def __bool__(self) -> bool:
        return self.is_valid

    def __str__(self) -> str:
        """Return a formatted string representation of the validation result."""
        if self.is_valid:
            return "Valid"

        lines = [f"Invalid ({self.error_count} errors)"]
        for error in self.errors:
            lines.append(f"  - {error}")
        return "\n".join(lines)
