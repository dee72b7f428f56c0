"""Reflection-specific exceptions for class schema construction and queries."""


class ReflectionError(Exception):
    """Base exception for all reflection operations.

    This is the parent class for all schema-related errors,
    allowing callers to catch all reflection issues with a single except clause.
    """

    def __init__(self, message: str, cause: Exception | None = None):
        """Initialize reflection error.

        Args:
            message: Human-readable error description
            cause: Optional underlying exception that caused this error
        """
        super().__init__(message)
        self.cause = cause


class UnknownClassError(ReflectionError):
    """The requested class name cannot be imported.

    Raised when:
    - The module part of the name does not import
    - The module has no attribute with the class part of the name
    - The attribute exists but is not a class
    """

    def __init__(self, class_name: str, cause: Exception | None = None):
        super().__init__(f'Class "{class_name}" does not exist', cause)
        self.class_name = class_name


class MalformedMarkerError(ReflectionError):
    """A declarative marker's arguments cannot be decoded.

    Raised when:
    - The marker kind is not known to the marker reader
    - More positional arguments are given than the marker accepts
    - Argument values do not match the marker's argument types
    """

    pass


class NoSuchValidatorError(ReflectionError):
    """A validator name does not resolve to a validator implementation."""

    def __init__(self, validator_name: str, cause: Exception | None = None):
        super().__init__(
            f'Validator "{validator_name}" could not be resolved. '
            "Check your spelling and make sure the validator implements "
            "ValidatorInterface.",
            cause,
        )
        self.validator_name = validator_name


class InvalidTypeHintError(ReflectionError):
    """A validator is bound to a parameter without resolvable type information."""

    pass


class InvalidValidationConfigurationError(ReflectionError):
    """Validators were declared for a parameter the method does not have."""

    def __init__(self, message: str, validator_names: list[str] | None = None):
        super().__init__(message)
        self.validator_names = validator_names or []


class AmbiguousDomainObjectError(ReflectionError):
    """A class derives from both the entity and the value object base."""

    pass


class NoSuchPropertyError(ReflectionError):
    """The class schema has no property with the requested name."""

    def __init__(self, class_name: str, property_name: str):
        super().__init__(
            f'Property "{property_name}" does not exist in class "{class_name}"'
        )
        self.class_name = class_name
        self.property_name = property_name


class NoSuchMethodError(ReflectionError):
    """The class schema has no method with the requested name."""

    def __init__(self, class_name: str, method_name: str):
        super().__init__(
            f'Method "{method_name}" does not exist in class "{class_name}"'
        )
        self.class_name = class_name
        self.method_name = method_name


class NoSuchMethodParameterError(ReflectionError):
    """The method has no parameter with the requested name."""

    def __init__(self, class_name: str, method_name: str, parameter_name: str):
        super().__init__(
            f'Parameter "{parameter_name}" does not exist in method '
            f'"{class_name}.{method_name}()"'
        )
        self.class_name = class_name
        self.method_name = method_name
        self.parameter_name = parameter_name
