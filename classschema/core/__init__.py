"""Core functionality for class schema construction."""

from .builders import MethodMetadataBuilder, PropertyMetadataBuilder
from .cache import SchemaCache
from .config import ReflectionSettings, settings
from .descriptors import (
    ClassFlag,
    MethodCharacteristics,
    PropertyCharacteristics,
    ValidatorSpec,
)
from .docstring import Docstring, DocstringParser, DocParam
from .exceptions import (
    AmbiguousDomainObjectError,
    InvalidTypeHintError,
    InvalidValidationConfigurationError,
    MalformedMarkerError,
    NoSuchMethodError,
    NoSuchMethodParameterError,
    NoSuchPropertyError,
    NoSuchValidatorError,
    ReflectionError,
    UnknownClassError,
)
from .introspection import ClassIntrospector, ReflectedClass, Visibility
from .logging import (
    SchemaOperationLogger,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)
from .markers import (
    Cascade,
    IgnoreValidation,
    Inject,
    Lazy,
    MarkerReader,
    Transient,
    Validate,
)
from .schema import ClassSchema, Method, MethodParameter, Property
from .service import ReflectionService
from .validator_resolver import ValidatorClassNameResolver

# Export all components
__all__ = [
    "AmbiguousDomainObjectError",
    # Markers
    "Cascade",
    "ClassFlag",
    "ClassIntrospector",
    # Schema
    "ClassSchema",
    "DocParam",
    "Docstring",
    "DocstringParser",
    "IgnoreValidation",
    "Inject",
    "InvalidTypeHintError",
    "InvalidValidationConfigurationError",
    "Lazy",
    "MalformedMarkerError",
    "MarkerReader",
    "Method",
    "MethodCharacteristics",
    "MethodMetadataBuilder",
    "MethodParameter",
    "NoSuchMethodError",
    "NoSuchMethodParameterError",
    "NoSuchPropertyError",
    "NoSuchValidatorError",
    "Property",
    "PropertyCharacteristics",
    "PropertyMetadataBuilder",
    "ReflectedClass",
    # Errors
    "ReflectionError",
    "ReflectionService",
    "ReflectionSettings",
    "SchemaCache",
    "SchemaOperationLogger",
    "Transient",
    "UnknownClassError",
    "Validate",
    "ValidatorClassNameResolver",
    "ValidatorSpec",
    "Visibility",
    "bind_context",
    "clear_context",
    # Logging
    "configure_logging",
    "get_logger",
    "settings",
]
