"""Class schema: the cached, immutable description of one managed class.

A ``ClassSchema`` is built in two phases. Construction reflects the class,
classifies it and runs the metadata builders, keeping their raw
descriptors. ``Property`` and ``Method`` objects are materialized from the
descriptors on first access and published through the ``SchemaCache``, so
every holder of a schema for the same class shares one read-only set.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from ..domain.interfaces import ControllerInterface, SingletonInterface
from ..domain.model import AbstractEntity, AbstractValueObject
from .builders import MethodMetadataBuilder, PropertyMetadataBuilder
from .cache import METHODS, PROPERTIES, SchemaCache
from .config import ReflectionSettings, settings as default_settings
from .descriptors import (
    ClassFlag,
    MethodCharacteristics,
    MethodDescriptor,
    ParameterDescriptor,
    PropertyCharacteristics,
    PropertyDescriptor,
    ValidatorSpec,
)
from .docstring import DocstringParser
from .exceptions import (
    AmbiguousDomainObjectError,
    NoSuchMethodError,
    NoSuchMethodParameterError,
    NoSuchPropertyError,
)
from .introspection import ClassIntrospector, ReflectedClass
from .logging import SchemaOperationLogger, get_logger
from .markers import MarkerReader
from .type_handling import (
    class_exists,
    qualified_name,
    translate_model_name_to_repository_name,
)
from .validator_resolver import ValidatorClassNameResolver

logger = get_logger(__name__)


def export_value(value: Any) -> Any:
    """Render a default value in a JSON-compatible form."""
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (list, tuple)):
        return [export_value(item) for item in value]
    if isinstance(value, dict):
        return {str(key): export_value(item) for key, item in value.items()}
    return repr(value)


@dataclass(frozen=True)
class Property:
    """Materialized metadata of one property."""

    name: str
    type: str | None
    element_type: str | None
    default_value: Any
    has_default_value: bool
    cascade: str | None
    validators: tuple[ValidatorSpec, ...]
    characteristics: PropertyCharacteristics

    @classmethod
    def from_descriptor(cls, descriptor: PropertyDescriptor) -> "Property":
        return cls(
            name=descriptor.name,
            type=descriptor.type,
            element_type=descriptor.element_type,
            default_value=descriptor.default_value,
            has_default_value=descriptor.has_default_value,
            cascade=descriptor.cascade,
            validators=tuple(descriptor.validators),
            characteristics=descriptor.characteristics,
        )

    def is_public(self) -> bool:
        return PropertyCharacteristics.VISIBILITY_PUBLIC in self.characteristics

    def is_protected(self) -> bool:
        return PropertyCharacteristics.VISIBILITY_PROTECTED in self.characteristics

    def is_private(self) -> bool:
        return PropertyCharacteristics.VISIBILITY_PRIVATE in self.characteristics

    def is_static(self) -> bool:
        return PropertyCharacteristics.IS_STATIC in self.characteristics

    def is_lazy(self) -> bool:
        return PropertyCharacteristics.ANNOTATED_LAZY in self.characteristics

    def is_transient(self) -> bool:
        return PropertyCharacteristics.ANNOTATED_TRANSIENT in self.characteristics

    def is_inject_property(self) -> bool:
        return PropertyCharacteristics.ANNOTATED_INJECT in self.characteristics

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "element_type": self.element_type,
            "default_value": export_value(self.default_value),
            "has_default_value": self.has_default_value,
            "cascade": self.cascade,
            "visibility": _visibility_name(self),
            "static": self.is_static(),
            "lazy": self.is_lazy(),
            "transient": self.is_transient(),
            "inject": self.is_inject_property(),
            "validators": [validator.to_dict() for validator in self.validators],
        }


@dataclass(frozen=True)
class MethodParameter:
    """Materialized metadata of one method parameter."""

    name: str
    position: int
    by_reference: bool
    array: bool
    optional: bool
    allows_null: bool
    type: str | None
    class_name: str | None
    has_default_value: bool
    default_value: Any
    dependency: str | None
    ignore_validation: bool
    validators: tuple[ValidatorSpec, ...]

    @classmethod
    def from_descriptor(cls, descriptor: ParameterDescriptor) -> "MethodParameter":
        return cls(
            name=descriptor.name,
            position=descriptor.position,
            by_reference=descriptor.by_reference,
            array=descriptor.array,
            optional=descriptor.optional,
            allows_null=descriptor.allows_null,
            type=descriptor.type,
            class_name=descriptor.class_name,
            has_default_value=descriptor.has_default_value,
            default_value=descriptor.default_value if descriptor.optional else None,
            dependency=descriptor.dependency,
            ignore_validation=descriptor.ignore_validation,
            validators=tuple(descriptor.validators),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "position": self.position,
            "array": self.array,
            "optional": self.optional,
            "allows_null": self.allows_null,
            "type": self.type,
            "class_name": self.class_name,
            "default_value": export_value(self.default_value),
            "dependency": self.dependency,
            "ignore_validation": self.ignore_validation,
            "validators": [validator.to_dict() for validator in self.validators],
        }


@dataclass(frozen=True)
class Method:
    """Materialized metadata of one method."""

    name: str
    class_name: str
    characteristics: MethodCharacteristics
    action: bool
    constructor: bool
    inject_method: bool
    parameters: Mapping[str, MethodParameter] = field(
        default_factory=lambda: MappingProxyType({})
    )
    ignore_validation: tuple[str, ...] = ()

    @classmethod
    def from_descriptor(cls, descriptor: MethodDescriptor, class_name: str) -> "Method":
        return cls(
            name=descriptor.name,
            class_name=class_name,
            characteristics=descriptor.characteristics,
            action=descriptor.is_action,
            constructor=descriptor.is_constructor,
            inject_method=descriptor.is_inject_method,
            parameters=MappingProxyType(
                {
                    name: MethodParameter.from_descriptor(parameter)
                    for name, parameter in descriptor.params.items()
                }
            ),
            ignore_validation=tuple(descriptor.ignore_validation),
        )

    def get_parameters(self) -> Mapping[str, MethodParameter]:
        return self.parameters

    def get_parameter(self, parameter_name: str) -> MethodParameter:
        """Return one parameter.

        Raises:
            NoSuchMethodParameterError: If the method has no such parameter
        """
        try:
            return self.parameters[parameter_name]
        except KeyError:
            raise NoSuchMethodParameterError(
                self.class_name, self.name, parameter_name
            ) from None

    def get_first_parameter(self) -> MethodParameter | None:
        return next(iter(self.parameters.values()), None)

    def is_action(self) -> bool:
        return self.action

    def is_constructor(self) -> bool:
        return self.constructor

    def is_inject_method(self) -> bool:
        return self.inject_method

    def is_public(self) -> bool:
        return MethodCharacteristics.VISIBILITY_PUBLIC in self.characteristics

    def is_protected(self) -> bool:
        return MethodCharacteristics.VISIBILITY_PROTECTED in self.characteristics

    def is_private(self) -> bool:
        return MethodCharacteristics.VISIBILITY_PRIVATE in self.characteristics

    def is_static(self) -> bool:
        return MethodCharacteristics.IS_STATIC in self.characteristics

    def is_abstract(self) -> bool:
        return MethodCharacteristics.IS_ABSTRACT in self.characteristics

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "visibility": _visibility_name(self),
            "static": self.is_static(),
            "abstract": self.is_abstract(),
            "action": self.action,
            "constructor": self.constructor,
            "inject_method": self.inject_method,
            "ignore_validation": list(self.ignore_validation),
            "parameters": [
                parameter.to_dict() for parameter in self.parameters.values()
            ],
        }


def _visibility_name(member: Property | Method) -> str:
    if member.is_private():
        return "private"
    if member.is_protected():
        return "protected"
    return "public"


class ClassSchema:
    """Immutable, queryable metadata of one managed class.

    Construction either succeeds completely or raises; no partially built
    schema is ever returned.

    Example:
        >>> schema = ClassSchema("blog.domain.model.Post")
        >>> schema.is_aggregate_root()
        True
        >>> schema.get_property("comments").element_type
        'blog.domain.model.Comment'
    """

    def __init__(
        self,
        class_or_name: type | str,
        *,
        settings: ReflectionSettings | None = None,
        cache: SchemaCache | None = None,
        introspector: ClassIntrospector | None = None,
        marker_reader: MarkerReader | None = None,
        docstring_parser: DocstringParser | None = None,
        validator_resolver: ValidatorClassNameResolver | None = None,
    ):
        """Build the schema of a class.

        Args:
            class_or_name: The class, or its ``module.QualName`` identity
            settings: Naming conventions and cache bound
            cache: Cache shared with other schemas; a private one when omitted
            introspector: Reflection over the class declaration
            marker_reader: Decoder for declarative markers
            docstring_parser: Parser for parameter types in docstrings
            validator_resolver: Resolver of validator names

        Raises:
            UnknownClassError: If the class cannot be loaded
            AmbiguousDomainObjectError: If the class is both entity and
                value object
            MalformedMarkerError: If a marker cannot be decoded
            NoSuchValidatorError: If a validator name does not resolve
            InvalidTypeHintError: If a validator targets an untyped parameter
            InvalidValidationConfigurationError: If a validator targets a
                missing parameter
        """
        self.settings = settings or default_settings
        self.cache = (
            cache
            if cache is not None
            else SchemaCache(max_entries=self.settings.cache_max_entries)
        )

        introspector = introspector or ClassIntrospector(self.settings)
        marker_reader = marker_reader or MarkerReader()
        validator_resolver = validator_resolver or ValidatorClassNameResolver(
            self.settings
        )
        property_builder = PropertyMetadataBuilder(
            self.settings, marker_reader, validator_resolver
        )
        method_builder = MethodMetadataBuilder(
            self.settings,
            marker_reader,
            validator_resolver,
            docstring_parser=docstring_parser,
        )

        label = (
            qualified_name(class_or_name)
            if isinstance(class_or_name, type)
            else str(class_or_name)
        )

        with SchemaOperationLogger(logger, "build_schema", label) as op_logger:
            reflected = introspector.reflect(class_or_name)
            self.class_name = reflected.name

            flags = self._classify(reflected)
            op_logger.log_progress("Class classified", flags=str(flags))

            self._property_descriptors: dict[str, PropertyDescriptor] = {}
            for reflected_property in reflected.properties:
                descriptor = property_builder.build(reflected_property)
                self._property_descriptors[descriptor.name] = descriptor
                characteristics = descriptor.characteristics
                if PropertyCharacteristics.ANNOTATED_INJECT in characteristics:
                    flags |= ClassFlag.HAS_INJECT_PROPERTIES

            is_controller = ClassFlag.CONTROLLER in flags
            self._method_descriptors: dict[str, MethodDescriptor] = {}
            self._inject_method_names: list[str] = []
            for reflected_method in reflected.methods:
                descriptor = method_builder.build(
                    reflected_method, self.class_name, is_controller
                )
                self._method_descriptors[descriptor.name] = descriptor
                if descriptor.is_constructor:
                    flags |= ClassFlag.HAS_CONSTRUCTOR
                if descriptor.is_inject_method:
                    self._inject_method_names.append(descriptor.name)

            if self._inject_method_names:
                flags |= ClassFlag.HAS_INJECT_METHODS

            self._flags = flags
            op_logger.record(
                properties=len(self._property_descriptors),
                methods=len(self._method_descriptors),
                inject_methods=len(self._inject_method_names),
            )

    def _classify(self, reflected: ReflectedClass) -> ClassFlag:
        flags = ClassFlag.NONE

        if reflected.implements(SingletonInterface):
            flags |= ClassFlag.SINGLETON

        if reflected.implements(ControllerInterface):
            flags |= ClassFlag.CONTROLLER

        is_entity = reflected.is_subclass_of(AbstractEntity)
        is_value_object = reflected.is_subclass_of(AbstractValueObject)

        if is_entity and is_value_object:
            raise AmbiguousDomainObjectError(
                f'Class "{reflected.name}" cannot be both an entity and a '
                "value object"
            )

        if is_entity:
            flags |= ClassFlag.ENTITY
            repository_name = translate_model_name_to_repository_name(
                reflected.cls, self.settings
            )
            if repository_name is not None and class_exists(repository_name):
                flags |= ClassFlag.AGGREGATE_ROOT
        elif is_value_object:
            flags |= ClassFlag.VALUE_OBJECT

        return flags

    @property
    def flags(self) -> ClassFlag:
        return self._flags

    # Properties

    def _build_properties(self) -> Mapping[str, Property]:
        return MappingProxyType(
            {
                name: Property.from_descriptor(descriptor)
                for name, descriptor in self._property_descriptors.items()
            }
        )

    def get_properties(self) -> Mapping[str, Property]:
        """All properties by name, in declaration order."""
        return self.cache.get_or_build(
            PROPERTIES, self.class_name, self._build_properties
        )

    def has_property(self, property_name: str) -> bool:
        return property_name in self._property_descriptors

    def get_property(self, property_name: str) -> Property:
        """Return one property.

        Raises:
            NoSuchPropertyError: If the class has no such property
        """
        try:
            return self.get_properties()[property_name]
        except KeyError:
            raise NoSuchPropertyError(self.class_name, property_name) from None

    def get_inject_properties(self) -> dict[str, Property]:
        return {
            name: prop
            for name, prop in self.get_properties().items()
            if prop.is_inject_property()
        }

    # Methods

    def _build_methods(self) -> Mapping[str, Method]:
        return MappingProxyType(
            {
                name: Method.from_descriptor(descriptor, self.class_name)
                for name, descriptor in self._method_descriptors.items()
            }
        )

    def get_methods(self) -> Mapping[str, Method]:
        """All methods by name, own methods before inherited ones."""
        return self.cache.get_or_build(METHODS, self.class_name, self._build_methods)

    def has_method(self, method_name: str) -> bool:
        return method_name in self._method_descriptors

    def get_method(self, method_name: str) -> Method:
        """Return one method.

        Raises:
            NoSuchMethodError: If the class has no such method
        """
        try:
            return self.get_methods()[method_name]
        except KeyError:
            raise NoSuchMethodError(self.class_name, method_name) from None

    def get_inject_methods(self) -> dict[str, Method]:
        """Inject setters in declaration order."""
        methods = self.get_methods()
        return {name: methods[name] for name in self._inject_method_names}

    # Classification

    def is_entity(self) -> bool:
        return ClassFlag.ENTITY in self._flags

    def is_value_object(self) -> bool:
        return ClassFlag.VALUE_OBJECT in self._flags

    def is_model(self) -> bool:
        return self.is_entity() or self.is_value_object()

    def is_aggregate_root(self) -> bool:
        return ClassFlag.AGGREGATE_ROOT in self._flags

    def is_singleton(self) -> bool:
        return ClassFlag.SINGLETON in self._flags

    def is_controller(self) -> bool:
        return ClassFlag.CONTROLLER in self._flags

    def has_constructor(self) -> bool:
        return ClassFlag.HAS_CONSTRUCTOR in self._flags

    def has_inject_properties(self) -> bool:
        return ClassFlag.HAS_INJECT_PROPERTIES in self._flags

    def has_inject_methods(self) -> bool:
        return ClassFlag.HAS_INJECT_METHODS in self._flags

    def to_dict(self) -> dict[str, Any]:
        """Describe the schema as JSON-compatible data."""
        return {
            "class_name": self.class_name,
            "entity": self.is_entity(),
            "value_object": self.is_value_object(),
            "aggregate_root": self.is_aggregate_root(),
            "singleton": self.is_singleton(),
            "controller": self.is_controller(),
            "has_constructor": self.has_constructor(),
            "has_inject_properties": self.has_inject_properties(),
            "has_inject_methods": self.has_inject_methods(),
            "inject_methods": list(self._inject_method_names),
            "properties": [prop.to_dict() for prop in self.get_properties().values()],
            "methods": [method.to_dict() for method in self.get_methods().values()],
        }

    def __repr__(self) -> str:
        return f"ClassSchema({self.class_name!r}, flags={self._flags!r})"
