"""Property and method metadata builders.

The builders merge the three metadata sources of a member (native
reflection, declarative markers, docstrings) into one raw descriptor.
"""

from .config import ReflectionSettings, settings as default_settings
from .descriptors import (
    MethodCharacteristics,
    MethodDescriptor,
    ParameterDescriptor,
    PropertyCharacteristics,
    PropertyDescriptor,
    ValidatorSpec,
)
from .docstring import DocstringParser
from .exceptions import InvalidTypeHintError, InvalidValidationConfigurationError
from .introspection import (
    ReflectedMethod,
    ReflectedParameter,
    ReflectedProperty,
    Visibility,
)
from .markers import (
    CascadeMarker,
    IgnoreValidationMarker,
    InjectMarker,
    LazyMarker,
    MarkerReader,
    TransientMarker,
    ValidateMarker,
)
from .type_handling import TypeInfo, allows_none, is_collection_type, qualified_name
from .type_resolution import (
    ParameterContext,
    ResolverChain,
    parameter_type_resolver,
    property_type_resolver,
)
from .validator_resolver import ValidatorClassNameResolver

PROPERTY_VISIBILITY = {
    Visibility.PRIVATE: PropertyCharacteristics.VISIBILITY_PRIVATE,
    Visibility.PROTECTED: PropertyCharacteristics.VISIBILITY_PROTECTED,
    Visibility.PUBLIC: PropertyCharacteristics.VISIBILITY_PUBLIC,
}

PropertyTypeChain = ResolverChain[ReflectedProperty, list[TypeInfo]]
ParameterTypeChain = ResolverChain[ParameterContext, TypeInfo]

METHOD_VISIBILITY = {
    Visibility.PRIVATE: MethodCharacteristics.VISIBILITY_PRIVATE,
    Visibility.PROTECTED: MethodCharacteristics.VISIBILITY_PROTECTED,
    Visibility.PUBLIC: MethodCharacteristics.VISIBILITY_PUBLIC,
}


def build_validator_spec(
    marker: ValidateMarker, resolver: ValidatorClassNameResolver
) -> ValidatorSpec:
    """Turn a validate marker into a validator specification.

    Raises:
        NoSuchValidatorError: If the validator name does not resolve
    """
    return ValidatorSpec(
        name=marker.validator,
        options=marker.options,
        class_name=resolver.resolve(marker.validator),
    )


class PropertyMetadataBuilder:
    """Builds the raw descriptor of a property."""

    def __init__(
        self,
        settings: ReflectionSettings | None = None,
        marker_reader: MarkerReader | None = None,
        validator_resolver: ValidatorClassNameResolver | None = None,
        type_resolver: PropertyTypeChain | None = None,
    ):
        self.settings = settings or default_settings
        self.marker_reader = marker_reader or MarkerReader()
        self.validator_resolver = validator_resolver or ValidatorClassNameResolver(
            self.settings
        )
        self.type_resolver = type_resolver or property_type_resolver()

    def build(self, reflected_property: ReflectedProperty) -> PropertyDescriptor:
        """Build the descriptor of one property.

        Raises:
            MalformedMarkerError: If a marker on the property is malformed
            NoSuchValidatorError: If a validator name does not resolve
        """
        characteristics = PROPERTY_VISIBILITY[reflected_property.visibility]
        if reflected_property.is_static:
            characteristics |= PropertyCharacteristics.IS_STATIC

        descriptor = PropertyDescriptor(
            name=reflected_property.name,
            default_value=reflected_property.default,
            has_default_value=reflected_property.has_default,
        )

        markers = self.marker_reader.read_property(reflected_property)
        reader = self.marker_reader

        for validate_marker in reader.of_type(markers, ValidateMarker):
            descriptor.validators.append(
                build_validator_spec(validate_marker, self.validator_resolver)
            )

        if reader.first(markers, LazyMarker) is not None:
            characteristics |= PropertyCharacteristics.ANNOTATED_LAZY

        if reader.first(markers, TransientMarker) is not None:
            characteristics |= PropertyCharacteristics.ANNOTATED_TRANSIENT

        if (
            reflected_property.name != self.settings.settings_property_name
            and reader.first(markers, InjectMarker) is not None
        ):
            characteristics |= PropertyCharacteristics.ANNOTATED_INJECT

        types = self.type_resolver.resolve(reflected_property) or []

        cascade = reader.first(markers, CascadeMarker)
        if types and cascade is not None:
            descriptor.cascade = cascade.value

        if len(types) == 1:
            descriptor.type = types[0].name
        elif len(types) == 2:
            outer, element = types
            descriptor.type = outer.name
            if is_collection_type(outer.cls or outer.name) and element.is_class:
                descriptor.element_type = element.name

        descriptor.characteristics = characteristics
        return descriptor


class MethodMetadataBuilder:
    """Builds the raw descriptor of a method and its parameters."""

    def __init__(
        self,
        settings: ReflectionSettings | None = None,
        marker_reader: MarkerReader | None = None,
        validator_resolver: ValidatorClassNameResolver | None = None,
        type_resolver: ParameterTypeChain | None = None,
        docstring_parser: DocstringParser | None = None,
    ):
        self.settings = settings or default_settings
        self.marker_reader = marker_reader or MarkerReader()
        self.validator_resolver = validator_resolver or ValidatorClassNameResolver(
            self.settings
        )
        self.type_resolver = type_resolver or parameter_type_resolver(docstring_parser)

    def is_action_method(self, reflected_method: ReflectedMethod) -> bool:
        return reflected_method.name.endswith(self.settings.action_suffix)

    def has_inject_method_name(self, reflected_method: ReflectedMethod) -> bool:
        """Check the structural inject-setter convention.

        A candidate is public, is not the reserved settings injector and
        starts with the inject prefix.
        """
        if (
            reflected_method.name == self.settings.settings_injector_name
            or reflected_method.visibility is not Visibility.PUBLIC
        ):
            return False
        return reflected_method.name.startswith(self.settings.inject_prefix)

    def build(
        self, reflected_method: ReflectedMethod, class_name: str, is_controller: bool
    ) -> MethodDescriptor:
        """Build the descriptor of one method.

        Args:
            reflected_method: The method as reflected
            class_name: Name of the class the schema is built for
            is_controller: Whether validation markers on actions are honoured

        Raises:
            MalformedMarkerError: If a marker on the method is malformed
            NoSuchValidatorError: If a validator name does not resolve
            InvalidTypeHintError: If a validator targets an untyped parameter
            InvalidValidationConfigurationError: If a validator targets a
                parameter the method does not declare
        """
        characteristics = METHOD_VISIBILITY[reflected_method.visibility]
        if reflected_method.is_static:
            characteristics |= MethodCharacteristics.IS_STATIC
        if reflected_method.is_abstract:
            characteristics |= MethodCharacteristics.IS_ABSTRACT

        descriptor = MethodDescriptor(
            name=reflected_method.name,
            characteristics=characteristics,
            is_action=self.is_action_method(reflected_method),
            is_constructor=reflected_method.is_constructor,
        )

        reader = self.marker_reader
        markers = reader.read_method(reflected_method)
        parameter_markers = {
            parameter.name: reader.read_parameter(parameter, reflected_method)
            for parameter in reflected_method.parameters
        }

        honour_validators = descriptor.is_action and is_controller
        argument_validators: dict[str | None, list[ValidatorSpec]] = {}

        if honour_validators:
            for validate_marker in reader.of_type(markers, ValidateMarker):
                argument_validators.setdefault(validate_marker.param, []).append(
                    build_validator_spec(validate_marker, self.validator_resolver)
                )
            for parameter_name, declared in parameter_markers.items():
                for validate_marker in reader.of_type(declared, ValidateMarker):
                    argument_validators.setdefault(parameter_name, []).append(
                        build_validator_spec(validate_marker, self.validator_resolver)
                    )

        for ignore_marker in reader.of_type(markers, IgnoreValidationMarker):
            if ignore_marker.argument_name is not None:
                descriptor.ignore_validation.append(ignore_marker.argument_name)
        for parameter_name, declared in parameter_markers.items():
            if reader.first(declared, IgnoreValidationMarker) is not None:
                descriptor.ignore_validation.append(parameter_name)

        is_injection_point = descriptor.is_constructor or self.has_inject_method_name(
            reflected_method
        )

        for parameter in reflected_method.parameters:
            parameter_descriptor = self._build_parameter(
                parameter, reflected_method, is_injection_point
            )
            parameter_descriptor.ignore_validation = (
                parameter.name in descriptor.ignore_validation
            )

            if parameter.name in argument_validators:
                if parameter_descriptor.type is None:
                    raise InvalidTypeHintError(
                        f'Missing type information for parameter "{parameter.name}" '
                        f"in {class_name}.{reflected_method.name}(): Either "
                        "annotate the parameter or document its type in the "
                        "docstring."
                    )
                parameter_descriptor.validators = argument_validators.pop(
                    parameter.name
                )

            descriptor.params[parameter.name] = parameter_descriptor

        if argument_validators:
            self._raise_for_unbound_validators(
                argument_validators, class_name, reflected_method.name
            )

        if (
            self.has_inject_method_name(reflected_method)
            and len(descriptor.params) == 1
        ):
            (only_parameter,) = descriptor.params.values()
            descriptor.is_inject_method = only_parameter.dependency is not None

        return descriptor

    def _build_parameter(
        self,
        parameter: ReflectedParameter,
        reflected_method: ReflectedMethod,
        is_injection_point: bool,
    ) -> ParameterDescriptor:
        type_info = self.type_resolver.resolve(
            ParameterContext(parameter=parameter, method=reflected_method)
        )

        descriptor = ParameterDescriptor(
            name=parameter.name,
            position=parameter.position,
            optional=parameter.has_default or parameter.is_variadic,
            allows_null=allows_none(parameter.annotation)
            or (parameter.has_default and parameter.default is None),
            has_default_value=parameter.has_default,
            default_value=parameter.default,
        )

        if type_info is not None:
            descriptor.type = type_info.name
            descriptor.array = type_info.cls in (list, tuple)
            if type_info.is_class:
                descriptor.class_name = qualified_name(type_info.cls)

        descriptor.array = descriptor.array or parameter.is_variadic

        if is_injection_point and descriptor.class_name is not None:
            descriptor.dependency = descriptor.class_name

        return descriptor

    def _raise_for_unbound_validators(
        self,
        argument_validators: dict[str | None, list[ValidatorSpec]],
        class_name: str,
        method_name: str,
    ) -> None:
        problems = []
        validator_names: list[str] = []

        for parameter_name, validators in argument_validators.items():
            names = [validator.name for validator in validators]
            validator_names.extend(names)
            problems.append(
                f'The following validators have been defined for missing param '
                f'"{parameter_name}": {", ".join(names)}'
            )

        raise InvalidValidationConfigurationError(
            f"Invalid validate marker in {class_name}.{method_name}(): "
            + "; ".join(problems),
            validator_names,
        )

