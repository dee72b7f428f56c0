"""Native reflection over Python classes.

The introspector enumerates a class's ancestry, declared properties (class
annotations across the MRO) and declared methods with their parameters. It
evaluates annotations where possible and hands over the raw metadata the
marker reader and the metadata builders work on. Results are not cached
here; callers cache.
"""

from dataclasses import dataclass, field
from enum import Enum
import inspect
import sys
from typing import Any

from .config import ReflectionSettings, settings as default_settings
from .exceptions import UnknownClassError
from .type_handling import (
    EMPTY,
    RUNTIME_MODULES,
    load_class,
    normalize_class_name,
    qualified_name,
    strip_annotated,
)

# Attribute on functions holding markers attached by decorator use
MARKERS_ATTRIBUTE = "__class_schema_markers__"

# Compiler-generated class members that are never methods
ANNOTATION_FUNCTIONS = frozenset({"__annotate__", "__annotate_func__"})


class Visibility(str, Enum):
    """Member visibility derived from Python naming conventions."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


@dataclass(frozen=True)
class ReflectedParameter:
    """A method parameter as declared (receiver excluded)."""

    name: str
    position: int
    kind: inspect._ParameterKind
    annotation: Any
    metadata: tuple[Any, ...] = ()
    has_default: bool = False
    default: Any = None
    namespace: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_variadic(self) -> bool:
        return self.kind in (
            inspect.Parameter.VAR_POSITIONAL,
            inspect.Parameter.VAR_KEYWORD,
        )


@dataclass(frozen=True)
class ReflectedMethod:
    """A method visible on the class, own or inherited."""

    name: str
    declaring_class: str
    visibility: Visibility
    is_static: bool
    is_abstract: bool
    is_constructor: bool
    parameters: tuple[ReflectedParameter, ...]
    markers: tuple[Any, ...] = ()
    docstring: str | None = None


@dataclass(frozen=True)
class ReflectedProperty:
    """An annotated class attribute, own or inherited."""

    name: str
    declaring_class: str
    visibility: Visibility
    is_static: bool
    annotation: Any
    metadata: tuple[Any, ...] = ()
    has_default: bool = False
    default: Any = None
    namespace: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True)
class ReflectedClass:
    """Raw reflection data of one class."""

    name: str
    cls: type
    properties: tuple[ReflectedProperty, ...]
    methods: tuple[ReflectedMethod, ...]

    @property
    def ancestors(self) -> tuple[type, ...]:
        """Superclasses in method resolution order, the class itself excluded."""
        return self.cls.__mro__[1:]

    def is_subclass_of(self, base: type) -> bool:
        return self.cls is not base and issubclass(self.cls, base)

    def implements(self, interface: type) -> bool:
        return issubclass(self.cls, interface)


def visibility_of(name: str, owner: type) -> Visibility:
    """Derive visibility from a member name.

    Dunder names are public, ``__name`` and its mangled ``_Owner__name`` form
    are private, other ``_name`` members are protected.
    """
    if name.startswith("__") and name.endswith("__"):
        return Visibility.PUBLIC
    if name.startswith("__"):
        return Visibility.PRIVATE
    for klass in owner.__mro__:
        if name.startswith(f"_{klass.__name__.lstrip('_')}__"):
            return Visibility.PRIVATE
    if name.startswith("_"):
        return Visibility.PROTECTED
    return Visibility.PUBLIC


def evaluate_annotation(
    annotation: Any, globalns: dict[str, Any], localns: dict[str, Any] | None = None
) -> Any:
    """Evaluate a string annotation, keeping the string when it does not resolve."""
    if not isinstance(annotation, str):
        return annotation
    # One annotation at a time, so an unresolved name only keeps its own string.
    try:
        return eval(annotation, globalns, localns)  # noqa: S307
    except (NameError, AttributeError, SyntaxError, TypeError):
        return annotation


def is_class_var_name(annotation: str) -> bool:
    """Whether an unevaluated annotation is written as a ClassVar."""
    name = annotation.strip().strip("'\"").split("[", 1)[0]
    return name.rsplit(".", 1)[-1].strip() == "ClassVar"


class ClassIntrospector:
    """Reads the static declaration of a class."""

    def __init__(self, settings: ReflectionSettings | None = None):
        self.settings = settings or default_settings

    def load(self, class_or_name: type | str) -> type:
        """Resolve a class name (or pass a class through).

        Raises:
            UnknownClassError: If the name does not resolve to a class
        """
        if isinstance(class_or_name, type):
            return class_or_name
        if not isinstance(class_or_name, str) or not class_or_name.strip():
            raise UnknownClassError(str(class_or_name))
        return load_class(normalize_class_name(class_or_name))

    def reflect(self, class_or_name: type | str) -> ReflectedClass:
        """Reflect a class.

        Args:
            class_or_name: The class or its dotted name

        Returns:
            ReflectedClass with properties and methods

        Raises:
            UnknownClassError: If the class cannot be loaded
        """
        cls = self.load(class_or_name)
        return ReflectedClass(
            name=qualified_name(cls),
            cls=cls,
            properties=tuple(self._reflect_properties(cls)),
            methods=tuple(self._reflect_methods(cls)),
        )

    def _declaring_classes(self, cls: type) -> list[type]:
        """Classes of the MRO whose members count as declared members."""
        return [
            klass
            for klass in cls.__mro__
            if klass is not object and klass.__module__ not in RUNTIME_MODULES
        ]

    def _reflect_properties(self, cls: type) -> list[ReflectedProperty]:
        properties: dict[str, ReflectedProperty] = {}

        for klass in self._declaring_classes(cls):
            globalns = getattr(sys.modules.get(klass.__module__), "__dict__", {})
            localns = dict(vars(klass))

            for name, raw_annotation in inspect.get_annotations(klass).items():
                if name in properties:
                    continue

                annotation = evaluate_annotation(raw_annotation, globalns, localns)
                annotation, metadata, is_static = strip_annotated(annotation)
                if isinstance(annotation, str) and is_class_var_name(annotation):
                    is_static = True

                has_default, default = self._default_value(cls, name)

                properties[name] = ReflectedProperty(
                    name=name,
                    declaring_class=qualified_name(klass),
                    visibility=visibility_of(name, cls),
                    is_static=is_static,
                    annotation=annotation,
                    metadata=metadata,
                    has_default=has_default,
                    default=default,
                    namespace=globalns,
                )

        return list(properties.values())

    def _default_value(self, cls: type, name: str) -> tuple[bool, Any]:
        for klass in cls.__mro__:
            if name in vars(klass):
                return True, vars(klass)[name]
        return False, None

    def _reflect_methods(self, cls: type) -> list[ReflectedMethod]:
        methods: dict[str, ReflectedMethod] = {}

        for klass in self._declaring_classes(cls):
            for name, raw in vars(klass).items():
                if name in methods or name in ANNOTATION_FUNCTIONS:
                    continue

                is_static = isinstance(raw, (staticmethod, classmethod))
                function = raw.__func__ if is_static else raw
                if not inspect.isfunction(function):
                    continue

                methods[name] = ReflectedMethod(
                    name=name,
                    declaring_class=qualified_name(klass),
                    visibility=visibility_of(name, cls),
                    is_static=is_static,
                    is_abstract=bool(getattr(function, "__isabstractmethod__", False)),
                    is_constructor=name == self.settings.constructor_name,
                    parameters=tuple(
                        self._reflect_parameters(
                            function,
                            klass,
                            has_receiver=not isinstance(raw, staticmethod),
                        )
                    ),
                    markers=tuple(getattr(function, MARKERS_ATTRIBUTE, ())),
                    docstring=function.__doc__,
                )

        return list(methods.values())

    def _reflect_parameters(
        self, function: Any, klass: type, has_receiver: bool
    ) -> list[ReflectedParameter]:
        signature = inspect.signature(function, follow_wrapped=True)
        parameters = list(signature.parameters.values())

        if has_receiver and parameters and parameters[0].kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            parameters = parameters[1:]

        globalns = getattr(function, "__globals__", {})
        localns = dict(vars(klass))
        reflected = []

        for position, parameter in enumerate(parameters):
            annotation = evaluate_annotation(parameter.annotation, globalns, localns)
            annotation, metadata, _ = strip_annotated(annotation)
            has_default = parameter.default is not EMPTY

            reflected.append(
                ReflectedParameter(
                    name=parameter.name,
                    position=position,
                    kind=parameter.kind,
                    annotation=annotation,
                    metadata=metadata,
                    has_default=has_default,
                    default=parameter.default if has_default else None,
                    namespace=globalns,
                )
            )

        return reflected
