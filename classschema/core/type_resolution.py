"""Ordered type resolution strategies.

Each resolver looks at one metadata source and returns a result or None.
A ``ResolverChain`` asks its resolvers in priority order and keeps the
first non-empty answer, so later (more expensive) sources are only
consulted when earlier ones have nothing to say.

Property chain: evaluated annotation, then written (unevaluated) names.
Parameter chain: evaluated annotation, then written class names, then the
method docstring.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

from .docstring import DocstringParser
from .introspection import ReflectedMethod, ReflectedParameter, ReflectedProperty
from .type_handling import (
    EMPTY,
    TypeInfo,
    clean_type_name,
    describe_annotation,
    infer_types,
    qualified_name,
    resolve_name,
)

S = TypeVar("S", contravariant=True)
R = TypeVar("R", covariant=True)
SubjectT = TypeVar("SubjectT")
ResultT = TypeVar("ResultT")


class TypeResolver(Protocol[S, R]):
    """A single source of type information."""

    def resolve(self, subject: S) -> R | None: ...


class ResolverChain(Generic[SubjectT, ResultT]):
    """Asks resolvers in order and returns the first non-empty result."""

    def __init__(self, resolvers: Sequence[TypeResolver[SubjectT, ResultT]]):
        self.resolvers = tuple(resolvers)

    def resolve(self, subject: SubjectT) -> ResultT | None:
        for resolver in self.resolvers:
            result = resolver.resolve(subject)
            if result:
                return result
        return None


@dataclass(frozen=True)
class ParameterContext:
    """A parameter together with the method declaring it."""

    parameter: ReflectedParameter
    method: ReflectedMethod


# Property resolvers


class PropertyAnnotationResolver:
    """Infers property types from an evaluated annotation."""

    def resolve(self, subject: ReflectedProperty) -> list[TypeInfo] | None:
        if subject.annotation is EMPTY or isinstance(subject.annotation, str):
            return None
        return infer_types(subject.annotation, subject.namespace) or None


class PropertyWrittenNameResolver:
    """Uses an annotation that could not be evaluated as written.

    Dotted names are imported; anything else is kept as a plain type name
    without a class.
    """

    def resolve(self, subject: ReflectedProperty) -> list[TypeInfo] | None:
        if not isinstance(subject.annotation, str) or not subject.annotation.strip():
            return None
        return infer_types(subject.annotation, subject.namespace) or None


# Parameter resolvers


class ParameterAnnotationResolver:
    """Describes a parameter from its evaluated annotation."""

    def resolve(self, subject: ParameterContext) -> TypeInfo | None:
        annotation = subject.parameter.annotation
        if annotation is EMPTY or isinstance(annotation, str):
            return None
        return describe_annotation(annotation, subject.parameter.namespace)


class ParameterClassHintResolver:
    """Resolves a written (unevaluated) annotation, preferring a class."""

    def resolve(self, subject: ParameterContext) -> TypeInfo | None:
        annotation = subject.parameter.annotation
        if not isinstance(annotation, str) or not annotation.strip():
            return None
        cls = resolve_name(annotation, subject.parameter.namespace)
        if cls is not None:
            return TypeInfo(qualified_name(cls), cls)
        return TypeInfo(clean_type_name(annotation))


class ParameterDocstringResolver:
    """Reads the parameter type from the method docstring.

    A documented name that resolves in the declaring module becomes a class.
    """

    def __init__(self, parser: DocstringParser | None = None):
        self.parser = parser or DocstringParser()

    def resolve(self, subject: ParameterContext) -> TypeInfo | None:
        if not subject.method.docstring:
            return None
        docstring = self.parser.parse(subject.method.docstring)
        entry = docstring.get_param(
            subject.parameter.name,
            subject.parameter.position,
            (parameter.name for parameter in subject.method.parameters),
        )
        if entry is None or not entry.type_name:
            return None
        cls = resolve_name(entry.type_name, subject.parameter.namespace)
        if cls is not None:
            return TypeInfo(qualified_name(cls), cls)
        return TypeInfo(entry.type_name)


def property_type_resolver() -> ResolverChain[ReflectedProperty, list[TypeInfo]]:
    return ResolverChain([PropertyAnnotationResolver(), PropertyWrittenNameResolver()])


def parameter_type_resolver(
    parser: DocstringParser | None = None,
) -> ResolverChain[ParameterContext, TypeInfo]:
    return ResolverChain(
        [
            ParameterAnnotationResolver(),
            ParameterClassHintResolver(),
            ParameterDocstringResolver(parser),
        ]
    )
