"""Type handling helpers shared by the introspector and the metadata builders.

This module turns Python annotations into the type names recorded in class
schemas, decides which types count as collections, and resolves dotted
class names to class objects.
"""

import builtins
import collections.abc
from dataclasses import dataclass
import importlib
import inspect
import types
import typing
from typing import Annotated, Any, ClassVar, ForwardRef, Union, get_args, get_origin

from .config import ReflectionSettings
from .exceptions import UnknownClassError

# Builtin type names that never denote a user class
SIMPLE_TYPES = frozenset(
    {
        "int",
        "float",
        "complex",
        "bool",
        "str",
        "bytes",
        "bytearray",
        "None",
        "NoneType",
        "object",
        "Any",
    }
)

COLLECTION_TYPE_NAMES = frozenset(
    {
        "list",
        "tuple",
        "set",
        "frozenset",
        "dict",
        "classschema.domain.object_storage.ObjectStorage",
    }
)

# Modules whose classes belong to the language runtime, not to managed types
RUNTIME_MODULES = frozenset({"builtins", "abc", "typing", "collections.abc", "_abc"})

EMPTY = inspect.Parameter.empty


@dataclass(frozen=True)
class TypeInfo:
    """A resolved type: its recorded name and, when known, the class behind it."""

    name: str
    cls: type | None = None

    @property
    def is_class(self) -> bool:
        """True when the type is a user class rather than a builtin."""
        return self.cls is not None and not is_builtin_class(self.cls)


def qualified_name(cls: type) -> str:
    """Return the dotted identity of a class (``module.QualName``).

    Builtins are named without their module.
    """
    if cls is type(None):
        return "None"
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


def normalize_class_name(class_name: str) -> str:
    """Normalize ``module:QualName`` notation to ``module.QualName``."""
    return class_name.strip().lstrip(".").replace(":", ".")


def is_builtin_class(cls: type) -> bool:
    return cls.__module__ in RUNTIME_MODULES


def load_class(class_name: str) -> type:
    """Import and return the class named by a dotted (or colon) path.

    Args:
        class_name: ``package.module.Class``, ``package.module:Class`` or a
            nested ``package.module.Outer.Inner``

    Returns:
        The class object

    Raises:
        UnknownClassError: If the name does not resolve to a class
    """
    name = normalize_class_name(class_name)
    parts = name.split(".")

    if len(parts) == 1:
        candidate = getattr(builtins, name, None)
        if isinstance(candidate, type):
            return candidate
        raise UnknownClassError(class_name)

    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        try:
            module = importlib.import_module(module_name)
        except ModuleNotFoundError as e:
            # Only a missing module on our own path means "try a shorter one"
            if e.name and (
                module_name == e.name or module_name.startswith(e.name + ".")
            ):
                continue
            raise UnknownClassError(class_name, e) from e

        target: Any = module
        try:
            for attribute in parts[split:]:
                target = getattr(target, attribute)
        except AttributeError as e:
            raise UnknownClassError(class_name, e) from e

        if not isinstance(target, type):
            raise UnknownClassError(class_name)
        return target

    raise UnknownClassError(class_name)


def class_exists(class_name: str) -> bool:
    """Check whether a dotted class name can be loaded."""
    try:
        load_class(class_name)
    except UnknownClassError:
        return False
    return True


def is_collection_type(type_: type | str | None) -> bool:
    """Check whether a type (or type name) is a collection type.

    Strings and bytes are sequences but are not considered collections.
    """
    if type_ is None:
        return False

    if isinstance(type_, str):
        if type_ in COLLECTION_TYPE_NAMES:
            return True
        try:
            type_ = load_class(type_)
        except UnknownClassError:
            return False

    if not isinstance(type_, type) or issubclass(type_, (str, bytes, bytearray)):
        return False

    if qualified_name(type_) in COLLECTION_TYPE_NAMES:
        return True

    return issubclass(type_, collections.abc.Collection)


def is_simple_type(type_name: str) -> bool:
    """Check whether a type name denotes a builtin scalar type."""
    return type_name in SIMPLE_TYPES


def strip_annotated(annotation: Any) -> tuple[Any, tuple[Any, ...], bool]:
    """Peel ``Annotated`` and ``ClassVar`` wrappers off an annotation.

    Returns:
        Tuple of (bare annotation, Annotated metadata, is ClassVar)
    """
    metadata: list[Any] = []
    is_class_var = False

    while True:
        origin = get_origin(annotation)
        if origin is Annotated:
            metadata.extend(annotation.__metadata__)
            annotation = annotation.__origin__
        elif origin is ClassVar or annotation is ClassVar:
            is_class_var = True
            args = get_args(annotation)
            annotation = args[0] if args else EMPTY
        else:
            return annotation, tuple(metadata), is_class_var


def _is_union(annotation: Any) -> bool:
    return get_origin(annotation) in (Union, types.UnionType)


def _without_none(annotation: Any) -> list[Any]:
    return [arg for arg in get_args(annotation) if arg is not type(None)]


def allows_none(annotation: Any) -> bool:
    """Check whether an annotation admits ``None``."""
    if annotation is EMPTY or annotation is Any or annotation is None:
        return True
    annotation, _, _ = strip_annotated(annotation)
    if annotation is type(None):
        return True
    return _is_union(annotation) and type(None) in get_args(annotation)


def format_annotation(annotation: Any) -> str:
    """Render an annotation as the type name recorded in a schema."""
    if annotation is None or annotation is type(None):
        return "None"
    if annotation is Ellipsis:
        return "..."
    if annotation is Any:
        return "Any"
    if isinstance(annotation, str):
        return clean_type_name(annotation)
    if isinstance(annotation, ForwardRef):
        return clean_type_name(annotation.__forward_arg__)
    if isinstance(annotation, typing.TypeVar):
        return annotation.__name__

    annotation, _, _ = strip_annotated(annotation)

    if _is_union(annotation):
        return " | ".join(format_annotation(arg) for arg in get_args(annotation))

    origin = get_origin(annotation)
    if origin is not None:
        args = get_args(annotation)
        name = format_annotation(origin)
        if not args:
            return name
        return f"{name}[{', '.join(format_annotation(arg) for arg in args)}]"

    if isinstance(annotation, type):
        return qualified_name(annotation)

    return clean_type_name(repr(annotation).replace("typing.", ""))


def clean_type_name(type_name: str) -> str:
    """Strip quoting and leading markers from a written type name."""
    return type_name.strip().strip("'\"`").lstrip("~!.").strip()


def resolve_name(
    type_name: str, namespace: dict[str, Any] | None = None
) -> type | None:
    """Resolve a written class name against a module namespace, then by import.

    Args:
        type_name: Simple (``Comment``) or dotted (``blog.model.Comment``) name
        namespace: Globals of the module the name was written in

    Returns:
        The class, or None if the name does not resolve to a class
    """
    name = clean_type_name(type_name)
    if not name or not name.replace(".", "").replace("_", "").isalnum():
        return None

    head, *rest = name.split(".")
    candidate: Any = None
    if namespace is not None and head in namespace:
        candidate = namespace[head]
    elif not rest:
        candidate = getattr(builtins, head, None)

    if candidate is not None:
        for attribute in rest:
            candidate = getattr(candidate, attribute, None)
        if isinstance(candidate, type):
            return candidate

    if rest:
        try:
            return load_class(name)
        except UnknownClassError:
            return None

    return None


def describe_annotation(
    annotation: Any, namespace: dict[str, Any] | None = None
) -> TypeInfo | None:
    """Describe a single annotation as one TypeInfo.

    ``Optional[X]`` is described as ``X``. Generic aliases keep their full
    written name and carry their origin class.
    """
    if annotation is EMPTY:
        return None

    if annotation is Any:
        return TypeInfo("Any")

    if isinstance(annotation, ForwardRef):
        annotation = annotation.__forward_arg__

    if isinstance(annotation, str):
        cls = resolve_name(annotation, namespace)
        if cls is not None:
            return TypeInfo(qualified_name(cls), cls)
        return TypeInfo(clean_type_name(annotation)) if annotation.strip() else None

    annotation, _, _ = strip_annotated(annotation)

    if _is_union(annotation):
        members = _without_none(annotation)
        if len(members) == 1:
            return describe_annotation(members[0], namespace)
        return TypeInfo(format_annotation(annotation))

    origin = get_origin(annotation)
    if origin is not None:
        return TypeInfo(
            format_annotation(annotation), origin if isinstance(origin, type) else None
        )

    if isinstance(annotation, type):
        return TypeInfo(qualified_name(annotation), annotation)

    return TypeInfo(format_annotation(annotation))


def infer_types(
    annotation: Any, namespace: dict[str, Any] | None = None
) -> list[TypeInfo]:
    """Infer the types of a property annotation.

    Returns:
        An empty list when nothing can be inferred or the annotation is an
        ambiguous union, one type for plain annotations, or two types (outer
        type and element type) for parameterised collections
    """
    if annotation is EMPTY:
        return []

    if isinstance(annotation, (str, ForwardRef)):
        described = describe_annotation(annotation, namespace)
        return [described] if described else []

    annotation, _, _ = strip_annotated(annotation)

    if _is_union(annotation):
        members = _without_none(annotation)
        if len(members) != 1:
            return []
        return infer_types(members[0], namespace)

    origin = get_origin(annotation)
    if origin is not None and isinstance(origin, type):
        outer = TypeInfo(qualified_name(origin), origin)
        args = [arg for arg in get_args(annotation) if arg is not Ellipsis]
        if not args:
            return [outer]
        element = describe_annotation(args[-1], namespace)
        return [outer, element] if element else [outer]

    described = describe_annotation(annotation, namespace)
    return [described] if described else []


def translate_model_name_to_repository_name(
    cls: type, settings: ReflectionSettings
) -> str | None:
    """Derive the repository class name for a domain model class.

    ``blog.domain.model.Post`` becomes ``blog.domain.repository.PostRepository``.

    Returns:
        The repository class name, or None if the module path has no model segment
    """
    module_parts = cls.__module__.split(".")
    if settings.model_module_segment not in module_parts:
        return None

    segment = settings.model_module_segment
    index = len(module_parts) - 1 - module_parts[::-1].index(segment)
    module_parts[index] = settings.repository_module_segment

    return f"{'.'.join(module_parts)}.{cls.__qualname__}{settings.repository_suffix}"
