"""Raw metadata descriptors produced by the property and method builders.

Descriptors are assembled while a class schema is built and are never
handed out; the schema materializes immutable ``Property`` and ``Method``
objects from them on first access.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Flag, auto
from types import MappingProxyType
from typing import Any


class ClassFlag(Flag):
    """Classification of a class, fixed when its schema is built."""

    NONE = 0
    ENTITY = auto()
    VALUE_OBJECT = auto()
    AGGREGATE_ROOT = auto()
    CONTROLLER = auto()
    SINGLETON = auto()
    HAS_CONSTRUCTOR = auto()
    HAS_INJECT_METHODS = auto()
    HAS_INJECT_PROPERTIES = auto()


class PropertyCharacteristics(Flag):
    """Visibility and marker-derived traits of a property."""

    NONE = 0
    VISIBILITY_PRIVATE = auto()
    VISIBILITY_PROTECTED = auto()
    VISIBILITY_PUBLIC = auto()
    IS_STATIC = auto()
    ANNOTATED_LAZY = auto()
    ANNOTATED_TRANSIENT = auto()
    ANNOTATED_INJECT = auto()


class MethodCharacteristics(Flag):
    """Visibility and declaration traits of a method."""

    NONE = 0
    VISIBILITY_PRIVATE = auto()
    VISIBILITY_PROTECTED = auto()
    VISIBILITY_PUBLIC = auto()
    IS_STATIC = auto()
    IS_ABSTRACT = auto()


@dataclass(frozen=True)
class ValidatorSpec:
    """One validator attached to a property or parameter."""

    name: str
    options: Mapping[str, Any]
    class_name: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "options": dict(self.options),
            "class_name": self.class_name,
        }


@dataclass
class PropertyDescriptor:
    """Raw metadata of one property."""

    name: str
    type: str | None = None
    element_type: str | None = None
    default_value: Any = None
    has_default_value: bool = False
    cascade: str | None = None
    validators: list[ValidatorSpec] = field(default_factory=list)
    characteristics: PropertyCharacteristics = PropertyCharacteristics.NONE


@dataclass
class ParameterDescriptor:
    """Raw metadata of one method parameter."""

    name: str
    position: int
    # Python has no pass-by-reference; kept for consumers reading the flag
    by_reference: bool = False
    array: bool = False
    optional: bool = False
    allows_null: bool = True
    type: str | None = None
    class_name: str | None = None
    has_default_value: bool = False
    default_value: Any = None
    dependency: str | None = None
    ignore_validation: bool = False
    validators: list[ValidatorSpec] = field(default_factory=list)


@dataclass
class MethodDescriptor:
    """Raw metadata of one method."""

    name: str
    characteristics: MethodCharacteristics = MethodCharacteristics.NONE
    is_action: bool = False
    is_constructor: bool = False
    is_inject_method: bool = False
    params: dict[str, ParameterDescriptor] = field(default_factory=dict)
    ignore_validation: list[str] = field(default_factory=list)
