"""Declarative markers and the reader that decodes them.

Markers are attached to properties and parameters through
``typing.Annotated`` metadata and to methods by using them as decorators::

    class Post(AbstractEntity):
        title: Annotated[str, Validate("StringLength", options={"maximum": 80})]
        comments: Annotated[ObjectStorage[Comment], Lazy(), Cascade("remove")]

    class PostController(ControllerInterface):
        @Validate("NotEmpty", param="title")
        @IgnoreValidation("post")
        def update_action(self, post: Post, title: str) -> None: ...

Declaring a marker only records its raw arguments. The ``MarkerReader``
decodes them against the pydantic argument model registered for the
marker kind, so a malformed marker surfaces when a schema is built.
"""

from collections.abc import Iterable
from typing import Any, ClassVar, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .exceptions import MalformedMarkerError
from .introspection import (
    MARKERS_ATTRIBUTE,
    ReflectedMethod,
    ReflectedParameter,
    ReflectedProperty,
)

M = TypeVar("M", bound="Marker")


class MarkerDeclaration:
    """Raw marker as written in a class body.

    Instances can be placed in ``Annotated`` metadata or applied as method
    decorators; decorating appends the declaration to the function.
    """

    kind: ClassVar[str] = ""

    def __init__(self, *args: Any, **kwargs: Any):
        self.args = args
        self.kwargs = kwargs

    def __call__(self, target: Any) -> Any:
        function = getattr(target, "__func__", target)
        declared = list(getattr(function, MARKERS_ATTRIBUTE, ()))
        # Decorators apply bottom-up; keep the order they are written in
        declared.insert(0, self)
        setattr(function, MARKERS_ATTRIBUTE, tuple(declared))
        return target

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MarkerDeclaration):
            return NotImplemented
        return (self.kind, self.args, self.kwargs) == (
            other.kind,
            other.args,
            other.kwargs,
        )

    def __hash__(self) -> int:
        return hash((self.kind, len(self.args), tuple(sorted(self.kwargs))))

    def __repr__(self) -> str:
        arguments = [repr(arg) for arg in self.args]
        arguments.extend(f"{key}={value!r}" for key, value in self.kwargs.items())
        return f"{type(self).__name__}({', '.join(arguments)})"


class Validate(MarkerDeclaration):
    """Attach a validator to a property, or to an action argument."""

    kind = "validate"


class IgnoreValidation(MarkerDeclaration):
    """Skip validation of an action argument."""

    kind = "ignore_validation"


class Inject(MarkerDeclaration):
    """Mark a property as a dependency injection target."""

    kind = "inject"


class Lazy(MarkerDeclaration):
    """Load a related property on first access."""

    kind = "lazy"


class Transient(MarkerDeclaration):
    """Exclude a property from persistence."""

    kind = "transient"


class Cascade(MarkerDeclaration):
    """Cascade deletion of the owning object to a related property."""

    kind = "cascade"


class Marker(BaseModel):
    """Decoded marker arguments."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: ClassVar[str] = ""
    # Field names that positional declaration arguments map to, in order
    positional: ClassVar[tuple[str, ...]] = ()


class ValidateMarker(Marker):
    kind = "validate"
    positional = ("validator", "options", "param")

    validator: str = Field(min_length=1, description="Validator name")
    options: dict[str, Any] = Field(default_factory=dict)
    param: str | None = Field(
        default=None, description="Argument the validator applies to"
    )

    @field_validator("options", mode="before")
    @classmethod
    def default_options(cls, value: Any) -> Any:
        return {} if value is None else value


class IgnoreValidationMarker(Marker):
    kind = "ignore_validation"
    positional = ("argument_name",)

    argument_name: str | None = None


class InjectMarker(Marker):
    kind = "inject"


class LazyMarker(Marker):
    kind = "lazy"


class TransientMarker(Marker):
    kind = "transient"


class CascadeMarker(Marker):
    kind = "cascade"
    positional = ("value",)

    value: Literal["remove"]


MARKER_TYPES: dict[str, type[Marker]] = {
    marker.kind: marker
    for marker in (
        ValidateMarker,
        IgnoreValidationMarker,
        InjectMarker,
        LazyMarker,
        TransientMarker,
        CascadeMarker,
    )
}


class MarkerReader:
    """Decodes the markers attached to properties, methods and parameters."""

    def __init__(self, marker_types: dict[str, type[Marker]] | None = None):
        self.marker_types = dict(marker_types or MARKER_TYPES)

    def decode(self, declaration: MarkerDeclaration, location: str = "") -> Marker:
        """Decode one declaration into its marker model.

        Args:
            declaration: Raw marker declaration
            location: Member the marker is attached to, for error messages

        Raises:
            MalformedMarkerError: If the arguments do not fit the marker
        """
        where = f" on {location}" if location else ""
        marker_type = self.marker_types.get(declaration.kind)
        if marker_type is None:
            raise MalformedMarkerError(
                f'Unknown marker "{type(declaration).__name__}"{where}'
            )

        if len(declaration.args) > len(marker_type.positional):
            raise MalformedMarkerError(
                f"Marker {declaration!r}{where} accepts at most "
                f"{len(marker_type.positional)} positional argument(s)"
            )

        data = dict(zip(marker_type.positional, declaration.args, strict=False))
        duplicated = set(data).intersection(declaration.kwargs)
        if duplicated:
            raise MalformedMarkerError(
                f"Marker {declaration!r}{where} got multiple values for "
                f"{', '.join(sorted(duplicated))}"
            )
        data.update(declaration.kwargs)

        try:
            return marker_type.model_validate(data)
        except PydanticValidationError as e:
            raise MalformedMarkerError(
                f"Marker {declaration!r}{where} is malformed: "
                f"{e.error_count()} invalid argument(s)",
                cause=e,
            ) from e

    def read(self, metadata: Iterable[Any], location: str = "") -> list[Marker]:
        """Decode every marker declaration found in a metadata sequence.

        Metadata that is not a marker declaration is left alone.
        """
        return [
            self.decode(item, location)
            for item in metadata
            if isinstance(item, MarkerDeclaration)
        ]

    def read_property(self, reflected_property: ReflectedProperty) -> list[Marker]:
        return self.read(
            reflected_property.metadata,
            f"{reflected_property.declaring_class}.{reflected_property.name}",
        )

    def read_method(self, reflected_method: ReflectedMethod) -> list[Marker]:
        return self.read(
            reflected_method.markers,
            f"{reflected_method.declaring_class}.{reflected_method.name}()",
        )

    def read_parameter(
        self, reflected_parameter: ReflectedParameter, method: ReflectedMethod
    ) -> list[Marker]:
        return self.read(
            reflected_parameter.metadata,
            f"parameter {reflected_parameter.name!r} of "
            f"{method.declaring_class}.{method.name}()",
        )

    @staticmethod
    def of_type(markers: Iterable[Marker], marker_type: type[M]) -> list[M]:
        """All markers of one type, in declaration order."""
        return [marker for marker in markers if isinstance(marker, marker_type)]

    @staticmethod
    def first(markers: Iterable[Marker], marker_type: type[M]) -> M | None:
        """The first marker of one type, or None."""
        for marker in markers:
            if isinstance(marker, marker_type):
                return marker
        return None
