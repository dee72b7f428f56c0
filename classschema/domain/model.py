"""Base classes for domain objects."""

from typing import Any


class DomainObject:
    """Common base of entities and value objects."""

    uid: int | None = None
    pid: int | None = None

    def get_uid(self) -> int | None:
        return self.uid

    def get_pid(self) -> int | None:
        return self.pid


class AbstractEntity(DomainObject):
    """Domain object with identity: two entities are equal when their uid is."""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AbstractEntity) or type(other) is not type(self):
            return NotImplemented
        if self.uid is None or other.uid is None:
            return self is other
        return self.uid == other.uid

    def __hash__(self) -> int:
        return hash((type(self), self.uid)) if self.uid is not None else id(self)


class AbstractValueObject(DomainObject):
    """Domain object without identity: equality is defined by its values."""

    def get_value(self) -> dict[str, Any]:
        return {
            name: value
            for name, value in vars(self).items()
            if name not in {"uid", "pid"}
        }

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.get_value() == other.get_value()  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), tuple(sorted(map(repr, self.get_value().items())))))
