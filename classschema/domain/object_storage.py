"""Ordered storage of domain objects, used for to-many properties."""

from collections.abc import Iterable, Iterator, MutableSet
from typing import Generic, TypeVar

T = TypeVar("T")


class ObjectStorage(MutableSet, Generic[T]):
    """Insertion-ordered set of objects keyed by object identity.

    Annotate to-many properties as ``ObjectStorage[Comment]`` so the class
    schema records ``Comment`` as the element type.
    """

    def __init__(self, objects: Iterable[T] = ()):
        self._storage: dict[int, T] = {}
        for obj in objects:
            self.add(obj)

    def __contains__(self, obj: object) -> bool:
        return id(obj) in self._storage

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._storage.values()))

    def __len__(self) -> int:
        return len(self._storage)

    def add(self, obj: T) -> None:
        self._storage[id(obj)] = obj

    def discard(self, obj: T) -> None:
        self._storage.pop(id(obj), None)

    def attach(self, obj: T) -> None:
        self.add(obj)

    def detach(self, obj: T) -> None:
        self.discard(obj)

    def to_list(self) -> list[T]:
        return list(self._storage.values())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_list()!r})"
