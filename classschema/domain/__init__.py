"""Managed object model base types.

Classes deriving from these bases are what the class schema classifies:
entities, value objects, singletons and controllers.
"""

from .interfaces import ControllerInterface, SingletonInterface
from .model import AbstractEntity, AbstractValueObject, DomainObject
from .object_storage import ObjectStorage

__all__ = [
    "AbstractEntity",
    "AbstractValueObject",
    "ControllerInterface",
    "DomainObject",
    "ObjectStorage",
    "SingletonInterface",
]
