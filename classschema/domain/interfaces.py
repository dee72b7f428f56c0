"""Marker interfaces recognised by the class schema."""

from abc import ABC


class SingletonInterface(ABC):  # noqa: B024
    """Classes implementing this interface are shared as single instances."""


class ControllerInterface(ABC):  # noqa: B024
    """Classes implementing this interface handle requests through actions.

    Validation markers on action methods are only honoured for controllers.
    """
