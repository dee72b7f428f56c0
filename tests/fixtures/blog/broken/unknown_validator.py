from __future__ import annotations

from typing import Annotated

from classschema.core.markers import Validate
from classschema.domain import AbstractEntity


class Gadget(AbstractEntity):
    serial: Annotated[str, Validate("Serial")] = ""
