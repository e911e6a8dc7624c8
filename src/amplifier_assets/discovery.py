"""Bindings - the discovery store representation of asset mappings.

``InMemoryDiscoveryManager`` is a reference implementation of the
``DiscoveryManager`` protocol. Apps backed by a real discovery store
provide their own.
"""

import logging
from collections.abc import Iterable
from enum import Enum
from typing import Any
from uuid import UUID
from uuid import uuid4

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from .exceptions import AssetError
from .expr import Expression
from .expr import Valid

logger = logging.getLogger(__name__)


class BindingState(str, Enum):
    ENABLED = "enabled"
    DISABLED = "disabled"


class BindingDescriptor(BaseModel):
    """
    A binding of resources (selected by ``query``) to a binding type.

    Predicates over bindings use the field names: ``uuid``, ``query``,
    ``type_name``, ``parameter_values``, ``language`` and ``state``.
    """

    model_config = ConfigDict(frozen=True)

    query: str = Field(min_length=1)
    type_name: str = Field(min_length=1)
    parameter_values: dict[str, Any] = Field(default_factory=dict)
    language: str = "glob"
    uuid: UUID = Field(default_factory=uuid4)
    state: BindingState = BindingState.ENABLED

    def get_parameter_value(self, name: str, default: Any = None) -> Any:
        return self.parameter_values.get(name, default)


class DuplicateBindingError(AssetError):
    """A binding with the same UUID exists already."""


class InMemoryDiscoveryManager:
    """
    Discovery store kept in memory.

    Root bindings can be added and removed, inherited bindings are passed in
    on construction and only take part in queries.
    """

    def __init__(self, inherited: Iterable[BindingDescriptor] = ()):
        self._root: dict[UUID, BindingDescriptor] = {}
        self._inherited: dict[UUID, BindingDescriptor] = {binding.uuid: binding for binding in inherited}

    def add_root_binding(self, binding: BindingDescriptor, override: bool = False) -> None:
        """
        Add a binding to the root scope.

        Raises:
            DuplicateBindingError: If the UUID is taken and ``override`` is not set
        """
        if not override and (binding.uuid in self._root or binding.uuid in self._inherited):
            raise DuplicateBindingError(
                f'A binding with the UUID "{binding.uuid}" exists already.',
                context={"uuid": str(binding.uuid)},
            )

        self._root[binding.uuid] = binding
        logger.debug(f"Added binding {binding.uuid} for {binding.query}")

    def remove_root_bindings(self, expr: Expression) -> None:
        removed = [uuid for uuid, binding in self._root.items() if expr.evaluate(binding)]
        for uuid in removed:
            del self._root[uuid]
        logger.debug(f"Removed {len(removed)} bindings")

    def find_root_bindings(self, expr: Expression) -> list[BindingDescriptor]:
        return [binding for binding in self._root.values() if expr.evaluate(binding)]

    def find_bindings(self, expr: Expression) -> list[BindingDescriptor]:
        return [binding for binding in self._all() if expr.evaluate(binding)]

    def has_root_bindings(self, expr: Expression | None = None) -> bool:
        return any((expr or Valid()).evaluate(binding) for binding in self._root.values())

    def has_bindings(self, expr: Expression | None = None) -> bool:
        return any((expr or Valid()).evaluate(binding) for binding in self._all())

    def _all(self) -> list[BindingDescriptor]:
        bindings = dict(self._inherited)
        bindings.update(self._root)
        return list(bindings.values())
