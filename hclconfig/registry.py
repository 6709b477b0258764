"""
Resource type registry: maps a type name to the factory that builds it.
"""
from typing import Callable, Dict, List

from hclconfig.errors import UnknownTypeError
from hclconfig.models.resource import TYPE_OUTPUT, Generic, Output, Resource, ResourceMetadata, Status

# A factory receives freshly initialised metadata and returns the typed resource.
# Dataclasses whose first field is the metadata qualify as-is.
Factory = Callable[[ResourceMetadata], Resource]


class TypeRegistry:
    def __init__(self) -> None:
        self._factories: Dict[str, Factory] = {}

    def register(self, type_name: str, factory: Factory) -> None:
        if not type_name:
            raise ValueError("type name must not be empty")
        self._factories[type_name] = factory

    def create(self, type_name: str, name: str) -> Resource:
        factory = self._factories.get(type_name)
        if factory is None:
            raise UnknownTypeError(type_name)

        meta = ResourceMetadata(name=name, type=type_name, status=Status.PENDING_CREATION)
        return factory(meta)

    def types(self) -> List[str]:
        return sorted(self._factories)

    def __contains__(self, type_name: str) -> bool:
        return type_name in self._factories


def default_types() -> TypeRegistry:
    """New registry holding the built-in types."""
    registry = TypeRegistry()
    registry.register(TYPE_OUTPUT, Output)
    return registry


def register_generic(registry: TypeRegistry, type_names: List[str]) -> None:
    """Register schema-less types, skipping names that already have a factory."""
    for type_name in type_names:
        if type_name not in registry:
            registry.register(type_name, Generic)
