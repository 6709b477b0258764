"""
Resource store: an ordered collection of resources with unique addresses.
"""
import threading
from dataclasses import replace
from typing import Iterator, List, Optional

from hclconfig.errors import DuplicateResourceError, ResourceNotFoundError
from hclconfig.models.fqdn import FQDN, fqdn_for, parse_fqdn, parse_module
from hclconfig.models.resource import Resource


def in_module(module: str, path: str, include_children: bool) -> bool:
    if module == path:
        return True
    if not include_children:
        return False
    # top level contains everything
    return not path or module.startswith(path + ".")


class Config:
    def __init__(self) -> None:
        self.resources: List[Resource] = []
        self._lock = threading.RLock()

    def add(self, resource: Resource, module: Optional[str] = None) -> None:
        """
        Add a resource; ``module`` stamps the enclosing module path first.
        Raises DuplicateResourceError when the address is already taken.
        """
        meta = resource.metadata()
        # the resource keeps its old module path when the add fails
        candidate = replace(meta, module=module) if module is not None else meta
        fqdn = fqdn_for(candidate)

        with self._lock:
            for r in self.resources:
                if fqdn_for(r.metadata()).key == fqdn.key:
                    raise DuplicateResourceError(str(fqdn))

            meta.module = candidate.module
            self.resources.append(resource)

    def remove(self, resource: Resource) -> None:
        fqdn = fqdn_for(resource.metadata())
        with self._lock:
            for i, r in enumerate(self.resources):
                if fqdn_for(r.metadata()).key == fqdn.key:
                    del self.resources[i]
                    return

        raise ResourceNotFoundError(str(fqdn))

    def count(self) -> int:
        return len(self.resources)

    def __len__(self) -> int:
        return self.count()

    def __iter__(self) -> Iterator[Resource]:
        with self._lock:
            return iter(list(self.resources))

    def lookup(self, fqdn: FQDN) -> Resource:
        """Exact match on type, name and module of an already parsed address."""
        with self._lock:
            for r in self.resources:
                meta = r.metadata()
                if (
                    meta.type == fqdn.type
                    and meta.name == fqdn.resource
                    and meta.module == fqdn.module
                ):
                    return r

        raise ResourceNotFoundError(str(fqdn.without_attribute()))

    def find_resource(self, address: str) -> Resource:
        fqdn = parse_fqdn(address)
        if fqdn.is_module:
            raise ResourceNotFoundError(address)
        return self.lookup(fqdn)

    def find_resources_by_type(self, type_name: str) -> List[Resource]:
        with self._lock:
            return [r for r in self.resources if r.metadata().type == type_name]

    def module_resources(self, path: str, include_children: bool) -> List[Resource]:
        with self._lock:
            return [
                r for r in self.resources
                if in_module(r.metadata().module, path, include_children)
            ]

    def find_module_resources(self, module_address: str, include_children: bool = False) -> List[Resource]:
        return self.module_resources(parse_module(module_address), include_children)
