"""
Module-relative address resolution and dependency wiring.

Addresses authored inside a module are relative to that module: a resource
in ``module1`` that depends on ``resource.container.db`` means
``module.module1.resource.container.db``.
"""
from typing import List

from hclconfig.config import Config
from hclconfig.models.fqdn import fqdn_for, join_module, parse_fqdn, parse_module
from hclconfig.models.resource import Resource


class Resolver:
    def __init__(self, config: Config, include_disabled: bool = True) -> None:
        self.config = config
        # whether a dependency on a module also links its disabled resources
        self.include_disabled = include_disabled

    def find_relative_resource(self, address: str, parent_module: str) -> Resource:
        fqdn = parse_fqdn(address).with_parent(parent_module)
        return self.config.find_resource(str(fqdn))

    def find_relative_module_resources(
        self, module_address: str, parent_module: str, include_children: bool = False
    ) -> List[Resource]:
        path = join_module(parent_module, parse_module(module_address))
        return self.config.module_resources(path, include_children)

    def dependency_targets(self, address: str, parent_module: str) -> List[Resource]:
        """
        Resources a single depends_on entry points at. A module address
        expands to every resource nested anywhere below that module.
        """
        fqdn = parse_fqdn(address)
        if fqdn.is_module:
            path = join_module(parent_module, fqdn.module)
            targets = self.config.module_resources(path, include_children=True)
            if not self.include_disabled:
                targets = [t for t in targets if not t.metadata().disabled]
            return targets

        return [self.config.lookup(fqdn.with_parent(parent_module))]

    def resolve_links(self, resource: Resource) -> List[str]:
        """Compute and record the absolute resource_links of ``resource``."""
        meta = resource.metadata()
        links: List[str] = []

        for address in meta.depends_on:
            for target in self.dependency_targets(address, meta.module):
                if target is resource:
                    continue
                link = str(fqdn_for(target.metadata()))
                if link not in links:
                    links.append(link)

        meta.resource_links = links
        return links

    def resolve_all(self) -> None:
        for resource in self.config:
            self.resolve_links(resource)
