r"""
Fully qualified resource addresses.

    module.module1.module2.resource.container.test_dev.networks.0.name
    \_____________________/ \______________________/ \_______________/
           module                type + name             attribute

Either half may be missing but not both. Outputs use ``output.<name>`` in
place of ``resource.<type>.<name>`` and default their attribute to ``value``.
"""
import re
from dataclasses import dataclass, replace
from typing import List, Tuple

from hclconfig.errors import MalformedAddressError
from hclconfig.models.resource import TYPE_OUTPUT, ResourceMetadata

_MODULE_TOKEN = "module"
_RESOURCE_TOKEN = "resource"
_OUTPUT_TOKEN = "output"

OUTPUT_ATTRIBUTE = "value"

_IDENT_RE = re.compile(r"^[A-Za-z0-9_\-]+$")


@dataclass(frozen=True)
class FQDN:
    module: str = ""
    type: str = ""
    resource: str = ""
    attribute: str = ""

    @property
    def is_module(self) -> bool:
        return not self.type and not self.resource

    @property
    def key(self) -> Tuple[str, str, str]:
        """Identity of the addressed resource, attribute excluded."""
        return (self.type, self.resource, self.module)

    def with_parent(self, parent_module: str) -> "FQDN":
        return replace(self, module=join_module(parent_module, self.module))

    def without_attribute(self) -> "FQDN":
        return replace(self, attribute="")

    def __str__(self) -> str:
        parts: List[str] = []
        if self.module:
            parts.extend([_MODULE_TOKEN, self.module])

        if self.type == TYPE_OUTPUT:
            parts.extend([_OUTPUT_TOKEN, self.resource])
            if self.attribute and self.attribute != OUTPUT_ATTRIBUTE:
                parts.append(self.attribute)
        elif self.type:
            parts.extend([_RESOURCE_TOKEN, self.type, self.resource])
            if self.attribute:
                parts.append(self.attribute)

        return ".".join(parts)


def join_module(parent_module: str, module: str) -> str:
    """Nest ``module`` under ``parent_module``; either may be empty."""
    if not module:
        return parent_module
    if not parent_module:
        return module
    return f"{parent_module}.{module}"


def _check_ident(address: str, value: str, what: str) -> None:
    if not _IDENT_RE.match(value):
        raise MalformedAddressError(address, f"invalid {what} '{value}'")


def check_module_name(address: str, name: str) -> None:
    """Module names must be identifiers other than the address keywords."""
    _check_ident(address, name, "module name")
    if name in (_RESOURCE_TOKEN, _OUTPUT_TOKEN):
        raise MalformedAddressError(address, f"'{name}' is reserved and cannot name a module")


def _parse_reference(address: str, tokens: List[str]) -> Tuple[str, str, str]:
    """Return (type, name, attribute) for a resource or output reference."""
    kind = tokens[0]

    if kind == _OUTPUT_TOKEN:
        if len(tokens) < 2:
            raise MalformedAddressError(address, "output reference is missing its name")
        _check_ident(address, tokens[1], "output name")
        attribute = ".".join(tokens[2:]) or OUTPUT_ATTRIBUTE
        return TYPE_OUTPUT, tokens[1], attribute

    # resource.<type>.<name>[.<attribute>]
    if len(tokens) < 3:
        raise MalformedAddressError(
            address, "resource reference must be 'resource.<type>.<name>'"
        )
    _check_ident(address, tokens[1], "resource type")
    _check_ident(address, tokens[2], "resource name")
    if tokens[1] == TYPE_OUTPUT:
        raise MalformedAddressError(address, "outputs are addressed as 'output.<name>'")
    return tokens[1], tokens[2], ".".join(tokens[3:])


def parse_fqdn(address: str) -> FQDN:
    if not address:
        raise MalformedAddressError(address, "address is empty")

    tokens = address.split(".")
    if any(t == "" for t in tokens):
        raise MalformedAddressError(address, "address contains an empty segment")

    module = ""
    rest = tokens
    if tokens[0] == _MODULE_TOKEN:
        end = len(tokens)
        for i in range(1, len(tokens)):
            if tokens[i] in (_RESOURCE_TOKEN, _OUTPUT_TOKEN):
                end = i
                break

        path = tokens[1:end]
        if not path:
            raise MalformedAddressError(address, "module reference is missing its path")
        for segment in path:
            _check_ident(address, segment, "module name")

        module = ".".join(path)
        rest = tokens[end:]
    elif tokens[0] not in (_RESOURCE_TOKEN, _OUTPUT_TOKEN):
        raise MalformedAddressError(
            address, "address must start with 'module', 'resource' or 'output'"
        )

    if not rest:
        return FQDN(module=module)

    res_type, name, attribute = _parse_reference(address, rest)
    return FQDN(module=module, type=res_type, resource=name, attribute=attribute)


def parse_module(address: str) -> str:
    """Parse an address that must denote a module and return its path."""
    fqdn = parse_fqdn(address)
    if not fqdn.is_module:
        raise MalformedAddressError(address, "expected a module address")
    return fqdn.module


def fqdn_for(meta: ResourceMetadata) -> FQDN:
    """Address of a resource, derived from its metadata."""
    label = f"{meta.type}.{meta.name}"
    if not meta.type:
        raise MalformedAddressError(label, "resource has no type")
    _check_ident(label, meta.type, "resource type")
    _check_ident(label, meta.name, "resource name")
    if meta.module:
        for segment in meta.module.split("."):
            check_module_name(label, segment)
    return FQDN(module=meta.module, type=meta.type, resource=meta.name)
