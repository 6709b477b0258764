from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Protocol, runtime_checkable

TYPE_OUTPUT = "output"


class Status(str, Enum):
    PENDING_CREATION = "pending_creation"
    PENDING_MODIFICATION = "pending_modification"
    CREATED = "created"
    FAILED = "failed"
    DESTROYED = "destroyed"


@dataclass
class ResourceMetadata:
    name: str
    type: str
    module: str = ""                # "module1.module2", "" at top level
    depends_on: List[str] = field(default_factory=list)      # user authored, module relative
    resource_links: List[str] = field(default_factory=list)  # resolved, absolute
    disabled: bool = False
    status: Status = Status.PENDING_CREATION

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "type": self.type,
            "module": self.module,
            "depends_on": list(self.depends_on),
            "resource_links": list(self.resource_links),
            "disabled": self.disabled,
            "status": self.status.value,
        }


@runtime_checkable
class Resource(Protocol):
    """Anything stored in a Config: exposes its shared metadata."""

    def metadata(self) -> ResourceMetadata:
        ...


@runtime_checkable
class Processable(Protocol):
    """Optional capability, called once by an executor after links are resolved."""

    def process(self) -> None:
        ...


@dataclass
class Output:
    meta: ResourceMetadata
    value: Any = None

    def metadata(self) -> ResourceMetadata:
        return self.meta


@dataclass
class Generic:
    """
    Schema-less resource used for types declared in settings: every
    attribute authored in the block lands in ``properties``.
    """
    meta: ResourceMetadata
    properties: Dict[str, Any] = field(default_factory=dict)

    def metadata(self) -> ResourceMetadata:
        return self.meta
