"""
Shared fixtures: two typed resources and the nested-module store most tests
query against.
"""
import os
from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Dict, List

import pytest

from hclconfig.config import Config
from hclconfig.models.resource import TYPE_OUTPUT, ResourceMetadata, Status
from hclconfig.registry import default_types

FIXTURES = os.path.join(os.path.dirname(__file__), "fixtures")


@dataclass
class Container:
    meta: ResourceMetadata
    image: str = ""
    command: List[str] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)
    privileged: bool = False

    def metadata(self) -> ResourceMetadata:
        return self.meta

    def process(self) -> None:
        self.meta.status = Status.CREATED


@dataclass
class Network:
    meta: ResourceMetadata
    subnet: str = ""

    def metadata(self) -> ResourceMetadata:
        return self.meta


@pytest.fixture
def registry():
    reg = default_types()
    reg.register("container", Container)
    reg.register("network", Network)
    return reg


@pytest.fixture
def scenario(registry):
    """
    net1  network   cloud      (top level)
    con1  container test_dev   (top level, depends on module.module1)
    con2  container test_dev   module1
    con3  container test_dev   module1.module2
    con4  container test_dev2  module1.module2 (depends on resource.container.test_dev)
    out1  output    fqdn       module1.module2
    """
    net1 = registry.create("network", "cloud")

    con1 = registry.create("container", "test_dev")
    con1.metadata().depends_on = ["module.module1"]

    con2 = registry.create("container", "test_dev")
    con2.metadata().module = "module1"

    con3 = registry.create("container", "test_dev")
    con3.metadata().module = "module1.module2"

    con4 = registry.create("container", "test_dev2")
    con4.metadata().module = "module1.module2"
    con4.metadata().depends_on = ["resource.container.test_dev"]

    out1 = registry.create(TYPE_OUTPUT, "fqdn")
    out1.metadata().module = "module1.module2"

    config = Config()
    for r in (net1, con1, con2, con3, con4, out1):
        config.add(r)

    return SimpleNamespace(
        config=config,
        registry=registry,
        net1=net1, con1=con1, con2=con2, con3=con3, con4=con4, out1=out1,
    )
