"""
Type registry tests.
"""
import pytest

from hclconfig.errors import UnknownTypeError
from hclconfig.models.resource import TYPE_OUTPUT, Generic, Output, Processable, Resource, Status
from hclconfig.registry import TypeRegistry, default_types, register_generic


class TestTypeRegistry:
    def test_create_initialises_metadata(self, registry):
        r = registry.create("container", "test_dev")
        meta = r.metadata()
        assert meta.name == "test_dev"
        assert meta.type == "container"
        assert meta.module == ""
        assert meta.status == Status.PENDING_CREATION
        assert meta.depends_on == []
        assert meta.resource_links == []
        assert meta.disabled is False

    def test_create_returns_fresh_instances(self, registry):
        a = registry.create("container", "a")
        b = registry.create("container", "a")
        assert a is not b
        a.metadata().depends_on.append("resource.network.x")
        assert b.metadata().depends_on == []

    def test_unknown_type(self, registry):
        with pytest.raises(UnknownTypeError) as exc:
            registry.create("k8s_cluster", "dev")
        assert exc.value.type_name == "k8s_cluster"
        assert "k8s_cluster" in str(exc.value)

    def test_output_is_built_in(self):
        out = default_types().create(TYPE_OUTPUT, "fqdn")
        assert isinstance(out, Output)
        assert out.value is None

    def test_default_types_are_independent(self, registry):
        fresh = default_types()
        assert "container" in registry
        assert "container" not in fresh

    def test_resources_satisfy_protocol(self, registry):
        assert isinstance(registry.create("network", "cloud"), Resource)

    def test_empty_type_name_rejected(self):
        with pytest.raises(ValueError):
            TypeRegistry().register("", Generic)

    def test_types_sorted(self, registry):
        assert registry.types() == ["container", "network", "output"]


class TestRegisterGeneric:
    def test_registers_missing_types(self):
        reg = default_types()
        register_generic(reg, ["volume"])
        r = reg.create("volume", "data")
        assert isinstance(r, Generic)
        assert r.properties == {}

    def test_keeps_existing_factories(self, registry):
        register_generic(registry, ["container", TYPE_OUTPUT])
        assert not isinstance(registry.create("container", "x"), Generic)
        assert isinstance(registry.create(TYPE_OUTPUT, "x"), Output)


class TestProcessable:
    def test_processable_is_optional(self, registry):
        container = registry.create("container", "web")
        assert isinstance(container, Processable)
        assert not isinstance(registry.create("network", "cloud"), Processable)
        container.process()
        assert container.metadata().status == Status.CREATED
