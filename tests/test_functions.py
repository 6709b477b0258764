"""
Function adapter tests.
"""
from typing import Callable, Dict, List

import pytest

from hclconfig.errors import UnsupportedSignatureError
from hclconfig.functions import ExprFunction, ValueKind, adapt, default_functions
from hclconfig.resolver import Resolver


class TestAdaptFromAnnotations:
    def test_in_parameters(self):
        def myfunc(a: str, b: int) -> int:
            return 0

        fn = adapt(myfunc)
        assert fn.signature.params == (ValueKind.STRING, ValueKind.NUMBER)

    def test_out_parameter(self):
        def myfunc(a: str, b: int) -> int:
            return 0

        fn = adapt(myfunc)
        assert fn.return_type([ValueKind.STRING, ValueKind.NUMBER]) == ValueKind.NUMBER

    def test_invalid_in_parameter(self):
        def myfunc(a: str, complex: Callable[[], None]) -> int:
            return 0

        with pytest.raises(UnsupportedSignatureError) as exc:
            adapt(myfunc)
        assert exc.value.function_name == "myfunc"

    def test_invalid_out_parameter(self):
        def myfunc(a: str, b: int) -> Callable[[], None]:
            return lambda: None

        with pytest.raises(UnsupportedSignatureError):
            adapt(myfunc)

    def test_containers(self):
        def myfunc(items: List[str], labels: Dict[str, str], flag: bool) -> list:
            return items

        fn = adapt(myfunc)
        assert fn.signature.params == (ValueKind.LIST, ValueKind.MAP, ValueKind.BOOL)
        assert fn.signature.returns == ValueKind.LIST

    def test_unannotated_parameter(self):
        def myfunc(a, b: int) -> int:
            return b

        with pytest.raises(UnsupportedSignatureError):
            adapt(myfunc)

    def test_missing_return_annotation(self):
        def myfunc(a: str):
            return a

        with pytest.raises(UnsupportedSignatureError):
            adapt(myfunc)

    def test_variadic_rejected(self):
        def myfunc(*args: str) -> str:
            return ""

        with pytest.raises(UnsupportedSignatureError):
            adapt(myfunc)


class TestAdaptExplicit:
    def test_value_kinds(self):
        fn = adapt(lambda a, b: a * b, [ValueKind.NUMBER, "number"], ValueKind.NUMBER, name="mul")
        assert isinstance(fn, ExprFunction)
        assert fn.name == "mul"
        assert fn(3, 4) == 12

    def test_python_types(self):
        fn = adapt(lambda s: s.upper(), [str], str, name="upper")
        assert fn.signature == adapt(lambda s: s, ["string"], "string").signature

    def test_unknown_kind(self):
        with pytest.raises(UnsupportedSignatureError):
            adapt(lambda f: f, ["function"], "string", name="call")

    def test_object_type(self):
        with pytest.raises(UnsupportedSignatureError):
            adapt(lambda f: f, [object], str, name="call")

    def test_params_without_returns(self):
        with pytest.raises(UnsupportedSignatureError):
            adapt(lambda a: a, params=[str])


class TestExprFunctionCall:
    def setup_method(self):
        def repeat(text: str, times: int) -> str:
            return text * times

        self.fn = adapt(repeat)

    def test_call(self):
        assert self.fn("ab", 2) == "abab"

    def test_wrong_arg_count(self):
        with pytest.raises(TypeError):
            self.fn("ab")

    def test_wrong_arg_kind(self):
        with pytest.raises(TypeError):
            self.fn("ab", "2")

    def test_bool_is_not_a_number(self):
        with pytest.raises(TypeError):
            self.fn("ab", True)

    def test_bad_return_value(self):
        fn = adapt(lambda: 1, [], ValueKind.STRING, name="broken")
        with pytest.raises(TypeError):
            fn()

    def test_return_type_checks_arguments(self):
        with pytest.raises(TypeError):
            self.fn.return_type([ValueKind.NUMBER, ValueKind.NUMBER])


class TestDefaultFunctions:
    def setup_method(self):
        self.names = {"env", "home", "resource_exists", "module_resources"}

    def test_names(self, scenario):
        fns = default_functions(Resolver(scenario.config))
        assert set(fns) == self.names

    def test_env(self, scenario, monkeypatch):
        monkeypatch.setenv("HCLCONFIG_TEST", "abc")
        fns = default_functions(Resolver(scenario.config))
        assert fns["env"]("HCLCONFIG_TEST") == "abc"
        monkeypatch.delenv("HCLCONFIG_TEST")
        assert fns["env"]("HCLCONFIG_TEST") == ""

    def test_resource_exists(self, scenario):
        fns = default_functions(Resolver(scenario.config))
        assert fns["resource_exists"]("resource.container.test_dev", "module1") is True
        assert fns["resource_exists"]("resource.container.nope", "module1") is False

    def test_module_resources(self, scenario):
        fns = default_functions(Resolver(scenario.config))
        assert fns["module_resources"]("module.module2", "module1") == [
            "module.module1.module2.resource.container.test_dev",
            "module.module1.module2.resource.container.test_dev2",
            "module.module1.module2.output.fqdn",
        ]
