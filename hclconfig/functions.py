"""
Adapter exposing Python callables to authored configuration.

Functions are described by an explicit signature drawn from the closed set of
value kinds the expression language understands. Anything else (callables,
objects, unannotated or variadic parameters) is rejected when the function is
adapted, not when it is first called.
"""
import inspect
import os
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from hclconfig.errors import ResourceNotFoundError, UnsupportedSignatureError
from hclconfig.models.fqdn import fqdn_for


class ValueKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOL   = "bool"
    LIST   = "list"
    MAP    = "map"


_PY_KINDS = {
    str:   ValueKind.STRING,
    int:   ValueKind.NUMBER,
    float: ValueKind.NUMBER,
    bool:  ValueKind.BOOL,
    list:  ValueKind.LIST,
    tuple: ValueKind.LIST,
    dict:  ValueKind.MAP,
}


@dataclass(frozen=True)
class Signature:
    params: Tuple[ValueKind, ...]
    returns: ValueKind


def _to_kind(fn_name: str, descriptor: Any) -> ValueKind:
    if isinstance(descriptor, ValueKind):
        return descriptor
    if isinstance(descriptor, str):
        try:
            return ValueKind(descriptor)
        except ValueError:
            raise UnsupportedSignatureError(fn_name, f"unknown value kind '{descriptor}'") from None

    # List[str], Dict[str, int], ... map to their container kind
    origin = typing.get_origin(descriptor) or descriptor
    kind = _PY_KINDS.get(origin) if isinstance(origin, type) else None
    if kind is None:
        raise UnsupportedSignatureError(fn_name, f"type {descriptor!r} has no expression equivalent")
    return kind


def _matches(kind: ValueKind, value: Any) -> bool:
    if kind == ValueKind.STRING:
        return isinstance(value, str)
    if kind == ValueKind.NUMBER:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if kind == ValueKind.BOOL:
        return isinstance(value, bool)
    if kind == ValueKind.LIST:
        return isinstance(value, (list, tuple))
    return isinstance(value, dict)


def _signature_from_annotations(fn: Callable, fn_name: str) -> Signature:
    try:
        hints = typing.get_type_hints(fn)
    except Exception as exc:
        raise UnsupportedSignatureError(fn_name, f"unable to read annotations: {exc}") from exc

    params = []
    for p in inspect.signature(fn).parameters.values():
        if p.kind in (p.VAR_POSITIONAL, p.VAR_KEYWORD):
            raise UnsupportedSignatureError(fn_name, f"variadic parameter '{p.name}'")
        if p.name not in hints:
            raise UnsupportedSignatureError(fn_name, f"parameter '{p.name}' is not annotated")
        params.append(_to_kind(fn_name, hints[p.name]))

    if "return" not in hints:
        raise UnsupportedSignatureError(fn_name, "return type is not annotated")
    return Signature(tuple(params), _to_kind(fn_name, hints["return"]))


@dataclass(frozen=True)
class ExprFunction:
    name: str
    signature: Signature
    impl: Callable[..., Any]

    def return_type(self, arg_kinds: Sequence[ValueKind]) -> ValueKind:
        if tuple(arg_kinds) != self.signature.params:
            raise TypeError(
                f"{self.name}() expects ({', '.join(k.value for k in self.signature.params)})"
            )
        return self.signature.returns

    def __call__(self, *args: Any) -> Any:
        params = self.signature.params
        if len(args) != len(params):
            raise TypeError(f"{self.name}() takes {len(params)} argument(s), got {len(args)}")
        for i, (kind, value) in enumerate(zip(params, args)):
            if not _matches(kind, value):
                raise TypeError(f"{self.name}() argument {i + 1} must be {kind.value}")

        result = self.impl(*args)
        if not _matches(self.signature.returns, result):
            raise TypeError(f"{self.name}() returned a non-{self.signature.returns.value} value")
        return result


def adapt(
    fn: Callable[..., Any],
    params: Optional[Sequence[Any]] = None,
    returns: Optional[Any] = None,
    name: Optional[str] = None,
) -> ExprFunction:
    """
    Wrap ``fn`` as an expression function.

    ``params``/``returns`` accept ValueKind members, their string values or
    the matching Python types. When both are omitted the signature is read
    from the function annotations, which must then cover every parameter and
    the return value.
    """
    fn_name = name or getattr(fn, "__name__", repr(fn))

    if params is None and returns is None:
        signature = _signature_from_annotations(fn, fn_name)
    else:
        if params is None or returns is None:
            raise UnsupportedSignatureError(fn_name, "params and returns must be given together")
        signature = Signature(
            tuple(_to_kind(fn_name, p) for p in params),
            _to_kind(fn_name, returns),
        )

    return ExprFunction(name=fn_name, signature=signature, impl=fn)


def default_functions(resolver) -> Dict[str, ExprFunction]:
    """Helpers available to every configuration, bound to ``resolver``."""

    def env(name: str) -> str:
        return os.environ.get(name, "")

    def home() -> str:
        return os.path.expanduser("~")

    def resource_exists(address: str, parent_module: str) -> bool:
        try:
            resolver.find_relative_resource(address, parent_module)
        except ResourceNotFoundError:
            return False
        return True

    def module_resources(module_address: str, parent_module: str) -> List[str]:
        found = resolver.find_relative_module_resources(
            module_address, parent_module, include_children=True
        )
        return [str(fqdn_for(r.metadata())) for r in found]

    fns = [env, home, resource_exists, module_resources]
    return {fn.__name__: adapt(fn) for fn in fns}
