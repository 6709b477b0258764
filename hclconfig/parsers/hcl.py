"""
HCL loader: turns configuration files into registered resources.

    resource "container" "web" { ... }      -> registry.create("container", "web")
    output "fqdn" { value = ... }           -> registry.create("output", "fqdn")
    module "db" { source = "./modules/db" } -> files in ./modules/db, module path "db"

Values are stored as python-hcl2 returns them; expressions are not evaluated.
"""
import os
from dataclasses import fields, is_dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple

import hcl2
from rich.console import Console

from hclconfig.config import Config
from hclconfig.errors import MalformedAddressError, ParserError
from hclconfig.getter import Getter
from hclconfig.models.fqdn import check_module_name, join_module
from hclconfig.models.resource import TYPE_OUTPUT, Resource
from hclconfig.registry import TypeRegistry
from hclconfig.settings import Settings

console = Console(stderr=True)

FILE_EXTENSION = ".hcl"

_KNOWN_BLOCKS = {"resource", "output", "module"}


def _strip_quotes(val: str) -> str:
    # newer python-hcl2 releases keep the quotes around string literals
    if len(val) >= 2 and val[0] == '"' and val[-1] == '"':
        return val[1:-1]
    return val


def _clean(val: Any) -> Any:
    """Drop python-hcl2 bookkeeping keys (__is_block__, ...) and literal quotes."""
    if isinstance(val, dict):
        return {_strip_quotes(k): _clean(v) for k, v in val.items() if not k.startswith("__")}
    if isinstance(val, list):
        return [_clean(v) for v in val]
    if isinstance(val, str):
        return _strip_quotes(val)
    return val


def _unwrap(val: Any) -> Any:
    """
    python-hcl2 wraps single-element blocks in a list.
    Recursively unwrap single-element lists that contain dicts.
    """
    if isinstance(val, list):
        if len(val) == 1 and isinstance(val[0], dict):
            return _unwrap(val[0])
        return [_unwrap(v) for v in val]
    if isinstance(val, dict):
        return {k: _unwrap(v) for k, v in val.items()}
    return val


def _iter_labels(entries: Any) -> Iterator[Tuple[str, Any]]:
    """Yield (label, body) for one level of block labels, list-wrapped or not."""
    if isinstance(entries, dict):
        entries = [entries]
    for entry in entries or []:
        if not isinstance(entry, dict):
            continue
        for label, body in entry.items():
            if not label.startswith("__"):
                yield label, body


def _body(raw: Any) -> Dict[str, Any]:
    body = _unwrap(raw)
    return body if isinstance(body, dict) else {}


def _as_list(val: Any) -> List[str]:
    if isinstance(val, str):
        return [val]
    return [str(v) for v in val or []]


def _as_bool(val: Any) -> bool:
    if isinstance(val, str):
        return val.lower() == "true"
    return bool(val)


def _is_local_source(source: str) -> bool:
    return source.startswith(("./", "../", "/"))


class Parser:
    def __init__(
        self,
        registry: TypeRegistry,
        config: Config,
        getter: Optional[Getter] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.registry = registry
        self.config = config
        self.getter = getter or Getter()
        self.settings = settings or Settings()
        self._loading: List[str] = []

    def parse_directory(self, path: str, module: str = "") -> List[Resource]:
        if os.path.isfile(path):
            return self.parse_file(path, module)
        if not os.path.isdir(path):
            raise ParserError(path, "no such file or directory")

        abs_path = os.path.abspath(path)
        if abs_path in self._loading:
            raise ParserError(path, f"module '{module}' includes itself")

        self._loading.append(abs_path)
        try:
            resources: List[Resource] = []
            for fname in sorted(os.listdir(path)):
                fpath = os.path.join(path, fname)
                if os.path.isfile(fpath) and fname.endswith(FILE_EXTENSION):
                    resources.extend(self.parse_file(fpath, module))
            return resources
        finally:
            self._loading.pop()

    def parse_file(self, filepath: str, module: str = "") -> List[Resource]:
        try:
            with open(filepath) as fh:
                data = hcl2.load(fh)
        except OSError as exc:
            raise ParserError(filepath, str(exc)) from exc
        except Exception as exc:
            # lark raises its own exception family for syntax errors
            raise ParserError(filepath, str(exc).strip(), getattr(exc, "line", None)) from exc

        resources: List[Resource] = []

        for type_name, instances in _iter_labels(data.get("resource")):
            for name, raw in _iter_labels(instances):
                r = self._new_resource(filepath, _strip_quotes(type_name), _strip_quotes(name), raw, module)
                resources.append(r)

        for name, raw in _iter_labels(data.get("output")):
            r = self._new_resource(filepath, TYPE_OUTPUT, _strip_quotes(name), raw, module)
            resources.append(r)

        for name, raw in _iter_labels(data.get("module")):
            resources.extend(self._load_module(filepath, _strip_quotes(name), raw, module))

        for kind in data:
            if kind not in _KNOWN_BLOCKS and not kind.startswith("__"):
                console.print(f"[yellow]Warning:[/yellow] ignoring '{kind}' block in {filepath}")

        return resources

    def _new_resource(self, filepath: str, type_name: str, name: str, raw: Any, module: str) -> Resource:
        resource = self.registry.create(type_name, name)
        self._apply_body(filepath, resource, _clean(_body(raw)))
        self.config.add(resource, module=module)
        return resource

    def _apply_body(self, filepath: str, resource: Resource, body: Dict[str, Any]) -> None:
        meta = resource.metadata()
        field_names = {f.name for f in fields(resource)} if is_dataclass(resource) else set()
        field_names.discard("meta")
        properties = getattr(resource, "properties", None)

        for key, val in body.items():
            if key == "depends_on":
                meta.depends_on = _as_list(val)
            elif key == "disabled":
                meta.disabled = _as_bool(val)
            elif key in field_names:
                setattr(resource, key, val)
            elif isinstance(properties, dict):
                properties[key] = val
            else:
                console.print(
                    f"[yellow]Warning:[/yellow] {meta.type} '{meta.name}' has no attribute "
                    f"'{key}' ({filepath})"
                )

    def _load_module(self, filepath: str, name: str, raw: Any, parent_module: str) -> List[Resource]:
        try:
            check_module_name(f"module.{name}", name)
        except MalformedAddressError as exc:
            raise ParserError(filepath, str(exc)) from exc

        body = _clean(_body(raw))
        source = body.get("source")
        if not isinstance(source, str) or not source:
            raise ParserError(filepath, f"module '{name}' has no source")

        if _is_local_source(source):
            path = os.path.normpath(os.path.join(os.path.dirname(filepath), source))
        else:
            path = self.getter.get(source, self.settings.cache_dir, self.settings.force_fetch)

        return self.parse_directory(path, join_module(parent_module, name))
