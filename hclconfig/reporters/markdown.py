"""
Markdown + Mermaid resource graph report.
"""
import re
from collections import defaultdict
from datetime import datetime, timezone
from typing import Dict, List

from jinja2 import Environment

from hclconfig import __version__
from hclconfig.config import Config
from hclconfig.models.fqdn import fqdn_for
from hclconfig.models.resource import TYPE_OUTPUT, Resource


def _sanitize_node_id(address: str) -> str:
    return re.sub(r"[^a-zA-Z0-9_]", "_", address)


def _node_shape(r: Resource) -> str:
    """Return a Mermaid node definition string (without ID)."""
    meta = r.metadata()
    if meta.type == TYPE_OUTPUT:
        return f"[/output.{meta.name}/]"
    if meta.disabled:
        return f"({meta.type}.{meta.name})"
    return f"[{meta.type}.{meta.name}]"


def build_mermaid(resources: List[Resource]) -> str:
    # one subgraph per module, top-level resources outside any subgraph
    by_module: Dict[str, List[Resource]] = defaultdict(list)
    for r in resources:
        by_module[r.metadata().module].append(r)

    lines = ["flowchart LR"]

    for r in by_module.get("", []):
        lines.append(f"    {_sanitize_node_id(str(fqdn_for(r.metadata())))}{_node_shape(r)}")

    for module in sorted(m for m in by_module if m):
        lines.append(f"    subgraph {_sanitize_node_id('module.' + module)}[module.{module}]")
        for r in by_module[module]:
            lines.append(f"        {_sanitize_node_id(str(fqdn_for(r.metadata())))}{_node_shape(r)}")
        lines.append("    end")

    added_edges = set()
    for r in resources:
        src_id = _sanitize_node_id(str(fqdn_for(r.metadata())))
        for link in r.metadata().resource_links:
            dst_id = _sanitize_node_id(link)
            if (src_id, dst_id) not in added_edges:
                added_edges.add((src_id, dst_id))
                lines.append(f"    {src_id} -->|depends on| {dst_id}")

    for r in resources:
        if r.metadata().disabled:
            node_id = _sanitize_node_id(str(fqdn_for(r.metadata())))
            lines.append(f"    style {node_id} stroke-dasharray: 5 5")

    return "\n".join(lines)


_TEMPLATE = """\
# Resource Graph

**Generated:** {{ generated }}
**Source:** {{ source }}
**Tool:** hclconfig v{{ version }}

Loaded **{{ resources | length }} resources** in **{{ modules | length }} module(s)**.

---

## Resource Inventory

| # | Address | Type | Module | Disabled | Depends on |
|---|---------|------|--------|----------|------------|
{% for r, addr in rows %}| {{ loop.index }} | `{{ addr }}` | `{{ r.metadata().type }}` | {{ r.metadata().module or "-" }} | {{ "yes" if r.metadata().disabled else "no" }} | {% for l in r.metadata().resource_links %}`{{ l }}`{% if not loop.last %}, {% endif %}{% endfor %} |
{% endfor %}

---

## Dependency Graph

```mermaid
{{ mermaid }}
```
"""


def build_report(config: Config, source_path: str) -> str:
    resources = list(config)
    modules = sorted({r.metadata().module for r in resources if r.metadata().module})

    env = Environment(autoescape=False)
    template = env.from_string(_TEMPLATE)

    return template.render(
        generated=datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC"),
        source=source_path,
        version=__version__,
        resources=resources,
        modules=modules,
        rows=[(r, str(fqdn_for(r.metadata()))) for r in resources],
        mermaid=build_mermaid(resources),
    )
