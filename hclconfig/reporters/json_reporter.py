"""
JSON resource graph report.
"""
import json
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from typing import Any, Dict

from hclconfig import __version__
from hclconfig.config import Config
from hclconfig.models.fqdn import fqdn_for
from hclconfig.models.resource import Resource


def _attributes(r: Resource) -> Dict[str, Any]:
    """Type specific fields of a dataclass resource, metadata excluded."""
    if not is_dataclass(r):
        return {}
    data = asdict(r)
    data.pop("meta", None)
    return data


def build_report(config: Config, source_path: str) -> str:
    resources = list(config)
    report = {
        "meta": {
            "generated": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "source": source_path,
            "tool": "hclconfig",
            "version": __version__,
        },
        "summary": {
            "resources": len(resources),
            "modules": sorted({r.metadata().module for r in resources if r.metadata().module}),
        },
        "resources": [
            {
                "address": str(fqdn_for(r.metadata())),
                **r.metadata().to_dict(),
                "attributes": _attributes(r),
            }
            for r in resources
        ],
    }
    return json.dumps(report, indent=2, default=str)
