"""
Serialization helpers for Table objects.

Provides JSON/YAML snapshots via an intermediate dict representation.
Headers are stored as an explicit list so column order survives codecs
that do not keep mapping order.
"""
from __future__ import annotations

from typing import Any, Dict

import yaml

from structext.backends.json_encoder import encode_json
from structext.errors import InputTypeError
from structext.json_decoder import JSONDecoder
from structext.model import Table


def table_to_dict(t: Table) -> Dict[str, Any]:
    return {
        "headers": list(t.headers),
        "records": [dict(r) for r in t.records],
        "metadata": dict(t.metadata),
    }


def table_from_dict(d: Any) -> Table:
    if not isinstance(d, dict):
        raise InputTypeError(f"Table snapshot must be a mapping, got {type(d).__name__}")
    headers = [str(h) for h in d.get("headers", [])]
    records = [
        {h: "" if r.get(h) is None else str(r.get(h)) for h in headers}
        for r in d.get("records", [])
    ]
    metadata = {str(k): str(v) for k, v in d.get("metadata", {}).items()}
    return Table(headers=headers, records=records, metadata=metadata)


def table_to_json(t: Table) -> str:
    return encode_json(table_to_dict(t))


def table_from_json(s: str) -> Table:
    # An empty metadata dict is encoded as [], which decodes to a list.
    d = JSONDecoder().decode(s)
    if isinstance(d, dict) and isinstance(d.get("metadata"), list):
        d["metadata"] = {}
    if isinstance(d, dict):
        d["records"] = [r if isinstance(r, dict) else {} for r in d.get("records", [])]
    return table_from_dict(d)


def table_to_yaml(t: Table) -> str:
    return yaml.safe_dump(table_to_dict(t), sort_keys=False)


def table_from_yaml(s: str) -> Table:
    return table_from_dict(yaml.safe_load(s))
