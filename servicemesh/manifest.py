"""YAML rendering for generated manifests."""

from typing import Any, Iterable

import yaml


def _as_dict(obj: Any) -> dict[str, Any]:
    return obj.to_dict() if hasattr(obj, "to_dict") else obj


def to_yaml(obj: Any) -> str:
    """Render a manifest (model or plain dict) as a YAML document."""
    return yaml.safe_dump(_as_dict(obj), sort_keys=False, default_flow_style=False)


def dump_all(objs: Iterable[Any]) -> str:
    """Render several manifests as one multi-document YAML stream."""
    return yaml.safe_dump_all(
        [_as_dict(o) for o in objs],
        sort_keys=False,
        default_flow_style=False,
    )
