from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson


def load_json(path: Path) -> Any:
    return orjson.loads(path.read_bytes())


def load_json_object(path: Path) -> dict[str, Any]:
    data = load_json(path)
    return data if isinstance(data, dict) else {}


def dump_json_bytes(payload: Any) -> bytes:
    return orjson.dumps(payload, option=orjson.OPT_INDENT_2 | orjson.OPT_NON_STR_KEYS)


def staging_path(path: Path) -> Path:
    return path.with_name(f".{path.name}.partial")


def write_json_atomic(path: Path, payload: Any) -> None:
    """Write through a hidden sibling file so readers never see a partial document."""
    path.parent.mkdir(parents=True, exist_ok=True)
    staging = staging_path(path)
    staging.write_bytes(dump_json_bytes(payload))
    staging.replace(path)
