from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

from prism.exceptions import DeclarationLoadError


def load_json_document(path: Path, *, encoding: str = "utf-8") -> object:
    """Decode a JSON document, raising on anything that is not JSON text."""
    try:
        text = path.read_text(encoding=encoding)
    except (OSError, UnicodeError) as exc:
        raise DeclarationLoadError(f"unable to read {path}: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DeclarationLoadError(f"failed to parse {path} as JSON: {exc}") from exc


def load_json_object_path(path: Path, *, encoding: str = "utf-8") -> dict[str, object]:
    if not path.exists():
        return {}
    try:
        payload = json.loads(path.read_text(encoding=encoding))
    except (OSError, UnicodeError, json.JSONDecodeError):
        return {}
    if not isinstance(payload, Mapping):
        return {}
    return {str(key): payload[key] for key in payload}


def dump_json_record(payload: object) -> str:
    """Pretty JSON with caller key order preserved and a trailing newline."""
    return json.dumps(payload, indent=2, sort_keys=False, ensure_ascii=False) + "\n"


def write_text_artifact(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
