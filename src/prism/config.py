from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, time
from pathlib import Path
from typing import Mapping, TypeAlias
import tomllib

from prism.runtime.env_policy import BASE_REF_ENV, env_text

DEFAULT_CONFIG_NAME = "prism.toml"

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


@dataclass(frozen=True)
class GateSettings:
    intent_path: Path = Path("INTENT.json")
    registry_path: Path = Path(".prism/surface_registry.yaml")
    bootstrap_lock_path: Path = Path(".prism/bootstrap.lock")
    meaning_out_path: Path = Path("meaning.json")
    base_ref: str = "main"
    remote: str = "origin"
    fetch_depth: int = 200

    def under(self, root: Path) -> "GateSettings":
        return replace(
            self,
            intent_path=root / self.intent_path,
            registry_path=root / self.registry_path,
            bootstrap_lock_path=root / self.bootstrap_lock_path,
            meaning_out_path=root / self.meaning_out_path,
        )


_PATH_SETTINGS: dict[str, str] = {
    "intent_path": "INTENT_PATH",
    "registry_path": "REGISTRY_PATH",
    "bootstrap_lock_path": "BOOTSTRAP_LOCK_PATH",
    "meaning_out_path": "MEANING_OUT_PATH",
}
_TEXT_SETTINGS: dict[str, str] = {
    "base_ref": BASE_REF_ENV,
    "remote": "PRISM_REMOTE",
}
_FETCH_DEPTH_ENV = "PRISM_FETCH_DEPTH"


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def gate_defaults(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get("gate", {})
    return section if isinstance(section, dict) else {}


def _as_text(value: TomlValue) -> str:
    if isinstance(value, str):
        return value.strip()
    return ""


def _as_positive_int(value: TomlValue | str) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        parsed = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return parsed if parsed > 0 else None


def resolve_gate_settings(
    overrides: Mapping[str, object] | None = None,
    *,
    root: Path | None = None,
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> GateSettings:
    """CLI overrides beat environment, environment beats ``[gate]``, then defaults."""
    explicit = {key: value for key, value in (overrides or {}).items() if value is not None}
    section = gate_defaults(root=root, config_path=config_path)
    defaults = GateSettings()
    values: dict[str, object] = {}

    for field, env_name in _PATH_SETTINGS.items():
        candidate = (
            explicit.get(field)
            or env_text(env_name, environ=environ)
            or _as_text(section.get(field))
        )
        values[field] = Path(str(candidate)) if candidate else getattr(defaults, field)

    for field, env_name in _TEXT_SETTINGS.items():
        candidate = explicit.get(field)
        if isinstance(candidate, str):
            candidate = candidate.strip()
        if not candidate:
            candidate = env_text(env_name, environ=environ) or _as_text(section.get(field))
        values[field] = str(candidate) if candidate else getattr(defaults, field)

    depth = (
        _as_positive_int(explicit.get("fetch_depth"))  # type: ignore[arg-type]
        or _as_positive_int(env_text(_FETCH_DEPTH_ENV, environ=environ))
        or _as_positive_int(section.get("fetch_depth"))
        or defaults.fetch_depth
    )
    values["fetch_depth"] = depth
    return GateSettings(**values)  # type: ignore[arg-type]
