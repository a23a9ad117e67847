"""Action surface registry.

The registry YAML declares ``action_classes`` as a mapping of identifier to
``{match, min_authority}``. Entry order is significant: it breaks dominance
ties, so the loaded registry is an ordered tuple, never a bare dict.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Mapping

import yaml

from prism.authority import Authority, parse_authority
from prism.exceptions import RegistryError

HEURISTIC_FIELDS: tuple[str, ...] = (
    "files_added_gte",
    "total_loc_added_gte",
    "new_top_level_dirs_gte",
)


@dataclass(frozen=True)
class Heuristics:
    files_added_gte: float | None = None
    total_loc_added_gte: float | None = None
    new_top_level_dirs_gte: float | None = None


@dataclass(frozen=True)
class MatchRule:
    any_paths: tuple[str, ...] | None = None
    any_extensions: tuple[str, ...] | None = None
    heuristics: Heuristics | None = None


@dataclass(frozen=True)
class ActionClassRule:
    identifier: str
    match: MatchRule
    min_authority: Authority


@dataclass(frozen=True)
class ActionSurfaceRegistry:
    entries: tuple[ActionClassRule, ...] = ()

    def __iter__(self) -> Iterator[ActionClassRule]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, identifier: str) -> ActionClassRule | None:
        for entry in self.entries:
            if entry.identifier == identifier:
                return entry
        return None

    @property
    def identifiers(self) -> tuple[str, ...]:
        return tuple(entry.identifier for entry in self.entries)


def _yaml_loader():
    class Loader(yaml.SafeLoader):
        pass

    for key, values in list(Loader.yaml_implicit_resolvers.items()):
        Loader.yaml_implicit_resolvers[key] = [
            (tag, regexp) for tag, regexp in values if tag != "tag:yaml.org,2002:bool"
        ]
    return Loader


def _optional_str_tuple(raw: object, *, field_name: str) -> tuple[str, ...] | None:
    if raw is None:
        return None
    if not isinstance(raw, list) or any(not isinstance(item, str) for item in raw):
        raise RegistryError(f"surface registry invalid {field_name}: expected list[str]")
    return tuple(raw)


def _optional_threshold(raw: object, *, field_name: str) -> float | None:
    if raw is None:
        return None
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise RegistryError(f"surface registry invalid {field_name}: expected number")
    return raw


def _heuristics_from(raw: object, *, identifier: str) -> Heuristics | None:
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise RegistryError(
            f"surface registry invalid action_classes.{identifier}.match.heuristics"
        )
    return Heuristics(
        **{
            field: _optional_threshold(
                raw.get(field),
                field_name=f"action_classes.{identifier}.match.heuristics.{field}",
            )
            for field in HEURISTIC_FIELDS
        }
    )


def _rule_from_mapping(identifier: str, payload: object) -> ActionClassRule:
    if not isinstance(payload, Mapping):
        raise RegistryError(f"surface registry invalid action_classes.{identifier}")
    match_raw = payload.get("match", {})
    if match_raw is None:
        match_raw = {}
    if not isinstance(match_raw, Mapping):
        raise RegistryError(f"surface registry invalid action_classes.{identifier}.match")
    min_authority = parse_authority(payload.get("min_authority"))
    if min_authority is None:
        raise RegistryError(
            f"surface registry invalid action_classes.{identifier}.min_authority"
        )
    return ActionClassRule(
        identifier=identifier,
        match=MatchRule(
            any_paths=_optional_str_tuple(
                match_raw.get("any_paths"),
                field_name=f"action_classes.{identifier}.match.any_paths",
            ),
            any_extensions=_optional_str_tuple(
                match_raw.get("any_extensions"),
                field_name=f"action_classes.{identifier}.match.any_extensions",
            ),
            heuristics=_heuristics_from(match_raw.get("heuristics"), identifier=identifier),
        ),
        min_authority=min_authority,
    )


def registry_from_mapping(raw: object) -> ActionSurfaceRegistry:
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise RegistryError("surface registry root must be a mapping")
    classes_raw = raw.get("action_classes", {})
    if classes_raw is None:
        classes_raw = {}
    if not isinstance(classes_raw, Mapping):
        raise RegistryError("surface registry action_classes must be a mapping")
    entries: list[ActionClassRule] = []
    for identifier, payload in classes_raw.items():
        if not isinstance(identifier, str) or not identifier:
            raise RegistryError(f"surface registry invalid action class id: {identifier!r}")
        entries.append(_rule_from_mapping(identifier, payload))
    return ActionSurfaceRegistry(entries=tuple(entries))


def load_registry(path: Path) -> ActionSurfaceRegistry:
    try:
        with path.open("r", encoding="utf-8") as handle:
            raw = yaml.load(handle, Loader=_yaml_loader())
    except OSError as exc:
        raise RegistryError(f"surface registry unreadable: {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise RegistryError(f"surface registry is not valid YAML: {path}: {exc}") from exc
    return registry_from_mapping(raw)
