"""Authority declaration: structural validation and typed view.

``validate_declaration`` reports every structural problem at once as stable
reason codes; nothing here touches version control. ``parse_declaration`` is
only meaningful for a document that validated clean.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Mapping, cast

from prism.authority import Authority, parse_authority

Mode = Literal["normal", "bootstrap"]

MODES: tuple[str, ...] = ("bootstrap", "normal")
CAP_FIELDS: tuple[str, ...] = (
    "max_files_added",
    "max_total_loc_added",
    "max_new_top_level_dirs",
)
MIN_INTENT_LENGTH = 3


@dataclass(frozen=True)
class BootstrapCaps:
    max_files_added: float
    max_total_loc_added: float
    max_new_top_level_dirs: float


@dataclass(frozen=True)
class BootstrapScope:
    allowed_paths: tuple[str, ...]
    allowed_action_classes: tuple[str, ...]
    caps: BootstrapCaps


@dataclass(frozen=True)
class DisallowRules:
    path_globs: tuple[str, ...] | None = None
    file_extensions: tuple[str, ...] | None = None


@dataclass(frozen=True)
class Declaration:
    mode: Mode
    intent: str
    declared_authority: Authority
    allowed_action_classes: tuple[str, ...] | None = None
    allowed_paths: tuple[str, ...] | None = None
    disallow: DisallowRules = DisallowRules()
    bootstrap_scope: BootstrapScope | None = None

    @property
    def path_allowlist(self) -> tuple[str, ...] | None:
        if self.mode == "bootstrap" and self.bootstrap_scope is not None:
            return self.bootstrap_scope.allowed_paths
        return self.allowed_paths


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _string_tuple(value: object) -> tuple[str, ...] | None:
    if not isinstance(value, list):
        return None
    return tuple(str(item) for item in value)


def raw_mode(raw: object) -> str | None:
    if isinstance(raw, Mapping):
        mode = raw.get("mode")
        if isinstance(mode, str):
            return mode
    return None


def raw_declared_authority(raw: object) -> str | None:
    if isinstance(raw, Mapping):
        declared = raw.get("declared_authority")
        if isinstance(declared, str):
            return declared
    return None


def validate_declaration(raw: object) -> list[str]:
    document: Mapping[str, object] = raw if isinstance(raw, Mapping) else {}
    errors: list[str] = []

    mode = document.get("mode")
    if mode not in MODES:
        errors.append("invalid:mode")

    intent = document.get("intent")
    if not isinstance(intent, str) or len(intent.strip()) < MIN_INTENT_LENGTH:
        errors.append("invalid:intent")

    if parse_authority(document.get("declared_authority")) is None:
        errors.append("invalid:declared_authority")

    if mode == "bootstrap":
        errors.extend(_bootstrap_scope_errors(document.get("bootstrap_scope")))
    return errors


def _bootstrap_scope_errors(scope: object) -> list[str]:
    if not isinstance(scope, Mapping):
        return ["bootstrap_requires:bootstrap_scope"]
    errors: list[str] = []
    if not isinstance(scope.get("allowed_paths"), list):
        errors.append("bootstrap_requires:bootstrap_scope.allowed_paths")
    if not isinstance(scope.get("allowed_action_classes"), list):
        errors.append("bootstrap_requires:bootstrap_scope.allowed_action_classes")
    caps = scope.get("caps")
    if not isinstance(caps, Mapping):
        errors.append("bootstrap_requires:bootstrap_scope.caps")
        return errors
    for field in CAP_FIELDS:
        if not _is_number(caps.get(field)):
            errors.append(f"bootstrap_caps_requires:{field}")
    return errors


def _disallow_from(raw: object) -> DisallowRules:
    if not isinstance(raw, Mapping):
        return DisallowRules()
    return DisallowRules(
        path_globs=_string_tuple(raw.get("path_globs")),
        file_extensions=_string_tuple(raw.get("file_extensions")),
    )


def parse_declaration(raw: Mapping[str, object]) -> Declaration:
    errors = validate_declaration(raw)
    if errors:
        raise ValueError(f"declaration is structurally invalid: {', '.join(errors)}")
    mode: Mode = "bootstrap" if raw["mode"] == "bootstrap" else "normal"
    declared = cast(Authority, parse_authority(raw["declared_authority"]))
    bootstrap_scope: BootstrapScope | None = None
    if mode == "bootstrap":
        scope = cast(Mapping[str, object], raw["bootstrap_scope"])
        caps = cast(Mapping[str, float], scope["caps"])
        bootstrap_scope = BootstrapScope(
            allowed_paths=_string_tuple(scope["allowed_paths"]) or (),
            allowed_action_classes=_string_tuple(scope["allowed_action_classes"]) or (),
            caps=BootstrapCaps(
                max_files_added=caps["max_files_added"],
                max_total_loc_added=caps["max_total_loc_added"],
                max_new_top_level_dirs=caps["max_new_top_level_dirs"],
            ),
        )
    return Declaration(
        mode=mode,
        intent=str(raw["intent"]).strip(),
        declared_authority=declared,
        allowed_action_classes=_string_tuple(raw.get("allowed_action_classes")),
        allowed_paths=_string_tuple(raw.get("allowed_paths")),
        disallow=_disallow_from(raw.get("disallow")),
        bootstrap_scope=bootstrap_scope,
    )
