"""Boundary interpretation: declaration + change-set + registry + lock -> Decision.

Stages run in a fixed order and the first stage that yields any reason ends
the run; reasons inside a stage are all collected. Authority comparison and
the mode constraints form the final stage together, authority first.

The engine never reads files or runs git itself. The diff and the lock state
arrive as injected callables so that a structurally invalid declaration is
rejected before any version-control work happens.
"""

from __future__ import annotations

import logging
from typing import Callable, Mapping, cast

from prism.authority import (
    BOOTSTRAP_FLOOR,
    FALLBACK_REQUIRED,
    Authority,
    exceeds,
    max_authority,
)
from prism.classifier import classify, pick_dominant
from prism.decision import Decision
from prism.declaration import (
    Declaration,
    Mode,
    parse_declaration,
    raw_declared_authority,
    raw_mode,
    validate_declaration,
)
from prism.diff_summary import DiffSummary
from prism.path_match import matches_any_extension, matches_any_path
from prism.registry import ActionSurfaceRegistry

logger = logging.getLogger(__name__)

DiffProvider = Callable[[], DiffSummary]
LockCheck = Callable[[], bool]

RESERVED_BOOTSTRAP_CLASS = "new_codebase"


def resolve_required_authority(
    dominant: str,
    registry: ActionSurfaceRegistry,
    mode: Mode,
) -> Authority:
    rule = registry.get(dominant)
    required = rule.min_authority if rule is not None else FALLBACK_REQUIRED
    if mode == "bootstrap":
        required = max_authority(required, BOOTSTRAP_FLOOR)
    return required


def disallow_violations(declaration: Declaration, diff: DiffSummary) -> list[str]:
    reasons: list[str] = []
    rules = declaration.disallow
    if rules.path_globs is not None:
        reasons.extend(
            f"disallowed_path:{path}"
            for path in diff.paths
            if matches_any_path(path, rules.path_globs)
        )
    if rules.file_extensions is not None:
        reasons.extend(
            f"disallowed_extension:{path}"
            for path in diff.paths
            if matches_any_extension(path, rules.file_extensions)
        )
    return reasons


def allowlist_violations(declaration: Declaration, diff: DiffSummary) -> list[str]:
    allowlist = declaration.path_allowlist
    if not allowlist:
        return []
    return [
        f"run1_path_outside_allowlist:{path}"
        for path in diff.paths
        if not matches_any_path(path, allowlist)
    ]


def authority_violations(required: Authority, declared: Authority) -> list[str]:
    if exceeds(required, declared):
        return [f"authority_exceeded:required={required.value},declared={declared.value}"]
    return []


def normal_mode_violations(declaration: Declaration, dominant: str) -> list[str]:
    reasons: list[str] = []
    if dominant == RESERVED_BOOTSTRAP_CLASS:
        reasons.append("normal_mode_forbids_new_codebase")
    allowed = declaration.allowed_action_classes
    if allowed and dominant not in allowed:
        reasons.append(f"action_class_not_allowed:{dominant}")
    return reasons


def bootstrap_mode_violations(
    declaration: Declaration,
    dominant: str,
    diff: DiffSummary,
    *,
    lock_exists: LockCheck,
) -> list[str]:
    scope = declaration.bootstrap_scope
    if scope is None:
        raise ValueError("bootstrap declaration without bootstrap_scope")
    reasons: list[str] = []
    if lock_exists():
        reasons.append("bootstrap_forbidden:bootstrap_lock_exists")
    if scope.allowed_action_classes and dominant not in scope.allowed_action_classes:
        reasons.append(f"bootstrap_action_class_not_allowed:{dominant}")
    caps = scope.caps
    # Caps are inclusive upper bounds.
    if diff.files_added > caps.max_files_added:
        reasons.append("bootstrap_cap_exceeded:max_files_added")
    if diff.total_loc_added > caps.max_total_loc_added:
        reasons.append("bootstrap_cap_exceeded:max_total_loc_added")
    if diff.new_top_level_dirs > caps.max_new_top_level_dirs:
        reasons.append("bootstrap_cap_exceeded:max_new_top_level_dirs")
    return reasons


def _structural_failure(raw_declaration: object, errors: list[str]) -> Decision:
    return Decision(
        mode=raw_mode(raw_declaration),
        dominant_action_class=None,
        required_authority=None,
        declared_authority=raw_declared_authority(raw_declaration),
        verdict="fail",
        reasons=tuple(errors),
        diff_summary=None,
    )


def evaluate(
    raw_declaration: object,
    *,
    registry: ActionSurfaceRegistry,
    diff_provider: DiffProvider,
    lock_exists: LockCheck,
) -> Decision:
    errors = validate_declaration(raw_declaration)
    if errors:
        logger.info("declaration rejected before diff: %s", ", ".join(errors))
        return _structural_failure(raw_declaration, errors)

    declaration = parse_declaration(cast(Mapping[str, object], raw_declaration))
    declared = declaration.declared_authority
    diff = diff_provider()

    def _decide(
        reasons: list[str],
        *,
        dominant: str | None = None,
        required: Authority | None = None,
    ) -> Decision:
        return Decision(
            mode=declaration.mode,
            dominant_action_class=dominant,
            required_authority=required,
            declared_authority=declared.value,
            verdict="fail" if reasons else "pass",
            reasons=tuple(reasons),
            diff_summary=diff,
        )

    for stage in (disallow_violations, allowlist_violations):
        reasons = stage(declaration, diff)
        if reasons:
            logger.info("%s produced %d reason(s)", stage.__name__, len(reasons))
            return _decide(reasons)

    matched = classify(diff, registry)
    dominant = pick_dominant(matched, registry)
    required = resolve_required_authority(dominant, registry, declaration.mode)
    logger.info(
        "matched=%s dominant=%s required=%s declared=%s",
        ",".join(matched),
        dominant,
        required.value,
        declared.value,
    )

    reasons = authority_violations(required, declared)
    if declaration.mode == "normal":
        reasons.extend(normal_mode_violations(declaration, dominant))
    else:
        reasons.extend(
            bootstrap_mode_violations(declaration, dominant, diff, lock_exists=lock_exists)
        )
    return _decide(reasons, dominant=dominant, required=required)
