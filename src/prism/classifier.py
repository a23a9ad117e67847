"""Classify a diff summary into action classes and pick the dominant one."""

from __future__ import annotations

from typing import Sequence

from prism.authority import exceeds
from prism.diff_summary import DiffSummary
from prism.path_match import matches_any_extension, matches_any_path
from prism.registry import ActionClassRule, ActionSurfaceRegistry, Heuristics

FALLBACK_ACTION_CLASS = "code_change"


def _heuristics_hold(heuristics: Heuristics, diff: DiffSummary) -> bool:
    if heuristics.files_added_gte is not None and diff.files_added < heuristics.files_added_gte:
        return False
    if (
        heuristics.total_loc_added_gte is not None
        and diff.total_loc_added < heuristics.total_loc_added_gte
    ):
        return False
    if (
        heuristics.new_top_level_dirs_gte is not None
        and diff.new_top_level_dirs < heuristics.new_top_level_dirs_gte
    ):
        return False
    return True


def rule_matches(rule: ActionClassRule, diff: DiffSummary) -> bool:
    """Path and extension globs match existentially over changed paths.

    Heuristic thresholds are summary-level and must all hold at once.
    """
    match = rule.match
    if match.any_paths is not None:
        if any(matches_any_path(path, match.any_paths) for path in diff.paths):
            return True
    if match.any_extensions is not None:
        if any(matches_any_extension(path, match.any_extensions) for path in diff.paths):
            return True
    if match.heuristics is not None:
        return _heuristics_hold(match.heuristics, diff)
    return False


def classify(diff: DiffSummary, registry: ActionSurfaceRegistry) -> tuple[str, ...]:
    matched = tuple(rule.identifier for rule in registry if rule_matches(rule, diff))
    return matched or (FALLBACK_ACTION_CLASS,)


def pick_dominant(matched: Sequence[str], registry: ActionSurfaceRegistry) -> str:
    """Highest ``min_authority`` wins; ties keep the earliest match."""
    if not matched:
        return FALLBACK_ACTION_CLASS
    dominant = matched[0]
    for identifier in matched[1:]:
        candidate = registry.get(identifier)
        current = registry.get(dominant)
        if candidate is None or current is None:
            continue
        if exceeds(candidate.min_authority, current.min_authority):
            dominant = identifier
    return dominant
