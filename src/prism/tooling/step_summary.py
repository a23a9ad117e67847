"""Host-facing rendering of a Decision: markdown summary and workflow commands."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

from prism.decision import Decision
from prism.diff_summary import SNAPSHOT_FIELDS
from prism.runtime.env_policy import STEP_SUMMARY_ENV, env_text

_NOT_AVAILABLE = "n/a"


def _cell(value: object) -> str:
    if value is None:
        return _NOT_AVAILABLE
    return str(value).replace("|", "\\|")


def render_markdown(decision: Decision) -> str:
    required = decision.required_authority.value if decision.required_authority else None
    lines = [
        "## Boundary Interpretation",
        "",
        "Declared authority interpreted against the observed change-set.",
        "",
        "| Field | Value |",
        "| --- | --- |",
        f"| mode | {_cell(decision.mode)} |",
        f"| decision | {_cell(decision.verdict)} |",
        f"| dominant_action_class | {_cell(decision.dominant_action_class)} |",
        f"| required_authority | {_cell(required)} |",
        f"| declared_authority | {_cell(decision.declared_authority)} |",
        "",
    ]
    if decision.diff_summary is not None:
        snapshot = decision.diff_summary.snapshot()
        lines.extend(["### Diff summary", "", "| Metric | Count |", "| --- | --- |"])
        lines.extend(f"| {field} | {snapshot[field]} |" for field in SNAPSHOT_FIELDS)
        lines.append("")
    if decision.reasons:
        lines.extend(["### Reasons", ""])
        lines.extend(f"- `{reason}`" for reason in decision.reasons)
    else:
        lines.append("No violations. Declared authority covers the observed change-set.")
    return "\n".join(lines) + "\n"


def annotation_lines(decision: Decision) -> list[str]:
    required = decision.required_authority.value if decision.required_authority else None
    lines = [
        f"::notice::Boundary decision: {decision.verdict}",
        f"::notice::Dominant action class: {decision.dominant_action_class or _NOT_AVAILABLE}",
        "::notice::Authority: "
        f"required={required or _NOT_AVAILABLE} "
        f"declared={decision.declared_authority or _NOT_AVAILABLE}",
    ]
    lines.extend(f"::error::{reason}" for reason in decision.reasons)
    return lines


def append_step_summary(
    markdown: str,
    *,
    environ: Mapping[str, str] | None = None,
) -> Path | None:
    target = env_text(STEP_SUMMARY_ENV, environ=environ)
    if not target:
        return None
    path = Path(target)
    with path.open("a", encoding="utf-8") as handle:
        handle.write(markdown)
    return path
