from __future__ import annotations

from pathlib import Path

from prism.authority import Authority
from prism.decision import Decision
from prism.tooling import step_summary
from tests.diff_helpers import make_diff


def _failed() -> Decision:
    return Decision(
        mode="normal",
        dominant_action_class="workflow_change",
        required_authority=Authority.HIGH,
        declared_authority="medium",
        verdict="fail",
        reasons=(
            "authority_exceeded:required=high,declared=medium",
            "action_class_not_allowed:workflow_change",
        ),
        diff_summary=make_diff(("modified", ".github/workflows/ci.yml")),
    )


def _invalid() -> Decision:
    return Decision(
        mode=None,
        dominant_action_class=None,
        required_authority=None,
        declared_authority=None,
        verdict="fail",
        reasons=("invalid:mode",),
        diff_summary=None,
    )


def test_markdown_lists_fields_metrics_and_reasons() -> None:
    markdown = step_summary.render_markdown(_failed())
    assert markdown.startswith("## Boundary Interpretation\n")
    assert "| required_authority | high |" in markdown
    assert "| files_modified | 1 |" in markdown
    assert "- `authority_exceeded:required=high,declared=medium`" in markdown


def test_markdown_without_diff_omits_metrics() -> None:
    markdown = step_summary.render_markdown(_invalid())
    assert "### Diff summary" not in markdown
    assert "| mode | n/a |" in markdown


def test_annotation_lines() -> None:
    assert step_summary.annotation_lines(_failed()) == [
        "::notice::Boundary decision: fail",
        "::notice::Dominant action class: workflow_change",
        "::notice::Authority: required=high declared=medium",
        "::error::authority_exceeded:required=high,declared=medium",
        "::error::action_class_not_allowed:workflow_change",
    ]
    assert step_summary.annotation_lines(_invalid())[1:3] == [
        "::notice::Dominant action class: n/a",
        "::notice::Authority: required=n/a declared=n/a",
    ]


def test_step_summary_appends_when_configured(tmp_path: Path) -> None:
    summary = tmp_path / "summary.md"
    summary.write_text("# earlier step\n", encoding="utf-8")
    environ = {"GITHUB_STEP_SUMMARY": str(summary)}
    assert step_summary.append_step_summary("first\n", environ=environ) == summary
    step_summary.append_step_summary("second\n", environ=environ)
    assert summary.read_text(encoding="utf-8") == "# earlier step\nfirst\nsecond\n"


def test_step_summary_is_skipped_without_target() -> None:
    assert step_summary.append_step_summary("ignored\n", environ={}) is None
