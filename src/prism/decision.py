"""Decision record: the engine's single output."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from prism.authority import Authority
from prism.diff_summary import DiffSummary
from prism.runtime import json_io
from prism.schema import DecisionRecordDTO, DiffSummaryDTO

Verdict = Literal["pass", "fail"]


@dataclass(frozen=True)
class Decision:
    mode: str | None
    dominant_action_class: str | None
    required_authority: Authority | None
    declared_authority: str | None
    verdict: Verdict
    reasons: tuple[str, ...]
    diff_summary: DiffSummary | None

    @property
    def passed(self) -> bool:
        return self.verdict == "pass"

    def to_dto(self) -> DecisionRecordDTO:
        return DecisionRecordDTO(
            mode=self.mode,
            dominant_action_class=self.dominant_action_class,
            required_authority=(
                self.required_authority.value if self.required_authority is not None else None
            ),
            declared_authority=self.declared_authority,
            decision=self.verdict,
            reasons=list(self.reasons),
            diff_summary=(
                DiffSummaryDTO(**self.diff_summary.snapshot())
                if self.diff_summary is not None
                else None
            ),
        )

    def to_payload(self) -> dict[str, object]:
        return self.to_dto().model_dump(mode="json")


def render_decision_json(decision: Decision) -> str:
    return json_io.dump_json_record(decision.to_payload())


def write_decision(path: Path, decision: Decision) -> str:
    text = render_decision_json(decision)
    json_io.write_text_artifact(path, text)
    return text
