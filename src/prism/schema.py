from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr


class DiffSummaryDTO(BaseModel):
    files_added: int
    files_modified: int
    files_deleted: int
    total_loc_added: int
    total_loc_deleted: int
    new_top_level_dirs: int


class DecisionRecordDTO(BaseModel):
    mode: Optional[str] = None
    dominant_action_class: Optional[str] = None
    required_authority: Optional[str] = None
    declared_authority: Optional[str] = None
    decision: Literal["pass", "fail"]
    reasons: List[str] = []
    diff_summary: Optional[DiffSummaryDTO] = None


class MutationIntentDTO(BaseModel):
    model_config = ConfigDict(extra="allow")

    agent: Optional[StrictStr] = None
    scope: List[StrictStr] = Field(min_length=1)
    mutation_class: Literal["patch", "refactor", "rename", "delete"]
    max_files: StrictInt = Field(ge=1)
    allow_deletions: Optional[StrictBool] = None
    allow_renames: Optional[StrictBool] = None
    allow_moves: Optional[StrictBool] = None
