from __future__ import annotations

from prism.diff_summary import ChangeRecord, DiffSummary, LineTotals, summarize_changes


def make_diff(
    *changes: tuple[str, str],
    loc_added: int = 0,
    loc_deleted: int = 0,
) -> DiffSummary:
    records = [ChangeRecord(path=path, status=status) for status, path in changes]  # type: ignore[arg-type]
    return summarize_changes(records, LineTotals(added=loc_added, deleted=loc_deleted))


def added_files(count: int, *, prefix: str = "src/pkg") -> list[tuple[str, str]]:
    return [("added", f"{prefix}/module_{index}.py") for index in range(count)]
