from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
import subprocess
from typing import Callable, Iterable, Literal

from prism.exceptions import GitCommandError

logger = logging.getLogger(__name__)

ChangeStatus = Literal["added", "modified", "deleted", "renamed"]
ComparisonKind = Literal["merge_base", "fallback"]
RunCommand = Callable[..., subprocess.CompletedProcess[str]]

DEFAULT_BASE_REF = "main"
DEFAULT_REMOTE = "origin"
DEFAULT_FETCH_DEPTH = 200

SNAPSHOT_FIELDS: tuple[str, ...] = (
    "files_added",
    "files_modified",
    "files_deleted",
    "total_loc_added",
    "total_loc_deleted",
    "new_top_level_dirs",
)


@dataclass(frozen=True)
class ChangeRecord:
    path: str
    status: ChangeStatus
    previous_path: str | None = None


@dataclass(frozen=True)
class LineTotals:
    added: int = 0
    deleted: int = 0


@dataclass(frozen=True)
class ComparisonPoint:
    """Where the change-set is compared from.

    ``merge_base`` carries a resolved commit; ``fallback`` carries the
    symbolic remote ref used when history traversal could not resolve one.
    """

    kind: ComparisonKind
    ref: str
    detail: str = ""

    @property
    def degraded(self) -> bool:
        return self.kind == "fallback"


@dataclass(frozen=True)
class DiffSummary:
    changed_paths: tuple[ChangeRecord, ...]
    files_added: int
    files_modified: int
    files_deleted: int
    total_loc_added: int
    total_loc_deleted: int
    new_top_level_dirs: int
    comparison: ComparisonPoint | None = None

    @property
    def paths(self) -> tuple[str, ...]:
        return tuple(record.path for record in self.changed_paths)

    def snapshot(self) -> dict[str, int]:
        return {field: int(getattr(self, field)) for field in SNAPSHOT_FIELDS}


def _status_for(code: str) -> ChangeStatus:
    if code == "A":
        return "added"
    if code == "D":
        return "deleted"
    return "modified"


def parse_name_status(text: str) -> list[ChangeRecord]:
    """Parse ``git diff --name-status -z`` output.

    Fields are NUL-terminated and unquoted. Rename and copy records carry two
    paths (source, destination); every other record carries one.
    """
    records: list[ChangeRecord] = []
    fields = iter(text.split("\0"))
    for raw_code in fields:
        code = raw_code.strip()
        if not code:
            continue
        if code[0] in ("R", "C"):
            previous = next(fields, "")
            path = next(fields, "")
            if not path:
                continue
            if code[0] == "R":
                records.append(ChangeRecord(path=path, status="renamed", previous_path=previous))
            else:
                records.append(ChangeRecord(path=path, status="added"))
            continue
        path = next(fields, "")
        if path:
            records.append(ChangeRecord(path=path, status=_status_for(code)))
    return records


def _line_count(raw: str) -> int:
    value = raw.strip()
    if value.isdigit():
        return int(value)
    if value:
        logger.debug("non-numeric numstat column %r counted as 0", value)
    return 0


def parse_numstat(text: str) -> LineTotals:
    """Sum ``git diff --numstat -z`` rows.

    A rename row leaves its path column empty and is followed by the source
    and destination paths as separate fields.
    """
    added = 0
    deleted = 0
    fields = iter(text.split("\0"))
    for field in fields:
        columns = field.split("\t", 2)
        if len(columns) < 3:
            continue
        added += _line_count(columns[0])
        deleted += _line_count(columns[1])
        if not columns[2]:
            next(fields, None)
            next(fields, None)
    return LineTotals(added=added, deleted=deleted)


def _top_level_segment(path: str) -> str | None:
    head = path.partition("/")[0]
    return head or None


def count_new_top_level_dirs(records: Iterable[ChangeRecord]) -> int:
    added_segments: set[str] = set()
    existing_segments: set[str] = set()
    for record in records:
        top = _top_level_segment(record.path)
        if top is None:
            continue
        if record.status == "added":
            added_segments.add(top)
        else:
            existing_segments.add(top)
    return len(added_segments - existing_segments)


def summarize_changes(
    records: Iterable[ChangeRecord],
    totals: LineTotals,
    *,
    comparison: ComparisonPoint | None = None,
) -> DiffSummary:
    ordered = tuple(records)
    files_added = sum(1 for record in ordered if record.status == "added")
    files_deleted = sum(1 for record in ordered if record.status == "deleted")
    # Renames count as modifications, never as add + delete.
    files_modified = len(ordered) - files_added - files_deleted
    return DiffSummary(
        changed_paths=ordered,
        files_added=files_added,
        files_modified=files_modified,
        files_deleted=files_deleted,
        total_loc_added=totals.added,
        total_loc_deleted=totals.deleted,
        new_top_level_dirs=count_new_top_level_dirs(ordered),
        comparison=comparison,
    )


def _git(
    root: Path,
    args: list[str],
    *,
    run: RunCommand,
) -> subprocess.CompletedProcess[str]:
    return run(
        ["git", "-c", "core.quotepath=off", *args],
        cwd=root,
        check=False,
        capture_output=True,
        text=True,
    )


def _required_git(root: Path, args: list[str], *, run: RunCommand) -> str:
    proc = _git(root, args, run=run)
    if proc.returncode != 0:
        message = proc.stderr.strip() or proc.stdout.strip() or "git command failed"
        raise GitCommandError(["git", *args], message)
    return proc.stdout


def fetch_base(
    root: Path,
    *,
    base_ref: str,
    remote: str = DEFAULT_REMOTE,
    depth: int = DEFAULT_FETCH_DEPTH,
    run: RunCommand = subprocess.run,
) -> bool:
    proc = _git(
        root,
        ["fetch", "--no-tags", "--prune", f"--depth={depth}", remote, base_ref],
        run=run,
    )
    if proc.returncode != 0:
        logger.warning(
            "fetch of %s/%s failed (rc=%s); comparing against local history",
            remote,
            base_ref,
            proc.returncode,
        )
        return False
    return True


def resolve_comparison_point(
    root: Path,
    *,
    base_ref: str,
    remote: str = DEFAULT_REMOTE,
    run: RunCommand = subprocess.run,
) -> ComparisonPoint:
    remote_ref = f"{remote}/{base_ref}" if remote else base_ref
    proc = _git(root, ["merge-base", "HEAD", remote_ref], run=run)
    merge_base = proc.stdout.strip() if proc.returncode == 0 else ""
    if merge_base:
        return ComparisonPoint(kind="merge_base", ref=merge_base)
    detail = proc.stderr.strip() or "merge-base unavailable"
    logger.warning("merge-base with %s unresolved; falling back to the ref itself", remote_ref)
    return ComparisonPoint(kind="fallback", ref=remote_ref, detail=detail)


def compute_diff_summary(
    root: Path,
    *,
    base_ref: str = DEFAULT_BASE_REF,
    remote: str = DEFAULT_REMOTE,
    fetch_depth: int = DEFAULT_FETCH_DEPTH,
    run: RunCommand = subprocess.run,
) -> DiffSummary:
    if remote:
        fetch_base(root, base_ref=base_ref, remote=remote, depth=fetch_depth, run=run)
    comparison = resolve_comparison_point(root, base_ref=base_ref, remote=remote, run=run)
    diff_range = f"{comparison.ref}...HEAD"
    name_status = _required_git(root, ["diff", "--name-status", "-z", "-M", diff_range], run=run)
    numstat = _required_git(root, ["diff", "--numstat", "-z", "-M", diff_range], run=run)
    summary = summarize_changes(
        parse_name_status(name_status),
        parse_numstat(numstat),
        comparison=comparison,
    )
    logger.info(
        "diff against %s (%s): %d paths",
        comparison.ref,
        comparison.kind,
        len(summary.changed_paths),
    )
    return summary
