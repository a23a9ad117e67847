#!/usr/bin/env python3
"""Mutation-boundary gate.

Checks an ``INTENT.json`` (scope prefixes, mutation class, file limit and
explicit permissions for deletions, renames and moves) against the observed
change records. Violations are always reported; only rules named in
``fail_on`` fail the run.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
import subprocess
from typing import Callable, Iterable, Mapping, Sequence

from pydantic import ValidationError

from prism.config import resolve_gate_settings
from prism.diff_summary import ChangeRecord, RunCommand, compute_diff_summary
from prism.exceptions import PrismError
from prism.runtime import json_io
from prism.schema import MutationIntentDTO

MUTATION_RULES: tuple[str, ...] = ("file_count", "scope", "deletions", "renames", "moves")
DEFAULT_FAIL_ON: tuple[str, ...] = ("scope", "file_count", "deletions")

EXIT_PASS = 0
EXIT_FAIL = 1
EXIT_INVALID = 2

PrintFn = Callable[[str], None]


@dataclass(frozen=True)
class MutationIntent:
    agent: str | None
    scope: tuple[str, ...]
    mutation_class: str
    max_files: int
    allow_deletions: bool = False
    allow_renames: bool = False
    allow_moves: bool = False

    @classmethod
    def from_dto(cls, dto: MutationIntentDTO) -> "MutationIntent":
        return cls(
            agent=dto.agent,
            scope=tuple(dto.scope),
            mutation_class=dto.mutation_class,
            max_files=dto.max_files,
            allow_deletions=dto.allow_deletions is True,
            allow_renames=dto.allow_renames is True,
            allow_moves=dto.allow_moves is True,
        )


@dataclass(frozen=True)
class Violation:
    rule: str
    message: str
    items: tuple[str, ...] = ()


class IntentSchemaError(PrismError):
    pass


def parse_fail_on(value: str | Iterable[str] | None) -> frozenset[str]:
    if value is None:
        return frozenset(DEFAULT_FAIL_ON)
    parts = value.split(",") if isinstance(value, str) else list(value)
    selected = frozenset(part.strip() for part in parts if part.strip())
    return selected or frozenset(DEFAULT_FAIL_ON)


def parse_intent(raw: object) -> MutationIntent:
    try:
        dto = MutationIntentDTO.model_validate(raw)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}"
            for error in exc.errors()
        )
        raise IntentSchemaError(f"invalid intent schema: {problems}") from exc
    return MutationIntent.from_dto(dto)


def in_scope(prefixes: Sequence[str], path: str) -> bool:
    return any(path.startswith(prefix) for prefix in prefixes)


def dir_prefix(path: str) -> str:
    head, sep, _name = path.rpartition("/")
    return f"{head}/" if sep else ""


def format_change(record: ChangeRecord) -> str:
    if record.status == "renamed" and record.previous_path:
        return f"{record.previous_path} -> {record.path}"
    return record.path


def _out_of_scope(intent: MutationIntent, record: ChangeRecord) -> bool:
    if record.status == "renamed" and record.previous_path:
        return not in_scope(intent.scope, record.path) or not in_scope(
            intent.scope, record.previous_path
        )
    return not in_scope(intent.scope, record.path)


def mutation_violations(
    intent: MutationIntent,
    records: Sequence[ChangeRecord],
) -> list[Violation]:
    violations: list[Violation] = []

    if len(records) > intent.max_files:
        violations.append(
            Violation(
                rule="file_count",
                message=f"File count exceeded: {len(records)} > {intent.max_files}",
            )
        )

    outside = [record for record in records if _out_of_scope(intent, record)]
    if outside:
        violations.append(
            Violation(
                rule="scope",
                message="Out-of-scope mutation detected.",
                items=tuple(format_change(record) for record in outside),
            )
        )

    deletions = [record for record in records if record.status == "deleted"]
    if deletions and not intent.allow_deletions:
        violations.append(
            Violation(
                rule="deletions",
                message="Deletions detected but not declared.",
                items=tuple(record.path for record in deletions),
            )
        )

    renames = [
        record
        for record in records
        if record.status == "renamed" and record.previous_path
    ]
    rename_class = intent.mutation_class == "rename"
    if renames and not (intent.allow_renames or rename_class):
        violations.append(
            Violation(
                rule="renames",
                message="Renames detected but not declared.",
                items=tuple(format_change(record) for record in renames),
            )
        )

    moves = [
        record
        for record in renames
        if dir_prefix(record.previous_path or "") != dir_prefix(record.path)
    ]
    if moves and not (intent.allow_moves or rename_class):
        violations.append(
            Violation(
                rule="moves",
                message="Moves detected but not declared.",
                items=tuple(format_change(record) for record in moves),
            )
        )
    return violations


def render_report(
    intent: MutationIntent,
    records: Sequence[ChangeRecord],
    violations: Sequence[Violation],
) -> str:
    lines = [
        "## Execution Boundary Interpretation",
        "",
        "Declared intent interpreted against actual PR mutations.",
        "",
        "### Declared Intent",
        "",
        "| Field | Value |",
        "| --- | --- |",
        f"| agent | {intent.agent or 'unknown'} |",
        f"| scope | {', '.join(intent.scope)} |",
        f"| mutation_class | {intent.mutation_class} |",
        f"| max_files | {intent.max_files} |",
        f"| allow_deletions | {str(intent.allow_deletions).lower()} |",
        f"| allow_renames | {str(intent.allow_renames).lower()} |",
        f"| allow_moves | {str(intent.allow_moves).lower()} |",
        "",
        "### Observed Mutations",
        "",
        f"Changed files: {len(records)}",
        "",
    ]
    lines.extend(f"- [{record.status}] {format_change(record)}" for record in records)
    lines.extend(["", "### Boundary Interpretation", ""])
    if not violations:
        lines.append("No violations. Declared intent matches observed mutations.")
        return "\n".join(lines) + "\n"
    for violation in violations:
        lines.extend([f"#### Violation: {violation.rule}", "", violation.message, ""])
        lines.extend(f"- {item}" for item in violation.items)
        if violation.items:
            lines.append("")
    return "\n".join(lines).rstrip("\n") + "\n"


def failing_violations(
    violations: Iterable[Violation],
    fail_on: frozenset[str],
) -> list[Violation]:
    return [violation for violation in violations if violation.rule in fail_on]


def check_mutation_gate(
    intent_path: Path,
    *,
    records_provider: Callable[[], Sequence[ChangeRecord]],
    fail_on: frozenset[str] = frozenset(DEFAULT_FAIL_ON),
    print_fn: PrintFn = print,
    report_path: Path | None = None,
) -> int:
    if not intent_path.exists():
        print_fn(f"Intent file not found at {intent_path}.")
        return EXIT_INVALID
    try:
        intent = parse_intent(json_io.load_json_document(intent_path))
        records = list(records_provider())
    except (PrismError, OSError) as exc:
        print_fn(f"Mutation gate error; gate failed: {exc}")
        return EXIT_INVALID

    violations = mutation_violations(intent, records)
    report = render_report(intent, records, violations)
    if report_path is not None:
        with report_path.open("a", encoding="utf-8") as handle:
            handle.write(report)
    failing = failing_violations(violations, fail_on)
    for violation in violations:
        marker = "FAIL" if violation in failing else "WARN"
        print_fn(f"[{violation.rule}] {marker}: {violation.message}")
        for item in violation.items:
            print_fn(f"  - {item}")
    if failing:
        return EXIT_FAIL
    print_fn(f"Mutation gate OK ({len(records)} changed files).")
    return EXIT_PASS


def git_records_provider(
    root: Path,
    *,
    base_ref: str,
    remote: str,
    fetch_depth: int,
    run: RunCommand = subprocess.run,
) -> Callable[[], Sequence[ChangeRecord]]:
    def _records() -> Sequence[ChangeRecord]:
        summary = compute_diff_summary(
            root,
            base_ref=base_ref,
            remote=remote,
            fetch_depth=fetch_depth,
            run=run,
        )
        return summary.changed_paths

    return _records


def main(
    argv: list[str] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> int:
    parser = argparse.ArgumentParser(description="Check PR mutations against INTENT.json.")
    parser.add_argument("--root", default=".")
    parser.add_argument("--intent-path", default="INTENT.json")
    parser.add_argument("--fail-on", default=",".join(DEFAULT_FAIL_ON))
    parser.add_argument("--base-ref")
    parser.add_argument("--remote")
    args = parser.parse_args(argv)

    root = Path(args.root).resolve()
    settings = resolve_gate_settings(
        {"base_ref": args.base_ref, "remote": args.remote},
        root=root,
        environ=environ,
    )
    return check_mutation_gate(
        root / args.intent_path,
        records_provider=git_records_provider(
            root,
            base_ref=settings.base_ref,
            remote=settings.remote,
            fetch_depth=settings.fetch_depth,
        ),
        fail_on=parse_fail_on(args.fail_on),
    )
