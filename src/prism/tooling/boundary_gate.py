#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging
from pathlib import Path
import subprocess
from typing import Callable, Mapping

from prism.config import GateSettings, resolve_gate_settings
from prism.decision import Decision, write_decision
from prism.diff_summary import RunCommand, compute_diff_summary
from prism.engine import LockCheck, evaluate
from prism.exceptions import PrismError
from prism.registry import load_registry
from prism.runtime import json_io
from prism.runtime.env_policy import github_annotations_enabled
from prism.tooling import bootstrap_lock, step_summary

logger = logging.getLogger(__name__)

EXIT_PASS = 0
EXIT_FAIL = 1
EXIT_INTERNAL_ERROR = 2

PrintFn = Callable[[str], None]


def run_gate(
    settings: GateSettings,
    *,
    root: Path,
    run: RunCommand = subprocess.run,
    lock_exists: LockCheck | None = None,
) -> Decision:
    raw_declaration = json_io.load_json_document(settings.intent_path)
    registry = load_registry(settings.registry_path)

    def _diff():
        return compute_diff_summary(
            root,
            base_ref=settings.base_ref,
            remote=settings.remote,
            fetch_depth=settings.fetch_depth,
            run=run,
        )

    decision = evaluate(
        raw_declaration,
        registry=registry,
        diff_provider=_diff,
        lock_exists=lock_exists or bootstrap_lock.lock_check(settings.bootstrap_lock_path),
    )
    write_decision(settings.meaning_out_path, decision)
    logger.info("wrote %s", settings.meaning_out_path)
    return decision


def report_decision(
    decision: Decision,
    *,
    print_fn: PrintFn = print,
    environ: Mapping[str, str] | None = None,
) -> None:
    if github_annotations_enabled(environ=environ):
        for line in step_summary.annotation_lines(decision):
            print_fn(line)
    step_summary.append_step_summary(
        step_summary.render_markdown(decision),
        environ=environ,
    )
    if decision.passed:
        print_fn(
            "Boundary gate passed "
            f"(dominant={decision.dominant_action_class}, "
            f"required={decision.required_authority.value if decision.required_authority else 'n/a'}, "
            f"declared={decision.declared_authority})."
        )
        return
    print_fn(f"Boundary gate failed: {'; '.join(decision.reasons)}")


def check_gate(
    settings: GateSettings,
    *,
    root: Path,
    run: RunCommand = subprocess.run,
    lock_exists: LockCheck | None = None,
    print_fn: PrintFn = print,
    environ: Mapping[str, str] | None = None,
) -> int:
    try:
        decision = run_gate(settings, root=root, run=run, lock_exists=lock_exists)
        report_decision(decision, print_fn=print_fn, environ=environ)
    except (PrismError, OSError) as exc:
        print_fn(f"Boundary gate error; gate failed: {exc}")
        return EXIT_INTERNAL_ERROR
    return EXIT_PASS if decision.passed else EXIT_FAIL


def main(
    argv: list[str] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> int:
    parser = argparse.ArgumentParser(description="Check a change-set against its declared authority.")
    parser.add_argument("--root", default=".")
    parser.add_argument("--intent-path")
    parser.add_argument("--registry-path")
    parser.add_argument("--bootstrap-lock-path")
    parser.add_argument("--meaning-out-path")
    parser.add_argument("--base-ref")
    parser.add_argument("--remote")
    parser.add_argument("--fetch-depth", type=int)
    args = parser.parse_args(argv)

    root = Path(args.root).resolve()
    settings = resolve_gate_settings(
        {
            "intent_path": args.intent_path,
            "registry_path": args.registry_path,
            "bootstrap_lock_path": args.bootstrap_lock_path,
            "meaning_out_path": args.meaning_out_path,
            "base_ref": args.base_ref,
            "remote": args.remote,
            "fetch_depth": args.fetch_depth,
        },
        root=root,
        environ=environ,
    ).under(root)
    return check_gate(settings, root=root, environ=environ)
