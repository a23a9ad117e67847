from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from prism.config import resolve_gate_settings
from prism.declaration import validate_declaration
from prism.exceptions import PrismError
from prism.runtime import json_io
from prism.runtime.log_policy import configure_logging
from prism.tooling import boundary_gate, bootstrap_lock, mutation_gate

app = typer.Typer(add_completion=False, help="Authority boundary gates for pull requests.")


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Diagnostic log level on stderr (default: PRISM_LOG_LEVEL or WARNING).",
    ),
) -> None:
    try:
        configure_logging(log_level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level") from exc


@app.command("check")
def check(
    root: Path = typer.Option(Path("."), "--root"),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to prism.toml."),
    intent_path: Optional[Path] = typer.Option(None, "--intent-path"),
    registry_path: Optional[Path] = typer.Option(None, "--registry-path"),
    bootstrap_lock_path: Optional[Path] = typer.Option(None, "--bootstrap-lock-path"),
    meaning_out_path: Optional[Path] = typer.Option(None, "--meaning-out-path"),
    base_ref: Optional[str] = typer.Option(None, "--base-ref"),
    remote: Optional[str] = typer.Option(None, "--remote"),
    fetch_depth: Optional[int] = typer.Option(None, "--fetch-depth", min=1),
) -> None:
    """Evaluate the change-set against the authority declaration."""
    resolved_root = root.resolve()
    settings = resolve_gate_settings(
        {
            "intent_path": intent_path,
            "registry_path": registry_path,
            "bootstrap_lock_path": bootstrap_lock_path,
            "meaning_out_path": meaning_out_path,
            "base_ref": base_ref,
            "remote": remote,
            "fetch_depth": fetch_depth,
        },
        root=resolved_root,
        config_path=config,
    ).under(resolved_root)
    exit_code = boundary_gate.check_gate(settings, root=resolved_root, print_fn=typer.echo)
    raise typer.Exit(code=exit_code)


@app.command("validate-declaration")
def validate_declaration_command(
    path: Path = typer.Argument(Path("INTENT.json")),
) -> None:
    """Run only the structural checks on a declaration document."""
    try:
        raw = json_io.load_json_document(path)
    except PrismError as exc:
        typer.echo(f"Declaration unreadable: {exc}")
        raise typer.Exit(code=boundary_gate.EXIT_INTERNAL_ERROR) from exc
    errors = validate_declaration(raw)
    if not errors:
        typer.echo(f"Declaration OK: {path}")
        return
    for error in errors:
        typer.echo(error)
    raise typer.Exit(code=boundary_gate.EXIT_FAIL)


@app.command("mutation-check")
def mutation_check(
    root: Path = typer.Option(Path("."), "--root"),
    intent_path: Path = typer.Option(Path("INTENT.json"), "--intent-path"),
    fail_on: str = typer.Option(
        ",".join(mutation_gate.DEFAULT_FAIL_ON),
        "--fail-on",
        help="Comma-separated rules that fail the run.",
    ),
    base_ref: Optional[str] = typer.Option(None, "--base-ref"),
    remote: Optional[str] = typer.Option(None, "--remote"),
    report: Optional[Path] = typer.Option(None, "--report", help="Append the markdown report here."),
) -> None:
    """Check PR mutations against an INTENT.json scope declaration."""
    resolved_root = root.resolve()
    settings = resolve_gate_settings(
        {"base_ref": base_ref, "remote": remote},
        root=resolved_root,
    )
    exit_code = mutation_gate.check_mutation_gate(
        resolved_root / intent_path,
        records_provider=mutation_gate.git_records_provider(
            resolved_root,
            base_ref=settings.base_ref,
            remote=settings.remote,
            fetch_depth=settings.fetch_depth,
        ),
        fail_on=mutation_gate.parse_fail_on(fail_on),
        print_fn=typer.echo,
        report_path=report,
    )
    raise typer.Exit(code=exit_code)


@app.command("seal-bootstrap-lock")
def seal_bootstrap_lock(
    lock_path: Path = typer.Option(Path(".prism/bootstrap.lock"), "--lock-path"),
    decision_path: Path = typer.Option(Path("meaning.json"), "--decision-path"),
) -> None:
    """Seal the one-time bootstrap lock after a passing bootstrap decision."""
    try:
        payload = bootstrap_lock.seal_bootstrap_lock(lock_path, decision_path)
    except PrismError as exc:
        typer.echo(f"Bootstrap lock not sealed: {exc}")
        raise typer.Exit(code=boundary_gate.EXIT_FAIL) from exc
    typer.echo(f"Sealed {lock_path} ({payload['decision_sha256']}).")
