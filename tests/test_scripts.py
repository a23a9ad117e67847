from __future__ import annotations

import json
from pathlib import Path

from scripts import boundary_gate, mutation_gate
from tests.git_helpers import commit_all, write_file


def test_boundary_gate_script_main(git_repo: Path) -> None:
    write_file(git_repo, "tests/test_api.py", "def test_api():\n    pass\n")
    commit_all(git_repo)
    (git_repo / "INTENT.json").write_text(
        json.dumps({"mode": "normal", "intent": "Cover the API", "declared_authority": "low"}),
        encoding="utf-8",
    )
    write_file(
        git_repo,
        ".prism/surface_registry.yaml",
        "action_classes:\n  test_change:\n    match:\n      any_paths: ['tests/**']\n    min_authority: low\n",
    )

    assert boundary_gate.main(["--root", str(git_repo)], environ={}) == 0
    record = json.loads((git_repo / "meaning.json").read_text(encoding="utf-8"))
    assert record["required_authority"] == "low"


def test_mutation_gate_script_main(git_repo: Path) -> None:
    write_file(git_repo, "src/app.py", "print('b')\n")
    commit_all(git_repo)
    (git_repo / "INTENT.json").write_text(
        json.dumps({"scope": ["src/"], "mutation_class": "patch", "max_files": 1}),
        encoding="utf-8",
    )

    assert mutation_gate.main(["--root", str(git_repo)], environ={}) == 0
