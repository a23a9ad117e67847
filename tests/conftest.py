from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
for candidate in (ROOT, ROOT / "src"):
    if str(candidate) not in sys.path:
        sys.path.insert(0, str(candidate))


import pytest

from prism.registry import ActionSurfaceRegistry, registry_from_mapping
from tests.git_helpers import init_repo


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    return init_repo(tmp_path / "repo")


@pytest.fixture
def registry() -> ActionSurfaceRegistry:
    return registry_from_mapping(
        {
            "action_classes": {
                "new_codebase": {
                    "match": {"heuristics": {"files_added_gte": 100, "new_top_level_dirs_gte": 2}},
                    "min_authority": "high",
                },
                "workflow_change": {
                    "match": {"any_paths": [".github/workflows/**"]},
                    "min_authority": "high",
                },
                "dependency_change": {
                    "match": {"any_paths": ["pyproject.toml", "**/requirements*.txt"]},
                    "min_authority": "medium",
                },
                "test_change": {
                    "match": {"any_paths": ["tests/**"]},
                    "min_authority": "low",
                },
                "docs_change": {
                    "match": {"any_extensions": [".md"]},
                    "min_authority": "low",
                },
            }
        }
    )


@pytest.fixture
def write_registry(tmp_path: Path):
    def _write(text: str, name: str = "surface_registry.yaml") -> Path:
        path = tmp_path / name
        path.write_text(text.strip() + "\n", encoding="utf-8")
        return path

    return _write
