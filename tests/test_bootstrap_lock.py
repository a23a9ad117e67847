from __future__ import annotations

import hashlib
import json
from pathlib import Path

import pytest

from prism.exceptions import LockSealError
from prism.tooling.bootstrap_lock import lock_check, seal_bootstrap_lock


def _decision_file(tmp_path: Path, **fields: object) -> Path:
    payload = {
        "mode": "bootstrap",
        "dominant_action_class": "new_codebase",
        "required_authority": "high",
        "declared_authority": "high",
        "decision": "pass",
        "reasons": [],
        "diff_summary": None,
    }
    payload.update(fields)
    path = tmp_path / "meaning.json"
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    return path


def test_seal_writes_lock_once(tmp_path: Path) -> None:
    decision_path = _decision_file(tmp_path)
    lock_path = tmp_path / ".prism" / "bootstrap.lock"
    probe = lock_check(lock_path)
    assert not probe()

    payload = seal_bootstrap_lock(lock_path, decision_path)

    assert probe()
    expected_digest = hashlib.sha256(decision_path.read_bytes()).hexdigest()
    assert payload["decision_sha256"] == expected_digest
    assert json.loads(lock_path.read_text(encoding="utf-8")) == {
        "sealed_by": "bootstrap",
        "dominant_action_class": "new_codebase",
        "declared_authority": "high",
        "decision_sha256": expected_digest,
    }
    with pytest.raises(LockSealError, match="already sealed"):
        seal_bootstrap_lock(lock_path, decision_path)


@pytest.mark.parametrize(
    ("fields", "message"),
    [
        ({"decision": "fail"}, "failing decision"),
        ({"mode": "normal"}, "only a bootstrap decision"),
    ],
)
def test_seal_refuses_non_passing_bootstrap(tmp_path: Path, fields: dict[str, object], message: str) -> None:
    lock_path = tmp_path / "bootstrap.lock"
    with pytest.raises(LockSealError, match=message):
        seal_bootstrap_lock(lock_path, _decision_file(tmp_path, **fields))
    assert not lock_path.exists()


def test_seal_requires_a_decision_record(tmp_path: Path) -> None:
    with pytest.raises(LockSealError, match="unreadable"):
        seal_bootstrap_lock(tmp_path / "bootstrap.lock", tmp_path / "missing.json")
