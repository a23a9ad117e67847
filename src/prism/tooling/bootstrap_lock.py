"""Genesis lock marker.

The engine only ever sees ``lock_check(path)``, a read-only existence probe.
Sealing is a separate step run after a passing bootstrap decision has been
recorded.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Callable

from prism.exceptions import LockSealError
from prism.runtime import json_io

logger = logging.getLogger(__name__)


def lock_check(path: Path) -> Callable[[], bool]:
    def _exists() -> bool:
        return path.exists()

    return _exists


def seal_payload(decision_text: str, record: dict[str, object]) -> dict[str, object]:
    return {
        "sealed_by": "bootstrap",
        "dominant_action_class": record.get("dominant_action_class"),
        "declared_authority": record.get("declared_authority"),
        "decision_sha256": hashlib.sha256(decision_text.encode("utf-8")).hexdigest(),
    }


def seal_bootstrap_lock(lock_path: Path, decision_path: Path) -> dict[str, object]:
    if lock_path.exists():
        raise LockSealError(f"bootstrap lock already sealed: {lock_path}")
    try:
        decision_text = decision_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise LockSealError(f"decision record unreadable: {decision_path}: {exc}") from exc
    record = json_io.load_json_object_path(decision_path)
    if record.get("mode") != "bootstrap":
        raise LockSealError("only a bootstrap decision can seal the lock")
    if record.get("decision") != "pass":
        raise LockSealError("refusing to seal the lock for a failing decision")
    payload = seal_payload(decision_text, record)
    json_io.write_text_artifact(lock_path, json_io.dump_json_record(payload))
    logger.info("sealed bootstrap lock at %s", lock_path)
    return payload
