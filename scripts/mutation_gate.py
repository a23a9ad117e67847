#!/usr/bin/env python3
from __future__ import annotations

import sys
from pathlib import Path

_SRC_PATH = Path(__file__).resolve().parents[1] / "src"
if str(_SRC_PATH) not in sys.path:
    sys.path.insert(0, str(_SRC_PATH))

from prism.runtime.log_policy import configure_logging
from prism.tooling.mutation_gate import main


if __name__ == "__main__":
    configure_logging()
    raise SystemExit(main())
