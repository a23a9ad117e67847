from __future__ import annotations

import logging
import sys
from typing import TextIO

from prism.runtime.env_policy import LOG_LEVEL_ENV, env_text

DEFAULT_LOG_LEVEL = "WARNING"
_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
_HANDLER_NAME = "prism-stderr"


def resolve_log_level(explicit: str | None = None) -> int:
    name = (explicit or env_text(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"unknown log level: {name}")
    return level


def configure_logging(level: str | None = None, *, stream: TextIO | None = None) -> None:
    """Install one stderr handler on the ``prism`` logger; stdout stays for gate output."""
    root = logging.getLogger("prism")
    root.setLevel(resolve_log_level(level))
    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root.addHandler(handler)
