from __future__ import annotations

import os
from typing import Mapping

_TRUTHY_VALUES = {"1", "true", "yes", "on"}

BASE_REF_ENV = "GITHUB_BASE_REF"
STEP_SUMMARY_ENV = "GITHUB_STEP_SUMMARY"
LOG_LEVEL_ENV = "PRISM_LOG_LEVEL"
ANNOTATIONS_ENV = "PRISM_GITHUB_ANNOTATIONS"


def env_text(name: str, *, default: str = "", environ: Mapping[str, str] | None = None) -> str:
    source = os.environ if environ is None else environ
    return source.get(name, default).strip()


def env_enabled_truthy_only(name: str, *, environ: Mapping[str, str] | None = None) -> bool:
    return env_text(name, environ=environ).lower() in _TRUTHY_VALUES


def github_annotations_enabled(*, environ: Mapping[str, str] | None = None) -> bool:
    explicit = env_text(ANNOTATIONS_ENV, environ=environ)
    if explicit:
        return explicit.lower() in _TRUTHY_VALUES
    return env_enabled_truthy_only("GITHUB_ACTIONS", environ=environ)
