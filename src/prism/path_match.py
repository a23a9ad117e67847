"""Anchored glob and extension matching over forward-slash paths.

``**`` spans path separators, ``*`` and ``?`` do not. Everything else in a
glob is literal. Matching is against the whole path.
"""

from __future__ import annotations

from functools import lru_cache
import re
from typing import Iterable


def normalize_slashes(path: object) -> str:
    return str(path or "").replace("\\", "/")


@lru_cache(maxsize=512)
def glob_to_regex(glob: str) -> re.Pattern[str]:
    pattern = normalize_slashes(glob)
    parts: list[str] = []
    index = 0
    while index < len(pattern):
        char = pattern[index]
        if pattern.startswith("**", index):
            parts.append(".*")
            index += 2
            continue
        if char == "*":
            parts.append("[^/]*")
        elif char == "?":
            parts.append("[^/]")
        else:
            parts.append(re.escape(char))
        index += 1
    return re.compile("^" + "".join(parts) + "$", re.DOTALL)


def matches_any_path(path: str, globs: Iterable[str] | None) -> bool:
    if not globs:
        return False
    normalized = normalize_slashes(path)
    return any(glob_to_regex(str(glob)).match(normalized) is not None for glob in globs)


def extension_of(path: str) -> str:
    text = str(path or "")
    index = text.rfind(".")
    return text[index:].lower() if index >= 0 else ""


def matches_any_extension(path: str, extensions: Iterable[str] | None) -> bool:
    if not extensions:
        return False
    extension = extension_of(path)
    return extension in {str(item).lower() for item in extensions}
