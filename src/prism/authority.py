"""Authority levels and their total order."""

from __future__ import annotations

from enum import Enum


class Authority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return AUTHORITY_ORDER.index(self)


# Declaration order is the ordering; do not reorder.
AUTHORITY_ORDER: tuple[Authority, ...] = (
    Authority.LOW,
    Authority.MEDIUM,
    Authority.HIGH,
    Authority.CRITICAL,
)

AUTHORITY_NAMES: frozenset[str] = frozenset(level.value for level in AUTHORITY_ORDER)

BOOTSTRAP_FLOOR = Authority.HIGH
FALLBACK_REQUIRED = Authority.MEDIUM


def parse_authority(value: object) -> Authority | None:
    if isinstance(value, Authority):
        return value
    if not isinstance(value, str):
        return None
    lowered = value.lower()
    if lowered not in AUTHORITY_NAMES:
        return None
    return Authority(lowered)


def exceeds(required: Authority, declared: Authority) -> bool:
    """True when ``required`` is strictly above ``declared``."""
    return required.rank > declared.rank


def max_authority(left: Authority, right: Authority) -> Authority:
    return right if right.rank > left.rank else left
