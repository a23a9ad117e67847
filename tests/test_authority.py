from __future__ import annotations

import pytest

from prism.authority import (
    AUTHORITY_ORDER,
    Authority,
    exceeds,
    max_authority,
    parse_authority,
)


def test_authority_order_is_total_and_ascending() -> None:
    assert [level.value for level in AUTHORITY_ORDER] == ["low", "medium", "high", "critical"]
    assert [level.rank for level in AUTHORITY_ORDER] == [0, 1, 2, 3]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("low", Authority.LOW),
        ("HIGH", Authority.HIGH),
        ("Critical", Authority.CRITICAL),
        (Authority.MEDIUM, Authority.MEDIUM),
        (" high", None),
        ("admin", None),
        (3, None),
        (None, None),
    ],
)
def test_parse_authority_is_case_insensitive_and_strict(raw: object, expected: Authority | None) -> None:
    assert parse_authority(raw) is expected


def test_exceeds_is_strict() -> None:
    assert exceeds(Authority.HIGH, Authority.MEDIUM)
    assert not exceeds(Authority.MEDIUM, Authority.MEDIUM)
    assert not exceeds(Authority.LOW, Authority.CRITICAL)


def test_max_authority_keeps_left_on_tie() -> None:
    assert max_authority(Authority.MEDIUM, Authority.HIGH) is Authority.HIGH
    assert max_authority(Authority.CRITICAL, Authority.HIGH) is Authority.CRITICAL
    assert max_authority(Authority.LOW, Authority.LOW) is Authority.LOW
