"""Tests for identifier splitting, keywords and stemming."""

from __future__ import annotations

import pytest

from codeinsight.features.markers import MARKERS, MARKERS_BY_NAME
from codeinsight.features.text import keywords_of, split_identifier, stem


@pytest.mark.parametrize(
    ("identifier", "expected"),
    [
        ("validateEmail", ["validate", "email"]),
        ("parseHTTPResponse", ["parse", "http", "response"]),
        ("user_id2", ["user", "id"]),
        ("__init__", ["init"]),
    ],
)
def test_split_identifier(identifier: str, expected: list[str]) -> None:
    assert split_identifier(identifier) == expected


def test_stem_maps_related_forms_together() -> None:
    assert stem("validate") == stem("validation") == stem("validator") == stem("validating")
    assert stem("Listeners") == stem("listener")


def test_stem_keeps_short_words() -> None:
    assert stem("is") == "is"
    assert stem("api") == "api"


def test_keywords_drop_stop_words_and_short_words() -> None:
    assert keywords_of("Validate the email format, and make sure it is OK") == [
        "validate",
        "email",
        "format",
    ]
    assert keywords_of("") == []


def test_marker_table_is_unique_and_weighted() -> None:
    assert len(MARKERS_BY_NAME) == len(MARKERS)
    assert all(0.0 <= marker.rarity <= 1.0 for marker in MARKERS)
