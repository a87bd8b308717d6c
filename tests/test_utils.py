"""Tests for figconnect.utils."""

from __future__ import annotations

import pytest

from figconnect.utils import (
    is_identifier,
    merge_by_key,
    normalize_path,
    posix_basename,
    to_kebab_case,
    to_pascal_case,
    to_title_case,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [("headerText", "header-text"), ("IconButton", "icon-button"), ("data_id", "data-id"), ("two words", "two-words")],
)
def test_to_kebab_case(value: str, expected: str) -> None:
    assert to_kebab_case(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [("mdc-button", "MdcButton"), ("dark_mode", "DarkMode"), ("iconButton", "IconButton"), ("", "")],
)
def test_to_pascal_case(value: str, expected: str) -> None:
    assert to_pascal_case(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [("headerText", "Header Text"), ("dark-mode", "Dark Mode"), ("data_id", "Data Id"), ("PRIMARY", "Primary")],
)
def test_to_title_case(value: str, expected: str) -> None:
    assert to_title_case(value) == expected


def test_is_identifier() -> None:
    assert is_identifier("headerText")
    assert is_identifier("$value")
    assert not is_identifier("data-id")
    assert not is_identifier("1st")


def test_merge_by_key_keeps_first_position_and_last_value() -> None:
    items = [("a", 1), ("b", 2), ("a", 3)]

    merged = merge_by_key(items, lambda item: item[0])

    assert list(merged) == ["a", "b"]
    assert merged["a"] == ("a", 3)


def test_merge_by_key_uses_merge_callback() -> None:
    items = [("a", 1), ("a", 5), ("b", 2)]
    merged = merge_by_key(items, lambda item: item[0], lambda old, new: (old[0], old[1] + new[1]))
    assert merged == {"a": ("a", 6), "b": ("b", 2)}


def test_path_helpers() -> None:
    assert normalize_path("") == ""
    assert normalize_path("/repo/src/../lib") == "/repo/lib"
    assert posix_basename("/repo/lib/button/") == "button"
