from __future__ import annotations

import pytest

from grid.codec import normalize, to_digit


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("5", "5"),
        ("9", "9"),
        ("1", "1"),
        ("0", ""),
        ("a", ""),
        (" ", ""),
        ("", ""),
        ("-", ""),
    ],
)
def test_single_character_inputs(raw: str, expected: str) -> None:
    assert normalize(raw) == expected


def test_longer_input_is_truncated_to_first_character() -> None:
    assert normalize("73") == "7"
    assert normalize("7abc") == "7"
    assert normalize("x7") == ""


def test_none_is_treated_as_empty() -> None:
    assert normalize(None) == ""


def test_result_is_always_empty_or_a_single_playable_digit() -> None:
    samples = ["", "0", "00", "10", "99", "½", "٣", "\n", "5\n", "abc", "9z", " 4"]
    samples += [chr(code) for code in range(32, 127)]
    for raw in samples:
        out = normalize(raw)
        assert out == "" or (len(out) == 1 and out in "123456789")


def test_to_digit_maps_text_to_numbers() -> None:
    assert to_digit("") == 0
    assert to_digit("4") == 4
    assert to_digit("42") == 4
    assert to_digit("x") == 0
