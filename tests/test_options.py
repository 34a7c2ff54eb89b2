"""Test answer-option normalization."""

import pytest

from assessment_upload.options import OptionShape, classify_options, normalize_options


def test_plain_list_gets_positional_letters():
    assert normalize_options(["Mars", "Jupiter", "Saturn"]) == {"a": "Mars", "b": "Jupiter", "c": "Saturn"}


def test_plain_list_keeps_only_five():
    out = normalize_options(["1", "2", "3", "4", "5", "6", "7"])
    assert list(out) == ["a", "b", "c", "d", "e"]
    assert out["e"] == "5"


def test_identified_options_use_lowercase_ids():
    raw = [{"option_id": "B", "text": "X"}, {"option_id": "A", "text": "Y"}]
    out = normalize_options(raw)
    assert out == {"b": "X", "a": "Y"}
    assert list(out) == ["b", "a"]


def test_identified_duplicates_last_write_wins():
    raw = [
        {"option_id": "A", "text": "old"},
        {"option_id": "B", "text": "keep"},
        {"option_id": "a", "text": "new"},
    ]
    assert normalize_options(raw) == {"a": "new", "b": "keep"}


def test_identified_out_of_range_and_missing_ids_dropped():
    raw = [
        {"option_id": "A", "text": "one"},
        {"text": "no id"},
        {"option_id": "F", "text": "sixth"},
    ]
    assert normalize_options(raw) == {"a": "one"}


@pytest.mark.parametrize("raw", [None, [], {}, "", 42])
def test_empty_or_missing_options(raw):
    assert normalize_options(raw) == {}


def test_mapping_passes_through_unchanged():
    mapped = {"a": "Mars", "b": "Jupiter"}
    assert normalize_options(mapped) == mapped


def test_normalizing_is_idempotent():
    once = normalize_options([{"option_id": "C", "text": "x"}, {"option_id": "D", "text": "y"}])
    assert normalize_options(once) == once

    once = normalize_options(["p", "q"])
    assert normalize_options(once) == once


def test_plain_list_of_records_without_ids_uses_text():
    assert normalize_options([{"text": "first"}, {"text": "second"}]) == {"a": "first", "b": "second"}


def test_plain_non_string_values_are_stringified():
    assert normalize_options([1, 2.5]) == {"a": "1", "b": "2.5"}


@pytest.mark.parametrize("raw, shape", [
    ([{"option_id": "A", "text": "t"}], OptionShape.IDENTIFIED),
    (["t"], OptionShape.PLAIN),
    ({"a": "t"}, OptionShape.MAPPING),
    ([], OptionShape.EMPTY),
    (None, OptionShape.EMPTY),
])
def test_classify_options(raw, shape):
    assert classify_options(raw) is shape
