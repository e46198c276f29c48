"""Tests for splitting free-form item text into name/quantity pairs."""
import unicodedata

import pytest

from orderflow.ingestion.tokenizer import ParsedItem, tokenize_items


def test_tokenize_splits_names_and_decimal_quantities():
    assert tokenize_items("nan2.375 cá trác2") == [
        ParsedItem(name="nan", quantity=2.375),
        ParsedItem(name="cá trác", quantity=2),
    ]


def test_tokenize_defaults_quantity_to_one():
    assert tokenize_items("gạo") == [ParsedItem(name="gạo", quantity=1)]


@pytest.mark.parametrize("raw", ["", "   ", None])
def test_tokenize_blank_input_yields_nothing(raw):
    assert tokenize_items(raw) == []


@pytest.mark.parametrize("raw", ["123", "  #!?  ", "cá2 3"])
def test_tokenize_falls_back_to_whole_text(raw):
    assert tokenize_items(raw) == [ParsedItem(name=raw.strip(), quantity=1)]


def test_tokenize_quantity_does_not_bleed_into_next_name():
    items = tokenize_items("gạo ST2 thịt bò0.5 trứng")

    assert items == [
        ParsedItem(name="gạo ST", quantity=2),
        ParsedItem(name="thịt bò", quantity=0.5),
        ParsedItem(name="trứng", quantity=1),
    ]


def test_tokenize_keeps_parentheses_and_hyphens_in_names():
    assert tokenize_items("nước mắm (chai)3 bánh-tráng2") == [
        ParsedItem(name="nước mắm (chai)", quantity=3),
        ParsedItem(name="bánh-tráng", quantity=2),
    ]


def test_tokenize_accepts_space_before_quantity():
    assert tokenize_items("gạo thơm 1.5") == [ParsedItem(name="gạo thơm", quantity=1.5)]


def test_tokenize_handles_decomposed_accents():
    decomposed = unicodedata.normalize("NFD", "cá trác3")

    assert tokenize_items(decomposed) == [ParsedItem(name="cá trác", quantity=3)]


def test_tokenize_is_repeatable():
    first = tokenize_items("nan2 cá1")
    tokenize_items("something else entirely5")
    assert tokenize_items("nan2 cá1") == first
