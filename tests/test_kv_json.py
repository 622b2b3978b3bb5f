"""Tests for stubroute.declarative.kv_json — key-value shorthand to JSON."""

import json

import pytest

from stubroute.declarative.kv_json import is_bracketed, key_values_to_json


class TestKeyValuesToJson:
    def test_strings_are_quoted(self) -> None:
        assert key_values_to_json("key1=value1,key2=value2") == '{"key1":"value1","key2":"value2"}'

    def test_integer_stays_bare(self) -> None:
        assert key_values_to_json("key=123") == '{"key":123}'

    @pytest.mark.parametrize("value", ["-7", "3.14", "-0.5"])
    def test_numbers_stay_bare(self, value: str) -> None:
        assert key_values_to_json(f"n={value}") == f'{{"n":{value}}}'

    @pytest.mark.parametrize("literal", ["true", "false", "null"])
    def test_literals_stay_bare(self, literal: str) -> None:
        assert key_values_to_json(f"key={literal}") == f'{{"key":{literal}}}'

    def test_non_ascii_digits_are_quoted(self) -> None:
        result = key_values_to_json("n=\u0661\u0662")
        assert result == '{"n":"\u0661\u0662"}'
        assert json.loads(result) == {"n": "\u0661\u0662"}

    def test_near_literals_are_quoted(self) -> None:
        assert key_values_to_json("key=True,n=1.") == '{"key":"True","n":"1."}'

    def test_bracketed_value_stays_bare(self) -> None:
        assert key_values_to_json("users=[]") == '{"users":[]}'
        assert key_values_to_json("meta={}") == '{"meta":{}}'

    def test_empty_input(self) -> None:
        assert key_values_to_json("") == "{}"

    @pytest.mark.parametrize("content", ["{}", "[]", '{"a":1}', "[1,2]"])
    def test_bracketed_input_passes_through(self, content: str) -> None:
        assert key_values_to_json(content) == content

    def test_pairs_without_equals_are_skipped(self) -> None:
        assert key_values_to_json("junk,key=value") == '{"key":"value"}'

    def test_splits_on_first_equals_and_trims(self) -> None:
        assert key_values_to_json(" expr = a=b , n = 1 ") == '{"expr":"a=b","n":1}'

    def test_output_is_valid_json(self) -> None:
        result = key_values_to_json("name=John,age=42,admin=false,tags=[]")
        assert json.loads(result) == {"name": "John", "age": 42, "admin": False, "tags": []}


class TestIsBracketed:
    def test_mismatched_brackets(self) -> None:
        assert not is_bracketed("{]")
        assert not is_bracketed("[}")
        assert not is_bracketed("plain")
