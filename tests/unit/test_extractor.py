"""Unit tests for field extraction — lookup, path syntax, coercion."""

from __future__ import annotations

import pytest

from chrsplit.core.extractor import extract_field, split_field_path, stringify_value


class TestExtractField:
    """extract_field must locate one field and never raise on bad input."""

    def test_top_level_string(self):
        assert extract_field(b'{"chr":"chr1","pos":100}', "chr") == ("chr1", True)

    def test_missing_field(self):
        assert extract_field(b'{"other":"x"}', "chr") == ("", False)

    def test_malformed_json_is_not_found(self):
        assert extract_field(b'{"chr":"chr1"', "chr") == ("", False)

    def test_invalid_utf8_is_not_found(self):
        assert extract_field(b'{"chr":"\xff\xfe"}', "chr") == ("", False)

    def test_non_object_document_is_not_found(self):
        assert extract_field(b'["chr1"]', "chr") == ("", False)
        assert extract_field(b'"chr1"', "chr") == ("", False)

    def test_whitespace_only_record_is_not_found(self):
        assert extract_field(b"   ", "chr") == ("", False)

    def test_nested_path(self):
        record = b'{"locus":{"chr":"chrX","pos":5}}'
        assert extract_field(record, "locus.chr") == ("chrX", True)

    def test_nested_path_through_array(self):
        record = b'{"calls":[{"chr":"chr2"},{"chr":"chr3"}]}'
        assert extract_field(record, "calls.1.chr") == ("chr3", True)

    def test_array_index_out_of_range(self):
        assert extract_field(b'{"calls":[]}', "calls.0") == ("", False)

    def test_array_non_numeric_segment(self):
        assert extract_field(b'{"calls":[1]}', "calls.x") == ("", False)

    def test_path_through_scalar(self):
        assert extract_field(b'{"locus":"chr1"}', "locus.chr") == ("", False)

    def test_literal_dotted_key_takes_precedence(self):
        record = b'{"a.b":"literal","a":{"b":"nested"}}'
        assert extract_field(record, "a.b") == ("literal", True)

    def test_escaped_dot(self):
        record = b'{"info.chr":{"name":"chr7"}}'
        assert extract_field(record, r"info\.chr.name") == ("chr7", True)

    def test_unicode_value(self):
        record = '{"chr":"染色体1"}'.encode("utf-8")
        assert extract_field(record, "chr") == ("染色体1", True)

    def test_duplicate_key_keeps_first_value(self):
        assert extract_field(b'{"chr":"chr1","chr":"chr2"}', "chr") == ("chr1", True)

    def test_duplicate_key_in_nested_object_keeps_first_value(self):
        record = b'{"locus":{"chr":"chrX","chr":"chrY"}}'
        assert extract_field(record, "locus.chr") == ("chrX", True)


class TestCoercion:
    """Non-string values are matched by their JSON text form."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (b'{"chr":1}', "1"),
            (b'{"chr":-3}', "-3"),
            (b'{"chr":1.0}', "1"),
            (b'{"chr":1.5}', "1.5"),
            (b'{"chr":1.5e-7}', "0.00000015"),
            (b'{"chr":-2.5E-3}', "-0.0025"),
            (b'{"chr":1e3}', "1000"),
            (b'{"chr":true}', "true"),
            (b'{"chr":false}', "false"),
            (b'{"chr":null}', ""),
            (b'{"chr":{"a":1}}', '{"a":1}'),
            (b'{"chr":[1, 2]}', "[1,2]"),
        ],
    )
    def test_values_are_stringified(self, raw: bytes, expected: str):
        assert extract_field(raw, "chr") == (expected, True)

    def test_stringify_passes_strings_through(self):
        assert stringify_value("chrM") == "chrM"


class TestSplitFieldPath:
    def test_single_segment(self):
        assert split_field_path("chr") == ["chr"]

    def test_dotted(self):
        assert split_field_path("a.b.c") == ["a", "b", "c"]

    def test_escape(self):
        assert split_field_path(r"a\.b.c") == ["a.b", "c"]

    def test_empty_segments_kept(self):
        assert split_field_path("a..b") == ["a", "", "b"]
