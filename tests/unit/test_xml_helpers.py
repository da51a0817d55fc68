"""Tests for the element helpers and digest utilities."""

from __future__ import annotations

import pytest

from xartool.diagnostics import DiagnosticLog
from xartool.utils.checksum import calculate_bytes_checksum, digests_match
from xartool.utils.xml import (
    PARSE_ERRORS,
    child_int,
    child_text,
    element_text,
    find_child,
    parse_document,
)

DOC = parse_document(
    "<data><!-- note --><offset>42</offset><name>first</name><name>second</name>"
    "<empty/><mixed><b>x</b>tail</mixed><padded> 7 </padded></data>"
)


class TestElementHelpers:
    def test_find_child_returns_first_match(self):
        assert element_text(find_child(DOC, "name")) == "first"

    def test_find_child_missing(self):
        assert find_child(DOC, "nope") is None
        assert find_child(None, "offset") is None

    def test_child_text_defaults_to_empty(self):
        assert child_text(DOC, "empty") == ""
        assert child_text(DOC, "missing") == ""

    def test_text_after_child_element(self):
        assert child_text(DOC, "mixed") == "tail"

    def test_child_int(self):
        assert child_int(DOC, "offset") == 42
        assert child_int(DOC, "missing") == 0

    def test_child_int_rejects_surrounding_whitespace(self):
        diagnostics = DiagnosticLog()
        assert child_int(DOC, "padded", diagnostics) == 0
        assert diagnostics.codes() == ["invalid-number"]

    def test_child_int_rejects_trailing_newline(self):
        doc = parse_document("<data><offset>5\n</offset><size>+5</size></data>")
        diagnostics = DiagnosticLog()
        assert child_int(doc, "offset", diagnostics) == 0
        assert child_int(doc, "size", diagnostics) == 5
        assert diagnostics.codes() == ["invalid-number"]

    def test_child_int_invalid_reports(self):
        diagnostics = DiagnosticLog()
        assert child_int(DOC, "name", diagnostics) == 0
        assert diagnostics.codes() == ["invalid-number"]
        assert "'first'" in diagnostics.entries[0].message

    def test_entities_refused(self):
        evil = '<!DOCTYPE x [<!ENTITY a "aaaa">]><x>&a;</x>'
        with pytest.raises(PARSE_ERRORS):
            parse_document(evil)


class TestChecksum:
    def test_sha1_default(self):
        assert calculate_bytes_checksum(b"abc") == "a9993e364706816aba3e25717850c26c9cd0d89d"

    def test_text_input(self):
        assert calculate_bytes_checksum("abc") == calculate_bytes_checksum(b"abc")

    def test_case_insensitive_match(self):
        assert digests_match("A9993E36", "a9993e36")
        assert not digests_match("", "a9993e36")
