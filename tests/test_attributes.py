#!/usr/bin/env python3

from docport.attributes import Token, is_doc_attribute, parse_aliases, tokenize


class TestTokenize:
    def test_paths_strings_and_punctuation(self):
        assert tokenize('a::b = "x"') == [
            Token("ident", "a::b"),
            Token("punct", "="),
            Token("str", "x"),
        ]

    def test_escapes_are_decoded(self):
        assert tokenize(r'"a\"b\n"') == [Token("str", 'a"b\n')]

    def test_raw_strings(self):
        assert tokenize('r#"he said "hi""#') == [Token("str", 'he said "hi"')]

    def test_raw_string_prefix_does_not_swallow_identifiers(self):
        assert tokenize("repr(C)") == [
            Token("ident", "repr"),
            Token("punct", "("),
            Token("ident", "C"),
            Token("punct", ")"),
        ]


class TestParseAliases:
    def test_single_alias(self):
        parsed = parse_aliases('#[doc(alias = "open_file")]')
        assert parsed.aliases == ["open_file"]
        assert parsed.problems == []

    def test_list_form(self):
        parsed = parse_aliases('#[doc(alias("open_file", "fopen"))]')
        assert parsed.aliases == ["open_file", "fopen"]

    def test_several_entries_in_one_attribute(self):
        parsed = parse_aliases('#[doc(alias = "a", hidden, alias = "b")]')
        assert parsed.aliases == ["a", "b"]

    def test_cfg_attr_wrapped(self):
        parsed = parse_aliases('#[cfg_attr(feature = "docs", doc(alias = "gtk_init"))]')
        assert parsed.aliases == ["gtk_init"]

    def test_multiline_attribute(self):
        parsed = parse_aliases('#[doc(\n    alias = "first",\n    alias = "second",\n)]')
        assert parsed.aliases == ["first", "second"]

    def test_unrelated_attributes_yield_nothing(self):
        for text in ('#[derive(Debug, Clone)]', '#[doc = "text"]', "#[inline]", '#[repr(C)]'):
            parsed = parse_aliases(text)
            assert parsed.aliases == []
            assert parsed.problems == []

    def test_non_identifier_alias_is_kept(self):
        parsed = parse_aliases('#[doc(alias = "not a c-ident!")]')
        assert parsed.aliases == ["not a c-ident!"]

    def test_alias_without_string_is_reported(self):
        parsed = parse_aliases("#[doc(alias = open_file)]")
        assert parsed.aliases == []
        assert len(parsed.problems) == 1
        assert "expected a string" in parsed.problems[0]

    def test_alias_without_value_is_reported(self):
        parsed = parse_aliases("#[doc(alias)]")
        assert parsed.aliases == []
        assert parsed.problems == ["'alias' needs a value"]

    def test_good_entries_survive_a_bad_one(self):
        parsed = parse_aliases('#[doc(alias = "ok", alias = 3)]')
        assert parsed.aliases == ["ok"]
        assert len(parsed.problems) == 1

    def test_empty_list_form_is_reported(self):
        parsed = parse_aliases("#[doc(alias())]")
        assert parsed.aliases == []
        assert parsed.problems == ["'alias(...)' is empty"]

    def test_custom_spelling(self):
        parsed = parse_aliases('#[c_symbol(name = "png_read")]', path="c_symbol", key="name")
        assert parsed.aliases == ["png_read"]
        assert parse_aliases('#[doc(alias = "png_read")]', path="c_symbol", key="name").aliases == []


class TestIsDocAttribute:
    def test_doc_string_attribute(self):
        assert is_doc_attribute('#[doc = "Some docs."]')

    def test_alias_attribute_is_not_documentation(self):
        assert not is_doc_attribute('#[doc(alias = "x")]')
        assert not is_doc_attribute("#[derive(Clone)]")
