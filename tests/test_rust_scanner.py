#!/usr/bin/env python3

from docport.config import DocPortConfig
from docport.models import DiagnosticKind
from docport.rust_scanner import is_outer_doc_comment, scan_rust


def test_outer_doc_comments():
    assert is_outer_doc_comment("/// doc")
    assert is_outer_doc_comment("/** doc */")
    assert not is_outer_doc_comment("//// not doc")
    assert not is_outer_doc_comment("//! inner")
    assert not is_outer_doc_comment("// plain")
    assert not is_outer_doc_comment("/**/")


class TestAliasSites:
    def test_extern_block_function(self):
        text = """extern "C" {
    #[doc(alias = "open_file")]
    pub fn open_file_rs(path: *const c_char) -> c_int;
}
"""
        sites, diagnostics = scan_rust("ffi.rs", text)
        assert diagnostics == []
        assert len(sites) == 1

        site = sites[0]
        assert site.file_id == "ffi.rs"
        assert site.aliases == ("open_file",)
        assert site.item_name == "open_file_rs"
        assert site.item_kind == "function_signature_item"
        assert not site.has_docs
        assert site.start_line == 2
        assert site.end_line == 3
        assert site.anchor_line == 2
        assert site.anchor_offset == len('extern "C" {\n')
        assert site.indent == "    "

    def test_stacked_and_unrelated_attributes(self):
        text = """#[inline]
#[doc(alias = "a")]
#[cfg(unix)]
#[doc(alias = "b", alias = "a")]
pub fn thing() {}
"""
        sites, diagnostics = scan_rust("lib.rs", text)
        assert diagnostics == []
        assert [site.aliases for site in sites] == [("a", "b")]
        assert sites[0].anchor_line == 1
        assert sites[0].anchor_offset == 0

    def test_multiline_item(self):
        text = """#[doc(alias = "draw")]
pub fn draw(
    x: i32,
    y: i32,
) -> bool {
    true
}
"""
        sites, _ = scan_rust("lib.rs", text)
        assert len(sites) == 1
        assert sites[0].start_line == 1
        assert sites[0].end_line == 7

    def test_existing_doc_comment_moves_the_anchor(self):
        text = """/// My own note.
#[doc(alias = "open_file")]
pub fn open_file_rs() {}
"""
        sites, _ = scan_rust("lib.rs", text)
        site = sites[0]
        assert site.has_docs
        assert site.doc_lines == ("/// My own note.",)
        assert site.anchor_line == 1

    def test_doc_after_alias_attribute(self):
        text = """#[doc(alias = "open_file")]
/// My own note.
pub fn open_file_rs() {}
"""
        sites, _ = scan_rust("lib.rs", text)
        assert sites[0].has_docs
        assert sites[0].anchor_line == 2
        assert sites[0].anchor_offset == text.index("///")

    def test_doc_attribute_counts_as_documentation(self):
        text = """#[doc = "Hand written."]
#[doc(alias = "x")]
pub fn x() {}
"""
        sites, _ = scan_rust("lib.rs", text)
        assert sites[0].has_docs
        assert sites[0].anchor_line == 1

    def test_plain_comment_is_not_documentation(self):
        text = """// just a note
#[doc(alias = "x")]
pub fn x() {}
"""
        sites, _ = scan_rust("lib.rs", text)
        assert not sites[0].has_docs
        assert sites[0].anchor_line == 2

    def test_items_inside_types_and_impls(self):
        text = """pub struct Rect {
    #[doc(alias = "width")]
    pub w: i32,
}

pub enum Mode {
    #[doc(alias = "MODE_FAST")]
    Fast,
}

impl Rect {
    #[doc(alias = "rect_area")]
    pub fn area(&self) -> i32 {
        0
    }
}
"""
        sites, diagnostics = scan_rust("lib.rs", text)
        assert diagnostics == []
        assert [(site.item_name, site.aliases) for site in sites] == [
            ("w", ("width",)),
            ("Fast", ("MODE_FAST",)),
            ("area", ("rect_area",)),
        ]
        assert all(site.indent == "    " for site in sites)

    def test_source_order(self):
        text = """#[doc(alias = "first")]
pub fn a() {}

#[doc(alias = "second")]
pub fn b() {}
"""
        sites, _ = scan_rust("lib.rs", text)
        assert [site.aliases[0] for site in sites] == ["first", "second"]
        assert sites[0].anchor_offset < sites[1].anchor_offset

    def test_items_without_alias_are_ignored(self):
        text = """/// Documented.
#[inline]
pub fn plain() {}
"""
        sites, diagnostics = scan_rust("lib.rs", text)
        assert sites == []
        assert diagnostics == []

    def test_custom_spelling(self):
        text = """#[c_symbol(name = "png_read")]
pub fn read() {}
"""
        config = DocPortConfig(alias_attribute="c_symbol", alias_key="name")
        sites, _ = scan_rust("lib.rs", text, config)
        assert sites[0].aliases == ("png_read",)
        assert scan_rust("lib.rs", text)[0] == []


class TestScanDiagnostics:
    def test_malformed_alias(self):
        text = """#[doc(alias = open_file)]
pub fn open_file_rs() {}
"""
        sites, diagnostics = scan_rust("lib.rs", text)
        assert sites == []
        assert len(diagnostics) == 1
        assert diagnostics[0].kind == DiagnosticKind.MALFORMED_ALIAS
        assert diagnostics[0].line == 1
        assert diagnostics[0].symbol == "open_file_rs"

    def test_scanning_continues_after_malformed_alias(self):
        text = """#[doc(alias = 42)]
pub fn broken() {}

#[doc(alias = "fine")]
pub fn fine() {}
"""
        sites, diagnostics = scan_rust("lib.rs", text)
        assert [site.aliases for site in sites] == [("fine",)]
        assert [d.kind for d in diagnostics] == [DiagnosticKind.MALFORMED_ALIAS]

    def test_attribute_sharing_a_line_with_code(self):
        text = 'pub fn a() {} #[doc(alias = "b")] pub fn b() {}\n'
        sites, diagnostics = scan_rust("lib.rs", text)
        assert sites == []
        assert [d.kind for d in diagnostics] == [DiagnosticKind.PARSE_IRREGULARITY]

    def test_syntax_errors_are_reported(self):
        text = """pub fn broken( {

#[doc(alias = "ok")]
pub fn ok() {}
"""
        _, diagnostics = scan_rust("lib.rs", text)
        assert diagnostics
        assert diagnostics[0].kind == DiagnosticKind.PARSE_IRREGULARITY
        assert diagnostics[0].file_id == "lib.rs"
