#!/usr/bin/env python3

"""tree-sitter plumbing shared by the Rust scanner and the C index."""

import re
import threading

import tree_sitter_c as tsc
import tree_sitter_rust as tsrust
from tree_sitter import Language, Node, Parser

C_LANGUAGE = Language(tsc.language())
RUST_LANGUAGE = Language(tsrust.language())

# Parsers are not safe to share between threads.
_parsers = threading.local()


def c_parser() -> Parser:
    parser = getattr(_parsers, "c", None)
    if parser is None:
        parser = _parsers.c = Parser(C_LANGUAGE)
    return parser


def rust_parser() -> Parser:
    parser = getattr(_parsers, "rust", None)
    if parser is None:
        parser = _parsers.rust = Parser(RUST_LANGUAGE)
    return parser


# Helper to avoid type-checking warnings.
def node_text(node: Node) -> str:
    assert node.text is not None
    return node.text.decode("utf-8", errors="replace").strip()


def find_node_by_type(node: Node, node_type: str) -> Node | None:
    """Find first node of given type, depth first."""
    if node.type == node_type:
        return node
    for child in node.children:
        result = find_node_by_type(child, node_type)
        if result:
            return result
    return None


def start_row(node: Node) -> int:
    return node.start_point[0]


def end_row(node: Node) -> int:
    """Last row holding text of ``node``; tokens ending in a newline stop at column 0."""
    row, column = node.end_point[0], node.end_point[1]
    if column == 0 and row > node.start_point[0]:
        return row - 1
    return row


class SourceText:
    """A source file as text and UTF-8 bytes with per-line offsets.

    Rows follow tree-sitter: lines are separated by ``\\n`` only.
    """

    def __init__(self, text: str):
        self.text = text
        self.data = text.encode("utf-8")
        self.line_starts = [0] + [m.end() for m in re.finditer("\n", text)]
        self.byte_starts = [0] + [m.end() for m in re.finditer(b"\n", self.data)]

    def line(self, row: int) -> str:
        start = self.line_starts[row]
        end = self.line_starts[row + 1] - 1 if row + 1 < len(self.line_starts) else len(self.text)
        return self.text[start:end].rstrip("\r")

    def leading(self, node: Node) -> str | None:
        """Whitespace before ``node`` on its first line, or None if code precedes it."""
        row, column = node.start_point[0], node.start_point[1]
        start = self.byte_starts[row]
        prefix = self.data[start : start + column]
        if prefix.strip():
            return None
        return prefix.decode("utf-8")

    def is_blank(self, row: int) -> bool:
        return not self.line(row).strip()
