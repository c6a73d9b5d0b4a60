#!/usr/bin/env python3

"""Find Rust items annotated with a doc alias.

tree-sitter-rust keeps outer attributes and comments as siblings placed
before the item they decorate, so every child list is read as runs of
attributes/comments followed by the item that owns them. This covers
top-level items, ``impl``/``trait``/``mod`` bodies, ``extern`` blocks,
enum variants and struct fields alike.
"""

import logging

from tree_sitter import Node

from docport.attributes import is_doc_attribute, parse_aliases
from docport.config import DocPortConfig
from docport.models import AliasSite, Diagnostic, DiagnosticKind
from docport.treesitter import SourceText, node_text, rust_parser, start_row

logger = logging.getLogger(__name__)

_TRIVIA = {"attribute_item", "line_comment", "block_comment"}


def is_outer_doc_comment(text: str) -> bool:
    """Check for ``///`` and ``/** */`` comments, which rustdoc renders."""
    if text.startswith("///"):
        return not text.startswith("////")
    if text.startswith("/**"):
        return not text.startswith("/***") and not text.startswith("/**/")
    return False


class _ScanState:
    def __init__(self, file_id: str, source: SourceText):
        self.file_id = file_id
        self.source = source
        self.sites: list[AliasSite] = []
        self.diagnostics: list[Diagnostic] = []

    def diagnose(self, kind: DiagnosticKind, node: Node, message: str, symbol: str | None = None):
        self.diagnostics.append(
            Diagnostic(
                kind=kind,
                message=message,
                file_id=self.file_id,
                line=start_row(node) + 1,
                symbol=symbol,
            )
        )


class RustScanner:
    """Extracts alias sites from Rust source text."""

    def __init__(self, config: DocPortConfig | None = None):
        self.config = config or DocPortConfig()

    def scan(self, file_id: str, text: str) -> tuple[list[AliasSite], list[Diagnostic]]:
        source = SourceText(text)
        tree = rust_parser().parse(source.data)
        state = _ScanState(file_id, source)

        if tree.root_node.has_error:
            state.diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.PARSE_IRREGULARITY,
                    message="Rust source has syntax errors; items near them may be missed",
                    file_id=file_id,
                )
            )
            logger.debug("Recovered from syntax errors in %s", file_id)

        self._walk(tree.root_node, state)
        logger.debug("Found %d alias sites in %s", len(state.sites), file_id)
        return state.sites, state.diagnostics

    def _walk(self, node: Node, state: _ScanState):
        pending: list[Node] = []
        for child in node.children:
            if not child.is_named:
                continue
            if child.type in _TRIVIA:
                pending.append(child)
                continue
            if pending:
                self._visit_item(child, pending, state)
                pending = []
            self._walk(child, state)

    def _visit_item(self, item: Node, prefix: list[Node], state: _ScanState):
        aliases: list[str] = []
        item_name = _item_name(item)
        for attr in prefix:
            if attr.type != "attribute_item":
                continue
            parsed = parse_aliases(
                node_text(attr), self.config.alias_attribute, self.config.alias_key
            )
            for problem in parsed.problems:
                state.diagnose(
                    DiagnosticKind.MALFORMED_ALIAS,
                    attr,
                    f"malformed alias annotation on {item_name or item.type}: {problem}",
                    symbol=item_name,
                )
            for alias in parsed.aliases:
                if alias not in aliases:
                    aliases.append(alias)

        if not aliases:
            return

        docs = [node for node in prefix if _is_doc(node)]
        anchor = docs[0] if docs else next(n for n in prefix if n.type == "attribute_item")
        indent = state.source.leading(anchor)
        if indent is None:
            state.diagnose(
                DiagnosticKind.PARSE_IRREGULARITY,
                anchor,
                f"cannot place docs for {item_name or item.type}: "
                "its attributes share a line with other code",
                symbol=item_name,
            )
            return

        doc_lines: list[str] = []
        for node in docs:
            text = node_text(node)
            doc_lines.extend(line.strip() for line in text.splitlines())

        first = prefix[0]
        row = start_row(anchor)
        state.sites.append(
            AliasSite(
                file_id=state.file_id,
                item_kind=item.type,
                item_name=item_name,
                start_line=start_row(first) + 1,
                end_line=item.end_point[0] + 1,
                start_byte=first.start_byte,
                end_byte=item.end_byte,
                aliases=tuple(aliases),
                has_docs=bool(docs),
                doc_lines=tuple(doc_lines),
                anchor_offset=state.source.line_starts[row],
                anchor_line=row + 1,
                indent=indent,
            )
        )


def _is_doc(node: Node) -> bool:
    text = node_text(node)
    if node.type == "attribute_item":
        return is_doc_attribute(text)
    return is_outer_doc_comment(text)


def _item_name(item: Node) -> str | None:
    name = item.child_by_field_name("name")
    if name is None:
        return None
    return node_text(name)


def scan_rust(
    file_id: str, text: str, config: DocPortConfig | None = None
) -> tuple[list[AliasSite], list[Diagnostic]]:
    """Return the alias sites of one Rust file in source order."""
    return RustScanner(config).scan(file_id, text)
