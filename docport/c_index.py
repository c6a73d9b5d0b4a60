#!/usr/bin/env python3

"""Index C declarations together with the comment that documents them.

Binding rule, applied independently inside every declaration container
(translation unit, ``#if``/``#ifdef`` groups, ``extern "C"`` blocks, enum
bodies):

* The comment block is either a single ``/* */`` comment or a run of ``//``
  comments on consecutive lines. Only the block nearest to the declaration
  is considered.
* A comment that follows code on its own line never leads a block.
* At most ``max_blank_lines`` blank lines may separate the block from the
  declaration. Any other node in between breaks the association.
* Doxygen back-references (``/**<``, ``///<``) written after a declaration
  on the same line document that declaration when it has no leading block.
* Export and calling-convention macros (``ZEXTERN int ZEXPORT f(void);``)
  make tree-sitter split a prototype into a declaration missing its ``;``
  and the real one on the same or next line. Both count as one declaration
  starting where the first part starts.
* A statement macro without a semicolon (``G_BEGIN_DECLS``) parses as the
  type of the next declaration. A comment on its own line inside such a
  declaration, ahead of the declarator, is its leading block.
* The first occurrence of a name with a non-empty comment wins. A later
  occurrence with different text is reported as ambiguous and kept so the
  matcher can refuse the symbol.
"""

import logging
from dataclasses import dataclass

from tree_sitter import Node

from docport.comments import (
    comment_lines,
    is_doc_comment,
    is_line_comment,
    is_trailing_doc_comment,
)
from docport.config import CommentStyle, DocFormat, DocPortConfig
from docport.doxygen import to_markdown
from docport.models import CSymbolEntry, Diagnostic, DiagnosticKind, SymbolKind
from docport.treesitter import (
    SourceText,
    c_parser,
    end_row,
    find_node_by_type,
    node_text,
    start_row,
)

logger = logging.getLogger(__name__)

# Constants for header guard detection
COMMON_IGNORE_PATTERNS = {
    "_MSC_VER",
    "_WIN32",
    "_WIN64",
    "__GNUC__",
    "__clang__",
    "_GNU_SOURCE",
    "_POSIX_C_SOURCE",
    "_XOPEN_SOURCE",
    "__STDC__",
    "__STDC_VERSION__",
    "__cplusplus",
}

HEADER_GUARD_SUFFIXES = ("_H", "_H_", "_H__", "_HPP", "_HPP_", "_HPP__", "_INCLUDED")

_CONTAINERS = {
    "translation_unit",
    "preproc_if",
    "preproc_ifdef",
    "preproc_else",
    "preproc_elif",
    "preproc_elifdef",
    "declaration_list",
    "ERROR",
}

_TAG_KINDS = {
    "struct_specifier": SymbolKind.STRUCT,
    "union_specifier": SymbolKind.UNION,
    "enum_specifier": SymbolKind.ENUM,
}

_NAME_NODES = {"identifier", "type_identifier", "field_identifier"}

_COMMENT_HOSTS = {"declaration", "type_definition", "function_definition"}


@dataclass
class _Declaration:
    name: str
    kind: SymbolKind
    node: Node
    doc: list[str] | None = None


def _is_container(node: Node) -> bool:
    if node.type == "linkage_specification":
        body = node.child_by_field_name("body")
        return body is not None and body.type == "declaration_list"
    return node.type in _CONTAINERS


def resolve_declarator(node: Node | None) -> tuple[str | None, bool]:
    """Follow a declarator chain down to its name.

    Returns the name and whether the name is declared as a function, i.e.
    sits directly inside a ``function_declarator``. ``int (*fp)(void)`` is a
    pointer, not a function.
    """
    parent_type = None
    while node is not None:
        if node.type in _NAME_NODES:
            return node_text(node), parent_type == "function_declarator"
        inner = node.child_by_field_name("declarator")
        if inner is None:
            inner = next((c for c in node.named_children if c.type != "comment"), None)
        parent_type = node.type
        node = inner
    return None, False


def is_header_guard_or_flag(name: str, node: Node) -> bool:
    """Check if this #define is a header guard or another macro not worth documenting."""
    if name.startswith("__") and name.endswith("__"):
        return True
    if name.endswith(HEADER_GUARD_SUFFIXES):
        return True
    if name in COMMON_IGNORE_PATTERNS:
        return True
    # Flag macros: #define NAME with no value
    if node.type == "preproc_def" and node.child_by_field_name("value") is None:
        return True
    return False


class CIndexer:
    """Builds symbol entries for one C file at a time."""

    def __init__(self, config: DocPortConfig | None = None):
        self.config = config or DocPortConfig()

    def index(self, file_id: str, text: str) -> tuple[list[CSymbolEntry], list[Diagnostic]]:
        source = SourceText(text)
        tree = c_parser().parse(source.data)
        if tree.root_node.has_error:
            logger.debug("Recovered from syntax errors in %s", file_id)

        declarations: list[_Declaration] = []
        self._walk(tree.root_node, source, declarations)
        return self._entries(file_id, declarations)

    def _walk(self, container: Node, source: SourceText, out: list[_Declaration]):
        block: list[Node] = []
        last: list[_Declaration] = []
        children = container.named_children
        index = 0

        while index < len(children):
            child = children[index]
            index += 1
            if child.type == "comment":
                text = node_text(child)
                if source.leading(child) is None:
                    # trails code on the same line
                    if (
                        is_trailing_doc_comment(text)
                        and last
                        and end_row(last[0].node) == start_row(child)
                        and all(d.doc is None for d in last)
                    ):
                        doc = self._doc([text])
                        for declaration in last:
                            declaration.doc = doc
                    continue
                if block and not _continues(block[-1], child):
                    block = []
                block.append(child)
                continue

            if _is_container(child):
                block, last = [], []
                self._walk(child, source, out)
                continue

            # ZEXTERN int ZEXPORT f(void); parses as a broken declaration
            # followed by the real one.
            parts = [child]
            while _is_fragment(child) and index < len(children):
                following = children[index]
                if following.type == "comment" or start_row(following) > end_row(child) + 1:
                    break
                logger.debug("Joining split declaration at line %d", start_row(child) + 1)
                child = following
                parts.append(child)
                index += 1

            decl_row = start_row(parts[0])
            inner, inner_row = _inner_block(child, source)
            if inner:
                # G_BEGIN_DECLS swallows the comment of the next declaration.
                block, decl_row = inner, inner_row

            symbols = self._declared_symbols(child)
            if len(parts) > 1 and not any(kind == SymbolKind.FUNCTION for _, kind in symbols):
                symbols = _function_in(parts) or symbols
            found = [
                _Declaration(name, kind, child)
                for name, kind in symbols
                if kind in self.config.symbol_kinds
            ]
            if found and block:
                doc = self._bind(block, decl_row, source)
                for declaration in found:
                    declaration.doc = doc
            out.extend(found)
            last = found
            block = []

            if SymbolKind.ENUMERATOR in self.config.symbol_kinds:
                enumerators = find_node_by_type(child, "enumerator_list")
                if enumerators is not None:
                    self._walk(enumerators, source, out)

    def _bind(self, block: list[Node], decl_row: int, source: SourceText) -> list[str] | None:
        """Return the documentation of ``block`` if it may document a declaration at ``decl_row``."""
        texts = [node_text(comment) for comment in block]
        if any(is_trailing_doc_comment(text) for text in texts):
            return None
        if self.config.comment_style == CommentStyle.DOC and not all(
            is_doc_comment(text) for text in texts
        ):
            return None

        gap = range(end_row(block[-1]) + 1, decl_row)
        if len(gap) > self.config.max_blank_lines:
            return None
        if not all(source.is_blank(row) for row in gap):
            return None
        return self._doc(texts)

    def _doc(self, texts: list[str]) -> list[str] | None:
        lines = comment_lines(texts)
        if self.config.doc_format == DocFormat.MARKDOWN:
            lines = to_markdown(lines)
        return lines or None

    def _declared_symbols(self, node: Node) -> list[tuple[str, SymbolKind]]:
        """List the names a top-level node declares, with their kinds."""
        if node.type == "linkage_specification":
            body = node.child_by_field_name("body")
            return self._declared_symbols(body) if body is not None else []

        if node.type == "function_definition":
            name, _ = resolve_declarator(node.child_by_field_name("declarator"))
            return [(name, SymbolKind.FUNCTION)] if name else []

        if node.type in ("declaration", "type_definition"):
            symbols = _tag(node.child_by_field_name("type"))
            for declarator in node.children_by_field_name("declarator"):
                name, is_function = resolve_declarator(declarator)
                if not name:
                    continue
                if node.type == "type_definition":
                    symbols.append((name, SymbolKind.TYPEDEF))
                elif is_function:
                    symbols.append((name, SymbolKind.FUNCTION))
                else:
                    symbols.append((name, SymbolKind.VARIABLE))
            return symbols

        if node.type in _TAG_KINDS:
            return _tag(node)

        if node.type in ("preproc_def", "preproc_function_def"):
            name_node = node.child_by_field_name("name")
            if name_node is None:
                return []
            name = node_text(name_node)
            if is_header_guard_or_flag(name, node):
                return []
            return [(name, SymbolKind.MACRO)]

        if node.type == "enumerator":
            name_node = node.child_by_field_name("name")
            return [(node_text(name_node), SymbolKind.ENUMERATOR)] if name_node else []

        return []

    def _entries(
        self, file_id: str, declarations: list[_Declaration]
    ) -> tuple[list[CSymbolEntry], list[Diagnostic]]:
        entries: list[CSymbolEntry] = []
        diagnostics: list[Diagnostic] = []
        first: dict[str, CSymbolEntry] = {}
        seen: set[tuple[str, tuple[str, ...]]] = set()

        for declaration in declarations:
            if not declaration.doc:
                continue
            node = declaration.node
            entry = CSymbolEntry(
                name=declaration.name,
                kind=declaration.kind,
                doc_lines=tuple(declaration.doc),
                file_id=file_id,
                start_line=start_row(node) + 1,
                end_line=end_row(node) + 1,
                start_byte=node.start_byte,
                end_byte=node.end_byte,
            )
            key = (entry.name, entry.doc_lines)
            if key in seen:
                continue
            seen.add(key)

            winner = first.get(entry.name)
            if winner is None:
                first[entry.name] = entry
            else:
                diagnostics.append(
                    Diagnostic(
                        kind=DiagnosticKind.AMBIGUOUS_MATCH,
                        message=(
                            f"'{entry.name}' is documented differently at lines "
                            f"{winner.start_line} and {entry.start_line}"
                        ),
                        file_id=file_id,
                        line=entry.start_line,
                        symbol=entry.name,
                    )
                )
            entries.append(entry)

        logger.debug("Indexed %d documented symbols in %s", len(first), file_id)
        return entries, diagnostics


def _continues(previous: Node, comment: Node) -> bool:
    """True if ``comment`` extends the ``//`` run ending with ``previous``."""
    return (
        is_line_comment(node_text(previous))
        and is_line_comment(node_text(comment))
        and start_row(comment) == end_row(previous) + 1
    )


def _is_fragment(node: Node) -> bool:
    """True for a declaration tree-sitter cut short by an unknown macro."""
    if node.type != "declaration" or not node.children:
        return False
    return node.children[-1].type != ";" or any(part.is_missing for part in node.children)


def _function_in(parts: list[Node]) -> list[tuple[str, SymbolKind]]:
    """Name of the function declared somewhere in a split declaration."""
    for part in reversed(parts):
        declarator = find_node_by_type(part, "function_declarator")
        if declarator is None:
            continue
        name, is_function = resolve_declarator(declarator)
        if name and is_function:
            return [(name, SymbolKind.FUNCTION)]
    return []


def _inner_block(node: Node, source: SourceText) -> tuple[list[Node], int]:
    """Comment block held inside ``node`` ahead of its declarator.

    A statement macro without a semicolon becomes the type of the following
    declaration, which then owns the comments in between. Returns the block
    and the row where the declaration text after it starts.
    """
    if node.type not in _COMMENT_HOSTS:
        return [], 0
    declarators = node.children_by_field_name("declarator")
    if not declarators:
        return [], 0
    limit = declarators[0].start_byte

    parts = node.children
    last = None
    for position, part in enumerate(parts):
        if part.start_byte >= limit:
            break
        if part.type == "comment" and source.leading(part) is not None:
            last = position
    if last is None:
        return [], 0

    block = [parts[last]]
    position = last - 1
    while position >= 0 and _continues(parts[position], block[0]):
        block.insert(0, parts[position])
        position -= 1
    return block, start_row(parts[last + 1])


def _tag(node: Node | None) -> list[tuple[str, SymbolKind]]:
    if node is None or node.type not in _TAG_KINDS:
        return []
    name = node.child_by_field_name("name")
    if name is None:
        return []
    return [(node_text(name), _TAG_KINDS[node.type])]


def index_c(
    file_id: str, text: str, config: DocPortConfig | None = None
) -> tuple[list[CSymbolEntry], list[Diagnostic]]:
    """Return the documented symbols of one C file in source order."""
    return CIndexer(config).index(file_id, text)
