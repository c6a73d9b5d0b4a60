#!/usr/bin/env python3

"""Pydantic models shared by the scanner, index, matcher and rewriter."""

from enum import Enum

from pydantic import BaseModel, Field


class SymbolKind(str, Enum):
    FUNCTION = "function"
    VARIABLE = "variable"
    TYPEDEF = "typedef"
    STRUCT = "struct"
    UNION = "union"
    ENUM = "enum"
    ENUMERATOR = "enumerator"
    MACRO = "macro"


class DiagnosticKind(str, Enum):
    PARSE_IRREGULARITY = "parse-irregularity"
    MALFORMED_ALIAS = "malformed-alias"
    UNMATCHED_ALIAS = "unmatched-alias"
    AMBIGUOUS_MATCH = "ambiguous-match"


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"


class Diagnostic(BaseModel):
    """A recoverable problem found while scanning, matching or rewriting."""

    kind: DiagnosticKind
    message: str
    file_id: str | None = None
    line: int | None = None
    symbol: str | None = None

    model_config = {"frozen": True}

    @property
    def severity(self) -> Severity:
        if self.kind == DiagnosticKind.UNMATCHED_ALIAS:
            return Severity.INFO
        return Severity.WARNING

    @property
    def location(self) -> str:
        if self.file_id is None:
            return "<input>"
        if self.line is None:
            return self.file_id
        return f"{self.file_id}:{self.line}"

    def __str__(self) -> str:
        return f"{self.location}: {self.kind.value}: {self.message}"


class AliasSite(BaseModel):
    """A Rust item carrying one or more doc aliases.

    ``anchor_offset`` is the character offset of the line where imported
    documentation goes: the first existing doc line when the item is already
    documented, otherwise the line of its first attribute.
    """

    file_id: str
    item_kind: str
    item_name: str | None = None
    start_line: int
    end_line: int
    start_byte: int
    end_byte: int
    aliases: tuple[str, ...]
    has_docs: bool = False
    doc_lines: tuple[str, ...] = ()
    anchor_offset: int
    anchor_line: int
    indent: str = ""

    model_config = {"frozen": True}

    @property
    def label(self) -> str:
        return self.item_name or self.item_kind


class CSymbolEntry(BaseModel):
    """A C declaration and the comment block bound to it."""

    name: str
    kind: SymbolKind
    doc_lines: tuple[str, ...] = Field(min_length=1)
    file_id: str
    start_line: int
    end_line: int
    start_byte: int
    end_byte: int

    model_config = {"frozen": True}

    @property
    def location(self) -> str:
        return f"{self.file_id}:{self.start_line}"


class MatchResult(BaseModel):
    """An alias site paired with the C documentation it will receive."""

    site: AliasSite
    entry: CSymbolEntry
    alias: str

    model_config = {"frozen": True}


class RewriteResult(BaseModel):
    """Outcome of rewriting one Rust file."""

    file_id: str
    text: str
    insertions: int = 0
    skipped: int = 0

    model_config = {"frozen": True}

    @property
    def changed(self) -> bool:
        return self.insertions > 0


class PipelineReport(BaseModel):
    """Everything a full run produced, in input order."""

    rewrites: list[RewriteResult] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    sites: int = 0
    entries: int = 0

    @property
    def insertions(self) -> int:
        return sum(result.insertions for result in self.rewrites)

    @property
    def changed_files(self) -> list[RewriteResult]:
        return [result for result in self.rewrites if result.changed]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.WARNING]
