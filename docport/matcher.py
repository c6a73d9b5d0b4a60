#!/usr/bin/env python3

"""Join alias sites to documented C symbols by exact name."""

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from docport.models import AliasSite, CSymbolEntry, Diagnostic, DiagnosticKind, MatchResult

logger = logging.getLogger(__name__)


class SymbolTable:
    """Read-only mapping from C symbol name to its documentation candidates.

    Declarations carrying identical text collapse into one candidate, so a
    header prototype and its definition documented the same way do not
    conflict. The table is complete before any lookup happens and is never
    modified afterwards.
    """

    def __init__(self, entries: Iterable[CSymbolEntry]):
        candidates: dict[str, list[CSymbolEntry]] = {}
        for entry in entries:
            known = candidates.setdefault(entry.name, [])
            if all(other.doc_lines != entry.doc_lines for other in known):
                known.append(entry)
        self._candidates: Mapping[str, tuple[CSymbolEntry, ...]] = MappingProxyType(
            {name: tuple(found) for name, found in candidates.items()}
        )

    def __len__(self) -> int:
        return len(self._candidates)

    def __contains__(self, name: str) -> bool:
        return name in self._candidates

    def candidates(self, name: str) -> tuple[CSymbolEntry, ...]:
        return self._candidates.get(name, ())

    def is_ambiguous(self, name: str) -> bool:
        return len(self.candidates(name)) > 1


def _describe(entries: Iterable[CSymbolEntry]) -> str:
    return ", ".join(f"{entry.name} ({entry.location})" for entry in entries)


def _diagnostic(site: AliasSite, kind: DiagnosticKind, message: str, symbol: str | None):
    return Diagnostic(
        kind=kind,
        message=message,
        file_id=site.file_id,
        line=site.start_line,
        symbol=symbol,
    )


def match_site(site: AliasSite, table: SymbolTable) -> tuple[MatchResult | None, Diagnostic | None]:
    """Resolve one site; exactly one of the returned values is set."""
    matched: list[tuple[str, CSymbolEntry]] = []
    for alias in site.aliases:
        candidates = table.candidates(alias)
        if not candidates:
            continue
        if len(candidates) > 1:
            return None, _diagnostic(
                site,
                DiagnosticKind.AMBIGUOUS_MATCH,
                f"{site.label}: C symbol '{alias}' has conflicting documentation in "
                f"{_describe(candidates)}; not importing",
                alias,
            )
        matched.append((alias, candidates[0]))

    if not matched:
        quoted = ", ".join(f"'{alias}'" for alias in site.aliases)
        return None, _diagnostic(
            site,
            DiagnosticKind.UNMATCHED_ALIAS,
            f"{site.label}: no documented C symbol for alias {quoted}",
            site.aliases[0],
        )

    texts = {entry.doc_lines for _, entry in matched}
    if len(texts) > 1:
        return None, _diagnostic(
            site,
            DiagnosticKind.AMBIGUOUS_MATCH,
            f"{site.label}: aliases resolve to different documentation in "
            f"{_describe(entry for _, entry in matched)}; not importing",
            matched[0][0],
        )

    alias, entry = matched[0]
    return MatchResult(site=site, entry=entry, alias=alias), None


def match_sites(
    sites: Iterable[AliasSite], entries: Iterable[CSymbolEntry] | SymbolTable
) -> tuple[list[MatchResult], list[Diagnostic]]:
    """Match every site against the full symbol table, keeping scan order."""
    table = entries if isinstance(entries, SymbolTable) else SymbolTable(entries)
    results: list[MatchResult] = []
    diagnostics: list[Diagnostic] = []
    for site in sites:
        result, diagnostic = match_site(site, table)
        if result is not None:
            results.append(result)
        if diagnostic is not None:
            diagnostics.append(diagnostic)
    logger.debug("Matched %d sites against %d C symbols", len(results), len(table))
    return results, diagnostics
