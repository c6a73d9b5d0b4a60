#!/usr/bin/env python3

"""Entry points tying the scanner, index, matcher and rewriter together."""

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor

from docport.c_index import CIndexer, index_c
from docport.config import DocPortConfig
from docport.matcher import SymbolTable, match_sites
from docport.models import (
    AliasSite,
    CSymbolEntry,
    Diagnostic,
    MatchResult,
    PipelineReport,
    RewriteResult,
)
from docport.rewriter import DocRewriter
from docport.rust_scanner import RustScanner, scan_rust

logger = logging.getLogger(__name__)

__all__ = ["index_c", "match_and_rewrite", "run_pipeline", "scan_rust"]


def match_and_rewrite(
    all_alias_sites: Iterable[AliasSite],
    all_c_entries: Iterable[CSymbolEntry],
    original_rust_texts: Mapping[str, str],
) -> tuple[list[RewriteResult], list[Diagnostic]]:
    """Match every site and rewrite every supplied Rust text.

    Returns one result per entry of ``original_rust_texts``, in its order.
    Texts without matches come back unchanged.
    """
    results, diagnostics = match_sites(all_alias_sites, SymbolTable(all_c_entries))

    by_file: dict[str, list[MatchResult]] = defaultdict(list)
    for result in results:
        by_file[result.site.file_id].append(result)
    unknown = set(by_file) - set(original_rust_texts)
    if unknown:
        raise ValueError(f"alias sites refer to files without source text: {sorted(unknown)}")

    rewriter = DocRewriter()
    rewrites = [
        rewriter.rewrite(file_id, text, by_file.get(file_id, []))
        for file_id, text in original_rust_texts.items()
    ]
    return rewrites, diagnostics


def _scan_all(scan, sources: Mapping[str, str], jobs: int) -> list[tuple[list, list[Diagnostic]]]:
    items = list(sources.items())
    if jobs <= 1 or len(items) <= 1:
        return [scan(file_id, text) for file_id, text in items]
    with ThreadPoolExecutor(max_workers=jobs) as executor:
        return list(executor.map(lambda item: scan(*item), items))


def run_pipeline(
    rust_sources: Mapping[str, str],
    c_sources: Mapping[str, str],
    config: DocPortConfig | None = None,
    jobs: int = 1,
) -> PipelineReport:
    """Scan, index, match and rewrite in-memory sources.

    Scanning may run on ``jobs`` threads; matching waits until every C file
    is indexed, since any of them may document any alias.
    """
    config = config or DocPortConfig()
    scanner = RustScanner(config)
    indexer = CIndexer(config)

    diagnostics: list[Diagnostic] = []
    sites: list[AliasSite] = []
    for found, problems in _scan_all(scanner.scan, rust_sources, jobs):
        sites.extend(found)
        diagnostics.extend(problems)

    entries: list[CSymbolEntry] = []
    for found, problems in _scan_all(indexer.index, c_sources, jobs):
        entries.extend(found)
        diagnostics.extend(problems)

    logger.info(
        "Scanned %d Rust files (%d alias sites) and %d C files (%d documented symbols)",
        len(rust_sources),
        len(sites),
        len(c_sources),
        len(entries),
    )

    rewrites, match_diagnostics = match_and_rewrite(sites, entries, rust_sources)
    diagnostics.extend(match_diagnostics)
    return PipelineReport(
        rewrites=rewrites,
        diagnostics=diagnostics,
        sites=len(sites),
        entries=len(entries),
    )
