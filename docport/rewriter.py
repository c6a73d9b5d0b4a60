#!/usr/bin/env python3

"""Insert imported documentation above matched Rust items."""

import logging
from collections.abc import Sequence

from docport.models import MatchResult, RewriteResult

logger = logging.getLogger(__name__)


def render_doc_block(doc_lines: Sequence[str], indent: str = "") -> list[str]:
    """Render documentation lines as ``///`` comment lines without newlines."""
    return [f"{indent}///" if not line else f"{indent}/// {line}" for line in doc_lines]


def _contains_run(haystack: Sequence[str], needle: Sequence[str]) -> bool:
    if not needle or len(needle) > len(haystack):
        return False
    width = len(needle)
    return any(
        tuple(haystack[start : start + width]) == tuple(needle)
        for start in range(len(haystack) - width + 1)
    )


def already_imported(match: MatchResult) -> bool:
    """True if the item's existing docs already hold this exact block.

    Derived from the text alone, so it holds across separate runs.
    """
    candidate = [line.strip() for line in render_doc_block(match.entry.doc_lines)]
    return _contains_run(match.site.doc_lines, candidate)


class DocRewriter:
    """Applies all insertions for one file in a single pass."""

    def rewrite(self, file_id: str, text: str, matches: Sequence[MatchResult]) -> RewriteResult:
        newline = "\r\n" if "\r\n" in text else "\n"
        inserts: list[tuple[int, int, str]] = []
        skipped = 0

        for order, match in enumerate(matches):
            if match.site.file_id != file_id:
                raise ValueError(f"match for {match.site.file_id} passed with {file_id}")
            if already_imported(match):
                logger.debug(
                    "%s:%d already documented from %s",
                    file_id,
                    match.site.anchor_line,
                    match.entry.location,
                )
                skipped += 1
                continue
            lines = render_doc_block(match.entry.doc_lines, match.site.indent)
            block = "".join(line + newline for line in lines)
            inserts.append((match.site.anchor_offset, order, block))

        if not inserts:
            return RewriteResult(file_id=file_id, text=text, skipped=skipped)

        # Offsets all refer to the original text.
        inserts.sort()
        pieces: list[str] = []
        cursor = 0
        for offset, _, block in inserts:
            pieces.append(text[cursor:offset])
            pieces.append(block)
            cursor = offset
        pieces.append(text[cursor:])

        logger.debug("Inserted %d doc blocks into %s", len(inserts), file_id)
        return RewriteResult(
            file_id=file_id,
            text="".join(pieces),
            insertions=len(inserts),
            skipped=skipped,
        )


def rewrite_source(
    file_id: str,
    text: str,
    matches: Sequence[MatchResult],
) -> RewriteResult:
    """Return ``text`` with documentation inserted for every match."""
    return DocRewriter().rewrite(file_id, text, matches)
