#!/usr/bin/env python3

"""Turn raw C comment text into documentation lines."""

import re

# Doxygen/Javadoc style openers.
_DOC_PREFIXES = ("/**", "/*!", "///", "//!")

# Doxygen members documented after the fact: ``int x; /**< doc */``.
_TRAILING_PREFIXES = ("/**<", "/*!<", "///<", "//!<")

# Banner lines such as ``*********`` or ``=====`` at the edge of a block.
_DECORATION_RE = re.compile(r"^\s*([*=/\-#~_+])\1*\s*$")

_TRAILING_STARS_RE = re.compile(r"\s\*+$")


def is_line_comment(text: str) -> bool:
    return text.startswith("//")


def is_doc_comment(text: str) -> bool:
    if text.startswith("/**/") or text.startswith("/***") or text.startswith("////"):
        return False
    return text.startswith(_DOC_PREFIXES)


def is_trailing_doc_comment(text: str) -> bool:
    return text.startswith(_TRAILING_PREFIXES)


def _strip_opener(body: str) -> str:
    if body[:1] in ("*", "/", "!"):
        body = body[1:]
    if body[:1] == "<":
        body = body[1:]
    return body


def _line_body(text: str) -> str:
    return _strip_opener(text[2:]).rstrip()


def _block_body(text: str) -> list[str]:
    body = text[2:]
    if body.endswith("*/"):
        body = body[:-2]
        body = _TRAILING_STARS_RE.sub("", body) if body.strip("*") else ""
    body = _strip_opener(body) if body[:1] in ("*", "!") else body
    lines = body.split("\n")
    cleaned = [lines[0]]
    for line in lines[1:]:
        stripped = line.lstrip()
        if stripped.startswith("*"):
            cleaned.append(stripped[1:])
        else:
            cleaned.append(line)
    return cleaned


def _dedent(lines: list[str]) -> list[str]:
    margins = [len(line) - len(line.lstrip()) for line in lines if line.strip()]
    if not margins:
        return ["" for _ in lines]
    margin = min(margins)
    return [line[margin:] if line.strip() else "" for line in lines]


def _trim(lines: list[str]) -> list[str]:
    def is_edge_junk(line: str) -> bool:
        return not line.strip() or bool(_DECORATION_RE.match(line))

    start, end = 0, len(lines)
    while start < end and is_edge_junk(lines[start]):
        start += 1
    while end > start and is_edge_junk(lines[end - 1]):
        end -= 1
    return lines[start:end]


def comment_lines(comments: list[str]) -> list[str]:
    """Strip comment syntax from a comment block and normalize indentation.

    ``comments`` is either a single ``/* */`` comment or a run of ``//``
    comments on consecutive lines. The result has no trailing whitespace,
    no blank or banner lines at either edge, and the common leading
    whitespace removed. An empty list means the block carries no text.
    """
    if not comments:
        return []
    if all(is_line_comment(text) for text in comments):
        lines = _dedent([_line_body(text.rstrip("\r\n")) for text in comments])
    else:
        raw = [line.rstrip() for line in _block_body(comments[-1].replace("\r\n", "\n"))]
        # the opener line is dedented on its own
        lines = [raw[0].strip()] + _dedent(raw[1:])
    return _trim([line.rstrip() for line in lines])
