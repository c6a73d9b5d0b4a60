#!/usr/bin/env python3

"""Render Doxygen-flavoured comment text as Markdown for rustdoc.

Only the structural commands are rewritten: brief/details markers are
dropped, ``@param`` entries become a "Parameters" list and ``@return`` /
``@retval`` become a "Returns" section. Anything else is passed through.
"""

import re

_COMMAND = r"[@\\]"

_BRIEF_RE = re.compile(rf"^{_COMMAND}(?:brief|short|details)\b\s*")
_PARAM_RE = re.compile(rf"^{_COMMAND}param(?:\s*\[(?P<dir>[a-z, ]+)\])?\s+(?P<name>[\w.]+)\s*(?P<text>.*)$")
_RETURN_RE = re.compile(rf"^{_COMMAND}(?:returns?|result)\b\s*(?P<text>.*)$")
_RETVAL_RE = re.compile(rf"^{_COMMAND}retval\s+(?P<value>\S+)\s*(?P<text>.*)$")
_ANY_COMMAND_RE = re.compile(rf"^{_COMMAND}[a-zA-Z]+\b")


class _Section:
    def __init__(self):
        self.items: list[list[str]] = []

    def start(self, first: str) -> None:
        self.items.append([first])

    def extend(self, line: str) -> None:
        self.items[-1].append(line)

    def render(self) -> list[str]:
        return [" ".join(part for part in item if part) for item in self.items]


def _param_item(match: re.Match) -> str:
    direction = match.group("dir")
    label = f"`{match.group('name')}`"
    if direction:
        label += f" ({direction.replace(' ', '')})"
    text = match.group("text").strip()
    return f"* {label} {text}".rstrip()


def to_markdown(lines: list[str]) -> list[str]:
    """Convert stripped Doxygen comment lines to Markdown lines."""
    body: list[str] = []
    params = _Section()
    returns: list[str] = []
    retvals = _Section()
    current: _Section | list[str] | None = None

    for raw in lines:
        line = raw.strip()
        if not line:
            current = None
            if body and body[-1]:
                body.append("")
            continue

        param = _PARAM_RE.match(line)
        retval = _RETVAL_RE.match(line)
        ret = _RETURN_RE.match(line)
        if param:
            params.start(_param_item(param))
            current = params
        elif retval:
            retvals.start(f"* `{retval.group('value')}` {retval.group('text').strip()}".rstrip())
            current = retvals
        elif ret:
            returns.append(ret.group("text").strip())
            current = returns
        elif isinstance(current, _Section) and not _ANY_COMMAND_RE.match(line):
            current.extend(line)
        elif current is returns and not _ANY_COMMAND_RE.match(line):
            returns.append(line)
        else:
            current = None
            body.append(_BRIEF_RE.sub("", raw.rstrip()))

    while body and not body[-1]:
        body.pop()

    result = list(body)
    if params.items:
        if result:
            result.append("")
        result += ["# Parameters", ""] + params.render()
    if returns or retvals.items:
        if result:
            result.append("")
        result += ["# Returns", ""]
        text = " ".join(part for part in returns if part)
        if text:
            result.append(text)
        if retvals.items:
            if text:
                result.append("")
            result += retvals.render()
    return result
