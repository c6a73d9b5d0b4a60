#!/usr/bin/env python3

"""Parse the alias list out of a Rust outer attribute.

tree-sitter gives us the attribute text; the token stream inside it is small
enough to walk by hand. Only the configured annotation (``doc`` / ``alias`` by
default) is interpreted, every other attribute is skipped.
"""

import re
from typing import NamedTuple


class AttributeSyntaxError(ValueError):
    """Raised when an alias entry inside an attribute cannot be parsed."""


class Token(NamedTuple):
    kind: str  # 'ident', 'str', 'lit', 'punct'
    value: str


class AliasAttribute(NamedTuple):
    """Aliases found in one attribute plus the entries that failed to parse."""

    aliases: list[str]
    problems: list[str]


_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
  | r(?P<hashes>\#*)"(?P<raw>.*?)"(?P=hashes)
  | (?P<str>"(?:\\.|[^"\\])*")
  | (?P<ident>[A-Za-z_][A-Za-z0-9_]*(?:::[A-Za-z_][A-Za-z0-9_]*)*)
  | (?P<lit>[0-9][A-Za-z0-9_.]*)
  | (?P<punct>.)
    """,
    re.VERBOSE | re.DOTALL,
)

_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "0": "\0",
    "\\": "\\",
    "'": "'",
    '"': '"',
}

_ESCAPE_RE = re.compile(r"\\(u\{[0-9A-Fa-f_]{1,8}\}|x[0-9A-Fa-f]{2}|\n\s*|.)")

_OPEN = {"(": ")", "[": "]", "{": "}"}


def _unescape(body: str) -> str:
    def replace(match: re.Match) -> str:
        escape = match.group(1)
        if escape.startswith("u{"):
            return chr(int(escape[2:-1].replace("_", ""), 16))
        if escape.startswith("x") and len(escape) == 3:
            return chr(int(escape[1:], 16))
        if escape.startswith("\n"):
            return ""  # line continuation
        return _ESCAPES.get(escape, "\\" + escape)

    return _ESCAPE_RE.sub(replace, body)


def tokenize(text: str) -> list[Token]:
    """Split attribute text into identifier, string, literal and punctuation tokens."""
    tokens = []
    for match in _TOKEN_RE.finditer(text):
        if match.group("ws"):
            continue
        if match.group("raw") is not None:
            tokens.append(Token("str", match.group("raw")))
        elif match.group("str"):
            tokens.append(Token("str", _unescape(match.group("str")[1:-1])))
        elif match.group("ident"):
            tokens.append(Token("ident", match.group("ident")))
        elif match.group("lit"):
            tokens.append(Token("lit", match.group("lit")))
        else:
            tokens.append(Token("punct", match.group("punct")))
    return tokens


def _split_top_level(tokens: list[Token]) -> list[list[Token]]:
    """Split a token list on commas that are not nested inside brackets."""
    groups: list[list[Token]] = [[]]
    stack: list[str] = []
    for token in tokens:
        if token.kind == "punct" and token.value in _OPEN:
            stack.append(_OPEN[token.value])
        elif token.kind == "punct" and token.value in _OPEN.values():
            if not stack or stack.pop() != token.value:
                raise AttributeSyntaxError(f"unbalanced '{token.value}'")
        elif token.kind == "punct" and token.value == "," and not stack:
            groups.append([])
            continue
        groups[-1].append(token)
    if stack:
        raise AttributeSyntaxError(f"missing '{stack[-1]}'")
    return [group for group in groups if group]


def _parenthesized(tokens: list[Token], start: int) -> list[Token] | None:
    """Return the tokens between a '(' at ``start`` and the final ')'."""
    if start >= len(tokens) or tokens[start] != Token("punct", "("):
        return None
    if tokens[-1] != Token("punct", ")"):
        raise AttributeSyntaxError("missing ')'")
    return tokens[start + 1 : -1]


def _describe(tokens: list[Token]) -> str:
    return " ".join(token.value for token in tokens) or "nothing"


class _AliasParser:
    def __init__(self, path: str, key: str):
        self.path = path
        self.key = key
        self.aliases: list[str] = []
        self.problems: list[str] = []

    def meta(self, tokens: list[Token]) -> None:
        """Interpret one meta item such as ``doc(...)`` or ``cfg_attr(...)``."""
        if not tokens or tokens[0].kind != "ident":
            return
        name = tokens[0].value
        if name == self.path:
            try:
                inner = _parenthesized(tokens, 1)
                if inner is None:
                    return
                groups = _split_top_level(inner)
            except AttributeSyntaxError as exc:
                if any(t == Token("ident", self.key) for t in tokens):
                    self.problems.append(str(exc))
                return
            for group in groups:
                if group[0] == Token("ident", self.key):
                    try:
                        self.aliases.extend(self._alias_entry(group))
                    except AttributeSyntaxError as exc:
                        self.problems.append(str(exc))
        elif name == "cfg_attr":
            try:
                inner = _parenthesized(tokens, 1)
                if inner is None:
                    return
                groups = _split_top_level(inner)
            except AttributeSyntaxError:
                return
            # first group is the cfg predicate
            for group in groups[1:]:
                self.meta(group)

    def _alias_entry(self, group: list[Token]) -> list[str]:
        rest = group[1:]
        if not rest:
            raise AttributeSyntaxError(f"'{self.key}' needs a value")
        if rest[0] == Token("punct", "="):
            if len(rest) == 2 and rest[1].kind == "str":
                return [rest[1].value]
            raise AttributeSyntaxError(
                f"expected a string after '{self.key} =', found {_describe(rest[1:])}"
            )
        if rest[0] == Token("punct", "("):
            if rest[-1] != Token("punct", ")"):
                raise AttributeSyntaxError(f"missing ')' after '{self.key}('")
            values = []
            for item in _split_top_level(rest[1:-1]):
                if len(item) != 1 or item[0].kind != "str":
                    raise AttributeSyntaxError(
                        f"expected a string in '{self.key}(...)', found {_describe(item)}"
                    )
                values.append(item[0].value)
            if not values:
                raise AttributeSyntaxError(f"'{self.key}(...)' is empty")
            return values
        raise AttributeSyntaxError(
            f"expected '=' or '(' after '{self.key}', found {_describe(rest)}"
        )


def _attribute_body(text: str) -> list[Token] | None:
    tokens = tokenize(text)
    if len(tokens) < 3 or tokens[0] != Token("punct", "#"):
        return None
    if tokens[1] != Token("punct", "[") or tokens[-1] != Token("punct", "]"):
        return None
    return tokens[2:-1]


def parse_aliases(text: str, path: str = "doc", key: str = "alias") -> AliasAttribute:
    """Extract alias strings from ``#[...]`` attribute text.

    Attributes that are not alias annotations yield no aliases and no
    problems. Broken alias entries are reported in ``problems`` while the
    well-formed ones in the same attribute are still returned.
    """
    body = _attribute_body(text)
    if body is None:
        return AliasAttribute([], [])
    parser = _AliasParser(path, key)
    parser.meta(body)
    return AliasAttribute(parser.aliases, parser.problems)


def is_doc_attribute(text: str) -> bool:
    """True for ``#[doc = "..."]``, the desugared form of a doc comment."""
    body = _attribute_body(text)
    return (
        body is not None
        and len(body) >= 2
        and body[0] == Token("ident", "doc")
        and body[1] == Token("punct", "=")
    )
