"""
Tokenizer for Rust source text.

Only as much of the Rust lexical grammar as item scanning needs: identifiers
(raw ones included), lifetimes, literals, and punctuation, with comments and
whitespace dropped. Bracket pairs are matched once so callers can jump over
whole groups.
"""

from __future__ import annotations

import bisect
import re
from dataclasses import dataclass
from typing import Dict, List, Literal, Tuple

from valuegen.core.exceptions import SourceParseError

TokenKind = Literal["ident", "lifetime", "literal", "punct"]

_IDENT_RE = re.compile(r"(?:r#)?[^\W\d]\w*")
_NUMBER_RE = re.compile(r"\d[0-9A-Za-z_]*(?:\.\d[0-9A-Za-z_]*)?")
_RAW_STRING_RE = re.compile(r'(?:br|cr|r)(#*)"')
_STRING_PREFIX_RE = re.compile(r'(?:b|c)?"')
_MULTI_PUNCT = ("::", "->", "=>")

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = {v: k for k, v in _OPENERS.items()}


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    start: int
    end: int

    def is_punct(self, text: str) -> bool:
        return self.kind == "punct" and self.text == text

    def is_ident(self, text: str) -> bool:
        return self.kind == "ident" and self.text == text


class LineIndex:
    """Maps character offsets to 1-based (line, column) pairs."""

    def __init__(self, source: str):
        self._starts = [0] + [m.end() for m in re.finditer(r"\n", source)]

    def position(self, offset: int) -> Tuple[int, int]:
        line = bisect.bisect_right(self._starts, offset)
        return line, offset - self._starts[line - 1] + 1

    def line_start(self, offset: int) -> int:
        return self._starts[bisect.bisect_right(self._starts, offset) - 1]


class TokenStream:
    """Tokens of one source text plus the index of matching brackets."""

    def __init__(self, source: str):
        self.source = source
        self.lines = LineIndex(source)
        self.tokens: List[Token] = _tokenize(source, self.lines)
        self.matches: Dict[int, int] = _match_groups(self.tokens, self.lines)

    def __len__(self) -> int:
        return len(self.tokens)

    def __getitem__(self, index: int) -> Token:
        return self.tokens[index]

    def get(self, index: int) -> Token | None:
        if 0 <= index < len(self.tokens):
            return self.tokens[index]
        return None

    def close_of(self, index: int) -> int:
        """Index of the bracket closing the group opened at ``index``."""
        return self.matches[index]

    def error(self, message: str, offset: int) -> SourceParseError:
        line, column = self.lines.position(offset)
        return SourceParseError(message, line, column)


def _tokenize(source: str, lines: LineIndex) -> List[Token]:
    tokens: List[Token] = []
    i = 0
    n = len(source)

    def fail(message: str, offset: int) -> SourceParseError:
        line, column = lines.position(offset)
        return SourceParseError(message, line, column)

    while i < n:
        ch = source[i]
        if ch.isspace():
            i += 1
            continue

        if source.startswith("//", i):
            newline = source.find("\n", i)
            i = n if newline < 0 else newline
            continue

        if source.startswith("/*", i):
            depth = 0
            j = i
            while j < n:
                if source.startswith("/*", j):
                    depth += 1
                    j += 2
                elif source.startswith("*/", j):
                    depth -= 1
                    j += 2
                    if depth == 0:
                        break
                else:
                    j += 1
            if depth:
                raise fail("unterminated block comment", i)
            i = j
            continue

        m = _RAW_STRING_RE.match(source, i)
        if m:
            terminator = '"' + m.group(1)
            close = source.find(terminator, m.end())
            if close < 0:
                raise fail("unterminated raw string literal", i)
            end = close + len(terminator)
            tokens.append(Token("literal", source[i:end], i, end))
            i = end
            continue

        m = _STRING_PREFIX_RE.match(source, i)
        if m:
            j = m.end()
            while j < n and source[j] != '"':
                j += 2 if source[j] == "\\" else 1
            if j >= n:
                raise fail("unterminated string literal", i)
            tokens.append(Token("literal", source[i:j + 1], i, j + 1))
            i = j + 1
            continue

        if ch == "'" or source.startswith("b'", i):
            quote = i if ch == "'" else i + 1
            end = _char_literal_end(source, quote)
            if end is not None:
                tokens.append(Token("literal", source[i:end], i, end))
                i = end
                continue
            if ch == "'":
                m = _IDENT_RE.match(source, i + 1)
                if not m:
                    raise fail("stray quote", i)
                tokens.append(Token("lifetime", source[i:m.end()], i, m.end()))
                i = m.end()
                continue

        m = _IDENT_RE.match(source, i)
        if m:
            tokens.append(Token("ident", m.group(0), i, m.end()))
            i = m.end()
            continue

        m = _NUMBER_RE.match(source, i)
        if m:
            tokens.append(Token("literal", m.group(0), i, m.end()))
            i = m.end()
            continue

        for punct in _MULTI_PUNCT:
            if source.startswith(punct, i):
                tokens.append(Token("punct", punct, i, i + len(punct)))
                i += len(punct)
                break
        else:
            tokens.append(Token("punct", ch, i, i + 1))
            i += 1

    return tokens


def _char_literal_end(source: str, quote: int) -> int | None:
    """End offset of a char literal starting at ``quote``, None for a lifetime."""
    n = len(source)
    if quote + 1 >= n:
        return None
    if source[quote + 1] == "\\":
        close = source.find("'", quote + 3)
        return None if close < 0 else close + 1
    if quote + 2 < n and source[quote + 2] == "'":
        return quote + 3
    return None


def _match_groups(tokens: List[Token], lines: LineIndex) -> Dict[int, int]:
    matches: Dict[int, int] = {}
    stack: List[int] = []
    for index, tok in enumerate(tokens):
        if tok.kind != "punct":
            continue
        if tok.text in _OPENERS:
            stack.append(index)
        elif tok.text in _CLOSERS:
            if not stack or tokens[stack[-1]].text != _CLOSERS[tok.text]:
                line, column = lines.position(tok.start)
                raise SourceParseError(f"unexpected closing {tok.text!r}", line, column)
            open_index = stack.pop()
            matches[open_index] = index
            matches[index] = open_index
    if stack:
        tok = tokens[stack[-1]]
        line, column = lines.position(tok.start)
        raise SourceParseError(f"unclosed {tok.text!r}", line, column)
    return matches
