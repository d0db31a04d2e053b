"""
Decode Rust item declarations into TypeDescriptor values.

Scans the whole token stream, so items nested in modules or function bodies
are found too. A ``struct``, ``enum`` or ``union`` item is recognised by its
keyword followed by a name; its outer attributes and visibility are read
backwards from the keyword.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from valuegen.core.contracts import (
    EnumShape,
    Field,
    GenericParam,
    NamedFields,
    Shape,
    StructShape,
    TypeDescriptor,
    TypeExpression,
    UnionShape,
    UnitFields,
    UnnamedFields,
)
from valuegen.core.exceptions import SourceParseError
from valuegen.harness.lexer import Token, TokenStream

DERIVE_NAME = "ValueObject"
OPTIONS_ATTRIBUTE = "value_object"

_ITEM_KEYWORDS = ("struct", "enum", "union")
_VISIBILITY_SCOPES = ("crate", "self", "super", "in")


@dataclass(frozen=True)
class Attribute:
    """One outer attribute, ``#[path(args)]``; ``args`` are the tokens inside the parentheses."""

    path: str
    args: Tuple[Token, ...]
    start: int


@dataclass
class SourceDeclaration:
    """A type item found in source, with everything the harness needs to process it."""

    name: str
    keyword: str
    start: int
    end: int
    line: int
    column: int
    indent: str
    attributes: List[Attribute] = field(default_factory=list)
    descriptor: Optional[TypeDescriptor] = None
    error: Optional[SourceParseError] = None

    @property
    def derives_value_object(self) -> bool:
        for attr in self.attributes:
            if attr.path == "derive" and DERIVE_NAME in _derive_names(attr.args):
                return True
        return False

    @property
    def option_attributes(self) -> List[Attribute]:
        return [attr for attr in self.attributes if attr.path == OPTIONS_ATTRIBUTE]


def scan_declarations(source: str, *, only_value_objects: bool = True) -> List[SourceDeclaration]:
    """Find type declarations in ``source``.

    Malformed bodies of selected declarations are reported on the declaration
    (``error``) rather than raised, so one bad item does not hide the others.

    Raises:
        SourceParseError: If the text cannot be tokenized or brackets do not balance.
    """
    stream = TokenStream(source)
    found: List[SourceDeclaration] = []

    for index, tok in enumerate(stream.tokens):
        if tok.kind != "ident" or tok.text not in _ITEM_KEYWORDS:
            continue
        name_tok = stream.get(index + 1)
        if name_tok is None or name_tok.kind != "ident" or name_tok.text in _ITEM_KEYWORDS:
            continue
        follower = stream.get(index + 2)
        if follower is None or not (
            follower.is_punct("<") or follower.is_punct("{") or follower.is_punct("(")
            or follower.is_punct(";") or follower.is_ident("where")
        ):
            continue
        if tok.text == "union" and (follower.is_punct("(") or follower.is_punct(";")):
            continue

        first, attributes = _leading_attributes(stream, index)
        start = stream[first].start
        line, column = stream.lines.position(start)
        line_start = stream.lines.line_start(start)
        decl = SourceDeclaration(
            name=name_tok.text,
            keyword=tok.text,
            start=start,
            end=name_tok.end,
            line=line,
            column=column,
            indent=_indent_of(source[line_start:start]),
            attributes=attributes,
        )
        if only_value_objects and not decl.derives_value_object:
            continue

        try:
            decl.descriptor, decl.end = _parse_item(stream, index)
        except SourceParseError as exc:
            decl.error = exc
        found.append(decl)

    return found


def _indent_of(prefix: str) -> str:
    return prefix[: len(prefix) - len(prefix.lstrip(" \t"))]


def _leading_attributes(stream: TokenStream, keyword_index: int) -> Tuple[int, List[Attribute]]:
    """Walk back over visibility and ``#[...]`` groups; returns (first token index, attributes)."""
    i = keyword_index - 1

    # Visibility: `pub` or `pub(...)`.
    if i >= 0 and stream[i].is_punct(")"):
        open_index = stream.close_of(i)
        if open_index >= 1 and stream[open_index - 1].is_ident("pub"):
            i = open_index - 2
    elif i >= 0 and stream[i].is_ident("pub"):
        i -= 1
    first = i + 1

    attributes: List[Attribute] = []
    while i >= 1 and stream[i].is_punct("]"):
        open_index = stream.close_of(i)
        hash_tok = stream.get(open_index - 1)
        if hash_tok is None or not hash_tok.is_punct("#"):
            break
        attributes.append(_parse_attribute(stream, open_index, i))
        first = open_index - 1
        i = open_index - 2

    attributes.reverse()
    return first, attributes


def _parse_attribute(stream: TokenStream, open_index: int, close_index: int) -> Attribute:
    path_parts: List[str] = []
    j = open_index + 1
    while j < close_index and (stream[j].kind == "ident" or stream[j].is_punct("::")):
        path_parts.append(stream[j].text)
        j += 1
    args: Tuple[Token, ...] = ()
    if j < close_index and stream[j].is_punct("("):
        args = tuple(stream.tokens[j + 1:stream.close_of(j)])
    return Attribute(path="".join(path_parts), args=args, start=stream[open_index - 1].start)


def _derive_names(args: Sequence[Token]) -> List[str]:
    """Last path segment of each derive entry: ``serde::Serialize`` -> ``Serialize``."""
    names: List[str] = []
    for segment in split_top_level(list(args)):
        idents = [t.text for t in segment if t.kind == "ident"]
        if idents:
            names.append(idents[-1])
    return names


def split_top_level(tokens: List[Token]) -> List[List[Token]]:
    """Split on commas outside any bracket or angle-bracket nesting; empty segments are dropped."""
    segments: List[List[Token]] = []
    current: List[Token] = []
    depth = 0
    angle = 0
    for tok in tokens:
        if tok.kind == "punct":
            if tok.text in "([{":
                depth += 1
            elif tok.text in ")]}":
                depth -= 1
            elif depth == 0 and tok.text == "<":
                angle += 1
            elif depth == 0 and tok.text == ">" and angle:
                angle -= 1
            elif depth == 0 and angle == 0 and tok.text == ",":
                if current:
                    segments.append(current)
                current = []
                continue
        current.append(tok)
    if current:
        segments.append(current)
    return segments


def _tokens_text(tokens: Sequence[Token]) -> str:
    return " ".join(t.text for t in tokens)


def _parse_item(stream: TokenStream, keyword_index: int) -> Tuple[TypeDescriptor, int]:
    """Parse ``keyword Name<generics> [where ...] body``; returns the descriptor and end offset."""
    keyword = stream[keyword_index].text
    name = stream[keyword_index + 1].text
    i = keyword_index + 2

    generics: Tuple[GenericParam, ...] = ()
    if stream[i].is_punct("<"):
        close = _angle_close(stream, i)
        generics = tuple(
            GenericParam(_tokens_text(seg)) for seg in split_top_level(stream.tokens[i + 1:close])
        )
        i = close + 1

    tok = _expect(stream, i, name)
    if keyword == "struct" and tok.is_punct("("):
        close = stream.close_of(i)
        fields = _unnamed_fields(stream.tokens[i + 1:close], stream)
        i = _skip_where(stream, close + 1, name, stops=(";",))
        end_tok = _expect(stream, i, name)
        if not end_tok.is_punct(";"):
            raise stream.error(f"expected `;` after tuple struct `{name}`", end_tok.start)
        return TypeDescriptor(name=name, shape=StructShape(fields), generics=generics), end_tok.end

    if tok.is_ident("where"):
        i = _skip_where(stream, i, name, stops=("{", ";"))
        tok = _expect(stream, i, name)

    if tok.is_punct(";"):
        if keyword != "struct":
            raise stream.error(f"`{keyword} {name}` needs a body", tok.start)
        return TypeDescriptor(name=name, shape=StructShape(UnitFields()), generics=generics), tok.end

    if not tok.is_punct("{"):
        raise stream.error(f"unexpected {tok.text!r} in declaration of `{name}`", tok.start)

    close = stream.close_of(i)
    shape: Shape
    if keyword == "enum":
        shape = EnumShape()
    elif keyword == "union":
        shape = UnionShape()
    else:
        shape = StructShape(_named_fields(stream.tokens[i + 1:close], stream))
    return TypeDescriptor(name=name, shape=shape, generics=generics), stream[close].end


def _expect(stream: TokenStream, index: int, name: str) -> Token:
    tok = stream.get(index)
    if tok is None:
        raise stream.error(f"unexpected end of input in declaration of `{name}`", len(stream.source))
    return tok


def _angle_close(stream: TokenStream, open_index: int) -> int:
    depth = 0
    i = open_index
    while i < len(stream):
        tok = stream[i]
        if tok.kind == "punct":
            if tok.text in "([{":
                i = stream.close_of(i) + 1
                continue
            if tok.text in ")]};":
                break
            if tok.text == "<":
                depth += 1
            elif tok.text == ">":
                depth -= 1
                if depth == 0:
                    return i
        i += 1
    raise stream.error("unclosed generic parameter list", stream[open_index].start)


def _skip_where(stream: TokenStream, index: int, name: str, *, stops: Tuple[str, ...]) -> int:
    """Skip a ``where`` clause starting at ``index`` (if any); returns the index of the stop token."""
    tok = stream.get(index)
    if tok is None or not tok.is_ident("where"):
        return index
    i = index + 1
    while i < len(stream):
        tok = stream[i]
        if tok.kind == "punct" and tok.text in stops:
            return i
        if tok.kind == "punct" and tok.text in "([":
            i = stream.close_of(i) + 1
            continue
        i += 1
    raise stream.error(f"unterminated where clause on `{name}`", stream[index].start)


def _strip_field_prefix(tokens: List[Token]) -> List[Token]:
    """Drop field attributes and visibility."""
    i = 0
    while i + 1 < len(tokens) and tokens[i].is_punct("#") and tokens[i + 1].is_punct("["):
        depth = 0
        j = i + 1
        while j < len(tokens):
            if tokens[j].is_punct("["):
                depth += 1
            elif tokens[j].is_punct("]"):
                depth -= 1
                if depth == 0:
                    break
            j += 1
        i = j + 1
    if i < len(tokens) and tokens[i].is_ident("pub"):
        i += 1
        if (
            i + 1 < len(tokens)
            and tokens[i].is_punct("(")
            and tokens[i + 1].kind == "ident"
            and tokens[i + 1].text in _VISIBILITY_SCOPES
        ):
            depth = 0
            while i < len(tokens):
                if tokens[i].is_punct("("):
                    depth += 1
                elif tokens[i].is_punct(")"):
                    depth -= 1
                    if depth == 0:
                        break
                i += 1
            i += 1
    return tokens[i:]


def _unnamed_fields(tokens: List[Token], stream: TokenStream) -> UnnamedFields:
    fields: List[Field] = []
    for segment in split_top_level(tokens):
        type_tokens = _strip_field_prefix(segment)
        if not type_tokens:
            raise stream.error("tuple field without a type", segment[0].start)
        fields.append(Field(type=TypeExpression(_tokens_text(type_tokens))))
    return UnnamedFields(tuple(fields))


def _named_fields(tokens: List[Token], stream: TokenStream) -> NamedFields:
    fields: List[Field] = []
    for segment in split_top_level(tokens):
        rest = _strip_field_prefix(segment)
        if len(rest) < 3 or rest[0].kind != "ident" or not rest[1].is_punct(":"):
            raise stream.error("expected `name: Type` field", segment[0].start)
        fields.append(Field(type=TypeExpression(_tokens_text(rest[2:])), name=rest[0].text))
    return NamedFields(tuple(fields))
