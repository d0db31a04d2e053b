from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Optional

from valuegen.core.exceptions import ConfigProblem, ConfigurationError
from valuegen.harness.lexer import Token
from valuegen.harness.rust_source import Attribute, split_top_level

_RAW_STRING_RE = re.compile(r'^r(#*)"(.*)"\1$', re.DOTALL)
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", "\\": "\\", '"': '"', "'": "'"}
_ESCAPE_RE = re.compile(r"\\(?:u\{([0-9A-Fa-f][0-9A-Fa-f_]{0,5})\}|x([0-9A-Fa-f]{2})|(.))", re.DOTALL)


def _unescape(body: str) -> str:
    """Decode Rust string escapes, including ``\\u{HEX}`` and ``\\xHH``."""

    def replace(m: "re.Match[str]") -> str:
        unicode_hex, byte_hex, simple = m.groups()
        if unicode_hex is not None:
            code = int(unicode_hex.replace("_", ""), 16)
            return chr(code) if code <= 0x10FFFF else m.group(0)
        if byte_hex is not None:
            return chr(int(byte_hex, 16))
        return _ESCAPES.get(simple, simple)

    return _ESCAPE_RE.sub(replace, body)


def literal_value(tok: Token) -> Any:
    """Python value of a string or boolean literal token; None for anything else."""
    if tok.kind == "ident" and tok.text in ("true", "false"):
        return tok.text == "true"
    if tok.kind != "literal":
        return None
    m = _RAW_STRING_RE.match(tok.text)
    if m:
        return m.group(2)
    if tok.text.startswith('"') and tok.text.endswith('"') and len(tok.text) >= 2:
        return _unescape(tok.text[1:-1])
    return None


def parse_option_attributes(attributes: Iterable[Attribute], *, type_name: Optional[str] = None) -> Dict[str, Any]:
    """Collect ``key = value`` pairs from every ``#[value_object(...)]`` attribute.

    A bare ``key`` means ``key = true``. Keys may appear only once across all
    attributes. Unknown keys are kept here and rejected when the options are
    validated.

    Raises:
        ConfigurationError: On duplicate keys or values that are not string or bool literals.
    """
    raw: Dict[str, Any] = {}
    problems: List[ConfigProblem] = []

    for attr in attributes:
        for segment in split_top_level(list(attr.args)):
            key_tok = segment[0]
            if key_tok.kind != "ident":
                problems.append(ConfigProblem(key_tok.text, "expected an option name"))
                continue
            key = key_tok.text
            if len(segment) == 1:
                value: Any = True
            elif len(segment) == 3 and segment[1].is_punct("="):
                value = literal_value(segment[2])
                if value is None:
                    problems.append(ConfigProblem(key, f"expected a string or bool literal, got {segment[2].text}"))
                    continue
            else:
                problems.append(ConfigProblem(key, "expected `key = \"value\"`"))
                continue
            if key in raw:
                problems.append(ConfigProblem(key, "duplicate option"))
                continue
            raw[key] = value

    if problems:
        raise ConfigurationError(type_name, problems)
    return raw
