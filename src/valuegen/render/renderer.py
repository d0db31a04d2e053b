from __future__ import annotations

import textwrap
from typing import Iterable, List, Sequence, Tuple

from valuegen.core.contracts import GeneratedUnit

Insertion = Tuple[int, str, str]  # (offset, indent, text)


def render_units(units: Sequence[GeneratedUnit]) -> str:
    """Join unit code in order, one blank line between units."""
    return "\n\n".join(unit.code for unit in units)


def splice(source: str, insertions: Iterable[Insertion]) -> str:
    """Insert rendered text into ``source`` right after each offset.

    Each block starts after a blank line and is indented like the
    declaration it follows. Offsets refer to the original ``source``.
    """
    parts: List[str] = []
    cursor = 0
    for offset, indent, text in sorted(insertions, key=lambda item: item[0]):
        if not text:
            continue
        parts.append(source[cursor:offset])
        parts.append("\n\n")
        parts.append(textwrap.indent(text, indent) if indent else text)
        cursor = offset
    parts.append(source[cursor:])
    return "".join(parts)
