from __future__ import annotations

import re
import textwrap
from typing import Any, Mapping


# Placeholders are ``{{ identifier }}`` only, so Rust format strings such as
# "{}" and "{:?}" pass through untouched.
_IDENTIFIER = r"[A-Za-z_][A-Za-z0-9_]*"
_PATTERN = re.compile(rf"\{{\{{\s*({_IDENTIFIER})\s*\}}\}}")


class TemplateError(KeyError):
    pass


def render_template(template: str, variables: Mapping[str, Any]) -> str:
    """Dedent ``template`` and replace every ``{{var}}`` with ``variables[var]``.

    - Unknown placeholders raise TemplateError; a unit is never emitted
      with a hole in it.
    - Leading and trailing blank lines are dropped.
    """

    def _repl(match: re.Match[str]) -> str:
        key = match.group(1)
        if key not in variables or variables[key] is None:
            raise TemplateError(f"No value for template variable {key!r}")
        return str(variables[key])

    body = textwrap.dedent(template).strip("\n")
    return _PATTERN.sub(_repl, body)
