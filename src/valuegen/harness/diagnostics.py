from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from valuegen.core.exceptions import ValueGenError


@dataclass(frozen=True)
class Diagnostic:
    """A failure tied to one declaration; ``line``/``column`` are None for manifest entries."""

    name: str
    message: str
    error: ValueGenError
    line: Optional[int] = None
    column: Optional[int] = None

    def format(self, origin: str = "<input>") -> str:
        if self.line is None:
            return f"{origin}: error: {self.name}: {self.message}"
        return f"{origin}:{self.line}:{self.column}: error: {self.message}"

    @classmethod
    def from_error(
        cls,
        name: str,
        error: ValueGenError,
        *,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> "Diagnostic":
        message = getattr(error, "reason", None) or str(error)
        return cls(name=name, message=message, error=error, line=line, column=column)
