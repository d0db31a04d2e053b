"""
Custom exception classes for valuegen.

Provides structured error handling with domain-specific exceptions for the
different stages of generation: shape validation, option decoding and
source reading. Every exception keeps the fields a diagnostic needs, so the
harness can render it against the offending declaration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple


class ValueGenError(Exception):
    """Base exception class for all valuegen exceptions."""

    pass


class ShapeError(ValueGenError):
    """
    Raised when a type declaration is not a single-field, non-generic struct.

    Attributes:
        type_name: Name of the rejected declaration.
    """

    def __init__(self, type_name: str, message: str):
        self.type_name = type_name
        super().__init__(message)


class GenericsNotAllowed(ShapeError):
    def __init__(self, type_name: str):
        super().__init__(type_name, f"Generics not allowed in value object `{type_name}`")


class UnsupportedShape(ShapeError):
    """Raised for enum and union declarations."""

    def __init__(self, type_name: str, shape: str):
        self.shape = shape
        super().__init__(
            type_name,
            f"Value object `{type_name}` must be a struct, {shape} declarations are not supported",
        )


class EmptyShape(ShapeError):
    def __init__(self, type_name: str):
        super().__init__(type_name, f"Value object `{type_name}` is a unit struct and has no field to wrap")


class FieldCount(ShapeError):
    def __init__(self, type_name: str, count: int):
        self.count = count
        super().__init__(
            type_name,
            f"Value object `{type_name}` must contain exactly one field, found {count}",
        )


@dataclass(frozen=True)
class ConfigProblem:
    key: str
    message: str

    def __str__(self) -> str:
        return f"{self.key}: {self.message}"


class ConfigurationError(ValueGenError):
    """
    Raised when the options attached to a declaration are missing or malformed.

    Example:
        >>> raise ConfigurationError(
        ...     type_name="Email",
        ...     problems=[ConfigProblem("load_fn", "Field required")],
        ... )
    """

    def __init__(self, type_name: Optional[str], problems: Iterable[ConfigProblem]):
        self.type_name = type_name
        self.problems: Tuple[ConfigProblem, ...] = tuple(problems)
        details = "; ".join(str(p) for p in self.problems) or "invalid options"
        if type_name:
            message = f"Invalid value_object options for `{type_name}`: {details}"
        else:
            message = f"Invalid value_object options: {details}"
        super().__init__(message)

    @property
    def keys(self) -> Tuple[str, ...]:
        return tuple(p.key for p in self.problems)


class SourceParseError(ValueGenError):
    """Raised when Rust source text cannot be split into items."""

    def __init__(self, message: str, line: int, column: int):
        self.reason = message
        self.line = line
        self.column = column
        super().__init__(f"{message} (line {line}, column {column})")
