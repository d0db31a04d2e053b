from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet

from valuegen.core.contracts import TypeExpression


PRIMITIVE_TYPE_NAMES: FrozenSet[str] = frozenset(
    {
        "bool", "char",
        "f32", "f64",
        "i8", "i16", "i32", "i64", "i128", "isize",
        "u8", "u16", "u32", "u64", "u128", "usize",
        "String",
    }
)


@dataclass(frozen=True)
class PrimitiveNamePolicy:
    """Decides whether text parsing is offered without being asked for.

    Only types whose ``FromStr`` behaviour is standard qualify. The check is
    by rendered name: ``std::string::String`` does not match, and a user type
    that happens to be called ``String`` does.
    """

    names: FrozenSet[str] = PRIMITIVE_TYPE_NAMES

    def is_primitive(self, type_expr: TypeExpression) -> bool:
        return type_expr.text in self.names

    def default_enabled(self, type_expr: TypeExpression) -> bool:
        return self.is_primitive(type_expr)


DEFAULT_PRIMITIVE_POLICY = PrimitiveNamePolicy()
