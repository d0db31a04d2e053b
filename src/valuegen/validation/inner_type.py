from __future__ import annotations

from typing import Tuple

from valuegen.core.contracts import Field, TypeDescriptor, TypeExpression
from valuegen.validation.shape_validator import sole_field


def resolve_field(descriptor: TypeDescriptor) -> Tuple[int, Field]:
    """Return ``(position, field)`` of the wrapped field.

    Shape and field count are re-checked here so callers do not depend on a
    prior ``validate`` call. Generics are not looked at.
    """
    return sole_field(descriptor)


def resolve(descriptor: TypeDescriptor) -> TypeExpression:
    """Return the declared type of the single field of ``descriptor``."""
    _, field = resolve_field(descriptor)
    return field.type
