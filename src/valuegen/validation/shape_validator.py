from __future__ import annotations

from typing import Tuple

from valuegen.core.contracts import (
    EnumShape,
    Field,
    NamedFields,
    TypeDescriptor,
    UnionShape,
    UnitFields,
    UnnamedFields,
)
from valuegen.core.exceptions import EmptyShape, FieldCount, GenericsNotAllowed, UnsupportedShape


def validate(descriptor: TypeDescriptor) -> None:
    """Check that ``descriptor`` can be wrapped as a value object.

    Rules are checked in order and the first violation is raised:
    generics, enum, union, unit struct, field count other than one.

    Raises:
        GenericsNotAllowed, UnsupportedShape, EmptyShape, FieldCount
    """
    if descriptor.generics:
        raise GenericsNotAllowed(descriptor.name)
    sole_field(descriptor)


def sole_field(descriptor: TypeDescriptor) -> Tuple[int, Field]:
    """Apply the shape and field-count rules and return the only field with its position."""
    shape = descriptor.shape
    if isinstance(shape, EnumShape):
        raise UnsupportedShape(descriptor.name, "enum")
    if isinstance(shape, UnionShape):
        raise UnsupportedShape(descriptor.name, "union")

    fields = shape.fields
    if isinstance(fields, UnitFields):
        raise EmptyShape(descriptor.name)
    if isinstance(fields, (NamedFields, UnnamedFields)):
        if len(fields.fields) != 1:
            raise FieldCount(descriptor.name, len(fields.fields))
        return 0, fields.fields[0]

    raise TypeError(f"Unsupported field list for {descriptor.name!r}: {fields!r}")
