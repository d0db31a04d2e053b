import pytest

from valuegen.core.contracts import (
    EnumShape,
    Field,
    GenericParam,
    NamedFields,
    StructShape,
    TypeDescriptor,
    TypeExpression,
    UnionShape,
    UnitFields,
    UnnamedFields,
)
from valuegen.core.exceptions import (
    EmptyShape,
    FieldCount,
    GenericsNotAllowed,
    ShapeError,
    UnsupportedShape,
)
from valuegen.validation.shape_validator import validate


def _field(type_text: str, name=None) -> Field:
    return Field(type=TypeExpression(type_text), name=name)


def test_single_unnamed_field_is_eligible():
    validate(TypeDescriptor.tuple_struct("Value", "String"))


def test_single_named_field_is_eligible():
    validate(TypeDescriptor.named_struct("Email", address="String"))


def test_generics_rejected_even_when_shape_is_fine():
    descriptor = TypeDescriptor(
        name="Wrapper",
        shape=StructShape(UnnamedFields((_field("T"),))),
        generics=(GenericParam("T"),),
    )

    with pytest.raises(GenericsNotAllowed, match="Wrapper"):
        validate(descriptor)


def test_generics_checked_before_shape():
    descriptor = TypeDescriptor(name="Choice", shape=EnumShape(), generics=(GenericParam("T"),))

    with pytest.raises(GenericsNotAllowed):
        validate(descriptor)


@pytest.mark.parametrize("shape, expected", [(EnumShape(), "enum"), (UnionShape(), "union")])
def test_enum_and_union_rejected_with_shape_name(shape, expected):
    with pytest.raises(UnsupportedShape) as exc:
        validate(TypeDescriptor(name="Thing", shape=shape))

    assert exc.value.shape == expected
    assert "Thing" in str(exc.value)
    assert expected in str(exc.value)


def test_unit_struct_rejected():
    with pytest.raises(EmptyShape, match="Marker"):
        validate(TypeDescriptor(name="Marker", shape=StructShape(UnitFields())))


@pytest.mark.parametrize("count", [0, 2, 3])
def test_unnamed_field_count_other_than_one_rejected(count):
    fields = tuple(_field("u8") for _ in range(count))
    descriptor = TypeDescriptor(name="Pair", shape=StructShape(UnnamedFields(fields)))

    with pytest.raises(FieldCount) as exc:
        validate(descriptor)

    assert exc.value.count == count
    assert exc.value.type_name == "Pair"


def test_named_field_count_other_than_one_rejected():
    descriptor = TypeDescriptor.named_struct("Point", x="i32", y="i32")

    with pytest.raises(FieldCount) as exc:
        validate(descriptor)

    assert exc.value.count == 2
    assert "Point" in str(exc.value)
    assert "2" in str(exc.value)


def test_all_shape_errors_share_base_class():
    with pytest.raises(ShapeError):
        validate(TypeDescriptor(name="E", shape=EnumShape()))
