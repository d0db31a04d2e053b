from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Optional, Tuple, Union

if TYPE_CHECKING:
    from valuegen.models.generation_options import GenerationOptions

CapabilityKind = Literal["serialization", "display", "conversion", "parse"]

# Fixed emission order of capability units.
CAPABILITY_ORDER: Tuple[CapabilityKind, ...] = ("serialization", "display", "conversion", "parse")

_TOKEN = re.compile(r"'?[A-Za-z_][A-Za-z0-9_]*|\d[A-Za-z0-9_]*|::|->|\S")
_WORD = re.compile(r"'?[A-Za-z0-9_]")


def normalize_type_text(text: str) -> str:
    """Render a type with canonical spacing.

    Words are separated by one space; ``,``, ``;`` and a lone ``:`` are
    followed by one space; ``->`` is surrounded by spaces; all other
    punctuation is tight. ``Vec < u8 >`` and ``Vec<u8>`` render the same.
    """
    out: list[str] = []
    prev = ""
    for tok in _TOKEN.findall(text):
        if prev:
            if tok == "->" or prev == "->" or prev in (",", ";", ":"):
                out.append(" ")
            elif _WORD.match(prev) and _WORD.match(tok):
                out.append(" ")
        out.append(tok)
        prev = tok
    return "".join(out)


@dataclass(frozen=True)
class TypeExpression:
    """Textual rendering of a declared type (e.g. ``String``, ``Vec<u8>``)."""

    text: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "text", normalize_type_text(self.text))

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class GenericParam:
    text: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "text", normalize_type_text(self.text))


@dataclass(frozen=True)
class Field:
    type: TypeExpression
    name: Optional[str] = None


@dataclass(frozen=True)
class NamedFields:
    fields: Tuple[Field, ...]


@dataclass(frozen=True)
class UnnamedFields:
    fields: Tuple[Field, ...]


@dataclass(frozen=True)
class UnitFields:
    pass


FieldList = Union[NamedFields, UnnamedFields, UnitFields]


@dataclass(frozen=True)
class StructShape:
    fields: FieldList
    kind: Literal["struct"] = "struct"


@dataclass(frozen=True)
class EnumShape:
    kind: Literal["enum"] = "enum"


@dataclass(frozen=True)
class UnionShape:
    kind: Literal["union"] = "union"


Shape = Union[StructShape, EnumShape, UnionShape]


@dataclass(frozen=True)
class TypeDescriptor:
    """Structural description of one type declaration."""

    name: str
    shape: Shape
    generics: Tuple[GenericParam, ...] = ()

    @classmethod
    def tuple_struct(cls, name: str, *types: str) -> "TypeDescriptor":
        return cls(
            name=name,
            shape=StructShape(UnnamedFields(tuple(Field(TypeExpression(t)) for t in types))),
        )

    @classmethod
    def named_struct(cls, name: str, **fields: str) -> "TypeDescriptor":
        return cls(
            name=name,
            shape=StructShape(
                NamedFields(tuple(Field(TypeExpression(t), name=n) for n, t in fields.items()))
            ),
        )


@dataclass(frozen=True)
class GeneratedUnit:
    kind: CapabilityKind
    type_name: str
    operations: Tuple[str, ...]
    code: str

    def __repr__(self) -> str:
        return f"GeneratedUnit(kind='{self.kind}', type_name='{self.type_name}', operations={self.operations!r})"


@dataclass(frozen=True)
class GenerationContext:
    """Everything a generator needs, resolved once per invocation.

    ``accessor`` is the expression selecting the wrapped value on ``self``:
    ``0`` for tuple structs, the field name for named structs.
    """

    descriptor: TypeDescriptor
    options: "GenerationOptions"
    field: Field
    accessor: str

    @property
    def type_name(self) -> str:
        return self.descriptor.name

    @property
    def inner_type(self) -> TypeExpression:
        return self.field.type

    @classmethod
    def build(cls, descriptor: TypeDescriptor, options: "GenerationOptions") -> "GenerationContext":
        from valuegen.validation.inner_type import resolve_field

        index, field = resolve_field(descriptor)
        accessor = field.name if field.name is not None else str(index)
        return cls(descriptor=descriptor, options=options, field=field, accessor=accessor)
