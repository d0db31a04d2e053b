from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from valuegen.core.contracts import (
    EnumShape,
    Field as DescriptorField,
    GenericParam,
    NamedFields,
    Shape,
    StructShape,
    TypeDescriptor,
    TypeExpression,
    UnionShape,
    UnitFields,
    UnnamedFields,
)

_IDENTIFIER_RE = re.compile(r"^(r#)?[A-Za-z_][A-Za-z0-9_]*$")


class FieldConfig(BaseModel):
    name: Optional[str] = None
    type: str = Field(min_length=1)


class StructShapeConfig(BaseModel):
    kind: Literal["struct"] = "struct"
    style: Literal["named", "unnamed", "unit"] = "named"
    fields: List[FieldConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def _validate_style(self) -> "StructShapeConfig":
        if self.style == "unit" and self.fields:
            raise ValueError("unit structs cannot declare fields")
        if self.style == "named" and any(not f.name for f in self.fields):
            raise ValueError("every field of a named struct needs a name")
        if self.style == "unnamed" and any(f.name for f in self.fields):
            raise ValueError("fields of an unnamed struct cannot have names")
        return self

    def to_shape(self) -> StructShape:
        fields = tuple(DescriptorField(type=TypeExpression(f.type), name=f.name) for f in self.fields)
        if self.style == "unit":
            return StructShape(UnitFields())
        if self.style == "unnamed":
            return StructShape(UnnamedFields(fields))
        return StructShape(NamedFields(fields))


class EnumShapeConfig(BaseModel):
    kind: Literal["enum"] = "enum"

    def to_shape(self) -> EnumShape:
        return EnumShape()


class UnionShapeConfig(BaseModel):
    kind: Literal["union"] = "union"

    def to_shape(self) -> UnionShape:
        return UnionShape()


ShapeConfig = Annotated[
    Union[StructShapeConfig, EnumShapeConfig, UnionShapeConfig],
    Field(discriminator="kind"),
]


class DeclarationConfig(BaseModel):
    name: str
    generics: List[str] = Field(default_factory=list)
    shape: ShapeConfig
    # Kept raw: options are validated per declaration so one bad entry
    # does not reject the whole manifest.
    options: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _default_shape_kind(cls, data: Any) -> Any:
        # Discriminated unions ignore the default of the tag field.
        if isinstance(data, dict) and isinstance(data.get("shape"), dict):
            shape = dict(data["shape"])
            shape.setdefault("kind", "struct")
            data = {**data, "shape": shape}
        return data

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        if not _IDENTIFIER_RE.match(value):
            raise ValueError(f"declaration name must be an identifier, got {value!r}")
        return value

    def to_descriptor(self) -> TypeDescriptor:
        shape: Shape = self.shape.to_shape()
        return TypeDescriptor(
            name=self.name,
            shape=shape,
            generics=tuple(GenericParam(g) for g in self.generics),
        )


class DeclarationManifest(BaseModel):
    """Declarations described structurally, for callers without Rust source.

    ``defaults`` are merged under each declaration's own ``options``.
    """

    defaults: Dict[str, Any] = Field(default_factory=dict)
    declarations: List[DeclarationConfig]

    def options_for(self, declaration: DeclarationConfig) -> Dict[str, Any]:
        merged = dict(self.defaults)
        merged.update(declaration.options)
        return merged

    @classmethod
    def load(cls, path: Union[str, Path]) -> "DeclarationManifest":
        """
        Load a manifest from a JSON or YAML file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file extension is not supported
            ValidationError: If the document does not match the manifest schema
        """
        manifest_file = Path(path)
        if not manifest_file.exists():
            raise FileNotFoundError(f"Manifest file not found: {path}")

        with open(manifest_file, "r") as f:
            if manifest_file.suffix == ".json":
                data = json.load(f)
            elif manifest_file.suffix in (".yaml", ".yml"):
                try:
                    import yaml
                except ImportError:
                    raise ImportError(
                        "PyYAML required for YAML manifests. "
                        "Install with: pip install pyyaml"
                    )
                data = yaml.safe_load(f)
            else:
                raise ValueError(
                    f"Unsupported manifest format: {manifest_file.suffix}. "
                    "Use .json or .yaml"
                )
        return cls.model_validate(data)
