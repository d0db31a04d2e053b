import json

import pytest
from pydantic import ValidationError

from valuegen.core.contracts import EnumShape, NamedFields, UnitFields, UnnamedFields
from valuegen.models.manifest import DeclarationManifest


def _manifest(**overrides):
    data = {
        "declarations": [
            {
                "name": "Value",
                "shape": {"kind": "struct", "style": "unnamed", "fields": [{"type": "String"}]},
                "options": {"error_type": "String", "load_fn": "Value::new"},
            }
        ]
    }
    data.update(overrides)
    return DeclarationManifest.model_validate(data)


def test_unnamed_struct_declaration_to_descriptor():
    descriptor = _manifest().declarations[0].to_descriptor()

    assert descriptor.name == "Value"
    assert isinstance(descriptor.shape.fields, UnnamedFields)
    assert descriptor.shape.fields.fields[0].type.text == "String"
    assert descriptor.generics == ()


def test_shape_defaults_to_named_struct():
    manifest = DeclarationManifest.model_validate(
        {"declarations": [{"name": "Email", "shape": {"fields": [{"name": "address", "type": "String"}]}}]}
    )

    shape = manifest.declarations[0].to_descriptor().shape
    assert isinstance(shape.fields, NamedFields)
    assert shape.fields.fields[0].name == "address"


def test_enum_and_unit_shapes():
    manifest = DeclarationManifest.model_validate(
        {
            "declarations": [
                {"name": "Choice", "shape": {"kind": "enum"}},
                {"name": "Marker", "shape": {"kind": "struct", "style": "unit"}},
            ]
        }
    )

    shapes = [d.to_descriptor().shape for d in manifest.declarations]
    assert isinstance(shapes[0], EnumShape)
    assert isinstance(shapes[1].fields, UnitFields)


def test_generics_become_generic_params():
    manifest = DeclarationManifest.model_validate(
        {"declarations": [{"name": "W", "generics": ["T : Clone"], "shape": {"style": "unnamed", "fields": [{"type": "T"}]}}]}
    )

    assert [g.text for g in manifest.declarations[0].to_descriptor().generics] == ["T: Clone"]


def test_defaults_merge_under_declaration_options():
    manifest = _manifest(defaults={"serde_crate": "serde", "error_type": "DefaultError"})

    options = manifest.options_for(manifest.declarations[0])
    assert options == {"serde_crate": "serde", "error_type": "String", "load_fn": "Value::new"}


@pytest.mark.parametrize(
    "shape",
    [
        {"kind": "struct", "style": "unit", "fields": [{"type": "u8"}]},
        {"kind": "struct", "style": "named", "fields": [{"type": "u8"}]},
        {"kind": "struct", "style": "unnamed", "fields": [{"name": "x", "type": "u8"}]},
        {"kind": "tuple"},
    ],
)
def test_inconsistent_shapes_are_rejected(shape):
    with pytest.raises(ValidationError):
        DeclarationManifest.model_validate({"declarations": [{"name": "V", "shape": shape}]})


def test_declaration_name_must_be_identifier():
    with pytest.raises(ValidationError, match="identifier"):
        DeclarationManifest.model_validate({"declarations": [{"name": "not valid", "shape": {"kind": "enum"}}]})


def test_load_json_and_yaml(tmp_path):
    data = {
        "declarations": [
            {"name": "Age", "shape": {"style": "unnamed", "fields": [{"type": "u8"}]}, "options": {"load_fn": "Age::new"}}
        ]
    }
    json_path = tmp_path / "decls.json"
    json_path.write_text(json.dumps(data))
    yaml_path = tmp_path / "decls.yaml"
    yaml_path.write_text(
        "declarations:\n"
        "  - name: Age\n"
        "    shape: {style: unnamed, fields: [{type: u8}]}\n"
        "    options: {load_fn: 'Age::new'}\n"
    )

    assert DeclarationManifest.load(json_path) == DeclarationManifest.load(yaml_path)


def test_load_rejects_unknown_suffix_and_missing_file(tmp_path):
    path = tmp_path / "decls.toml"
    path.write_text("")

    with pytest.raises(ValueError, match="Unsupported manifest format"):
        DeclarationManifest.load(path)
    with pytest.raises(FileNotFoundError):
        DeclarationManifest.load(tmp_path / "missing.json")


def test_shape_kind_is_optional_for_unnamed_struct():
    manifest = DeclarationManifest.model_validate(
        {"declarations": [{"name": "Age", "shape": {"style": "unnamed", "fields": [{"type": "u8"}]}}]}
    )

    descriptor = manifest.declarations[0].to_descriptor()
    assert isinstance(descriptor.shape.fields, UnnamedFields)
    assert descriptor.shape.fields.fields[0].type.text == "u8"
