import pytest

from valuegen.bootstrap import load_builtin_generators
from valuegen.core.exceptions import ConfigurationError
from valuegen.harness.attributes import parse_option_attributes
from valuegen.harness.harness import Harness
from valuegen.harness.rust_source import scan_declarations


def _options_of(source: str):
    decl = scan_declarations(source)[0]
    return parse_option_attributes(decl.option_attributes, type_name=decl.name)


def test_string_and_bool_values_are_decoded():
    raw = _options_of(
        '#[derive(ValueObject)]\n'
        '#[value_object(load_fn = "Value::new", error_type = "String", serde_derive = false, from_str_derive = "true")]\n'
        'struct Value(String);'
    )

    assert raw == {
        "load_fn": "Value::new",
        "error_type": "String",
        "serde_derive": False,
        "from_str_derive": "true",
    }


def test_bare_key_means_true():
    raw = _options_of('#[derive(ValueObject)]\n#[value_object(error_type = "E", load_fn = "f", from_str_derive)]\nstruct V(X);')

    assert raw["from_str_derive"] is True


def test_options_merge_across_attributes():
    raw = _options_of(
        '#[derive(ValueObject)]\n#[value_object(error_type = "E")]\n#[value_object(load_fn = "f")]\nstruct V(u8);'
    )

    assert raw == {"error_type": "E", "load_fn": "f"}


def test_escapes_and_raw_strings():
    raw = _options_of(
        '#[derive(ValueObject)]\n#[value_object(error_type = r"Box<dyn Error>", load_fn = "a\\u{0}")]\nstruct V(u8);'
    )

    assert raw["error_type"] == "Box<dyn Error>"
    assert raw["load_fn"] == "a\0"


def test_duplicate_key_is_configuration_error():
    with pytest.raises(ConfigurationError) as exc:
        _options_of('#[derive(ValueObject)]\n#[value_object(load_fn = "f", load_fn = "g")]\nstruct V(u8);')

    assert exc.value.keys == ("load_fn",)
    assert "duplicate" in str(exc.value)


def test_non_literal_value_is_configuration_error():
    with pytest.raises(ConfigurationError) as exc:
        _options_of('#[derive(ValueObject)]\n#[value_object(load_fn = Value::new)]\nstruct V(u8);')

    assert exc.value.keys == ("load_fn",)


def test_integer_value_is_configuration_error():
    with pytest.raises(ConfigurationError, match="serde_derive"):
        _options_of('#[derive(ValueObject)]\n#[value_object(serde_derive = 1)]\nstruct V(u8);')


@pytest.mark.parametrize(
    "literal, expected",
    [
        ('"se\\u{72}de"', "serde"),
        ('"se\\x72de"', "serde"),
        ('"\\u{1F_600}"', "\U0001F600"),
        ('"a\\\\u{72}"', "a\\u{72}"),
    ],
)
def test_unicode_and_byte_escapes_are_decoded(literal, expected):
    raw = _options_of(f'#[derive(ValueObject)]\n#[value_object(serde_crate = {literal})]\nstruct V(u8);')

    assert raw["serde_crate"] == expected


def test_escaped_namespace_reaches_generated_code():
    load_builtin_generators(reload=True)
    report = Harness().process_source(
        '#[derive(ValueObject)]\n'
        '#[value_object(load_fn = "V::new", error_type = "E", serde_crate = "se\\u{72}de")]\n'
        'struct V(u8);'
    )

    assert report.ok
    assert "impl serde::Serialize for V" in report.units_for("V")[0].code
