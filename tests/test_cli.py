import json

import pytest

from valuegen.bootstrap import load_builtin_generators
from valuegen.cli import build_parser, cli

GOOD_SOURCE = """\
#[derive(ValueObject)]
#[value_object(load_fn = "Age::new", error_type = "AgeError")]
pub struct Age(u8);
"""

BAD_SOURCE = """\
#[derive(ValueObject)]
#[value_object(load_fn = "Pair::new", error_type = "E")]
pub struct Pair(u8, u8);
"""

MANIFEST = {
    "defaults": {"error_type": "String"},
    "declarations": [
        {
            "name": "Email",
            "shape": {"kind": "struct", "style": "named", "fields": [{"name": "value", "type": "String"}]},
            "options": {"load_fn": "Email::parse", "serde_derive": False},
        }
    ],
}


def setup_function() -> None:
    load_builtin_generators(reload=True)


def test_parser_has_subcommands():
    parser = build_parser()

    args = parser.parse_args(["expand", "model.rs", "-o", "out.rs", "-v"])

    assert args.command == "expand"
    assert args.source == "model.rs"
    assert args.output == "out.rs"
    assert args.verbose is True


def test_no_command_prints_help(capsys):
    assert cli([]) == 0
    assert "usage" in capsys.readouterr().out


def test_expand_writes_source_with_units(tmp_path, capsys):
    source = tmp_path / "model.rs"
    source.write_text(GOOD_SOURCE)

    assert cli(["expand", str(source)]) == 0

    out = capsys.readouterr().out
    assert out.startswith(GOOD_SOURCE.rstrip("\n"))
    assert "impl ::std::str::FromStr for Age" in out


def test_expand_to_output_file(tmp_path):
    source = tmp_path / "model.rs"
    source.write_text(GOOD_SOURCE)
    target = tmp_path / "model.expanded.rs"

    assert cli(["expand", str(source), "--output", str(target)]) == 0
    assert "impl ::std::convert::TryFrom<u8> for Age" in target.read_text()


def test_expand_reports_diagnostics_and_writes_nothing(tmp_path, capsys):
    source = tmp_path / "model.rs"
    source.write_text(BAD_SOURCE)

    assert cli(["expand", str(source)]) == 1

    captured = capsys.readouterr()
    assert captured.out == ""
    assert f"{source}:1:1: error: " in captured.err
    assert "exactly one field" in captured.err


def test_check_source(tmp_path, capsys):
    good = tmp_path / "good.rs"
    good.write_text(GOOD_SOURCE)
    bad = tmp_path / "bad.rs"
    bad.write_text(BAD_SOURCE)

    assert cli(["check", str(good)]) == 0
    assert cli(["check", str(bad)]) == 1
    assert capsys.readouterr().out == ""


def test_check_reports_unbalanced_source(tmp_path, capsys):
    source = tmp_path / "broken.rs"
    source.write_text("struct Open(u8;\n")

    assert cli(["check", str(source)]) == 1
    assert f"{source}:1:" in capsys.readouterr().err


@pytest.mark.parametrize("suffix", [".json", ".yaml"])
def test_generate_from_manifest(tmp_path, capsys, suffix):
    manifest = tmp_path / f"decls{suffix}"
    # JSON is a subset of YAML.
    manifest.write_text(json.dumps(MANIFEST))

    assert cli(["generate", str(manifest)]) == 0

    out = capsys.readouterr().out
    assert out.startswith("// Email\n")
    assert "::std::write!(f, \"{}\", self.value)" in out
    assert "serde" not in out
    assert "impl ::std::str::FromStr for Email" in out


def test_generate_reports_invalid_options(tmp_path, capsys):
    data = json.loads(json.dumps(MANIFEST))
    data["declarations"][0]["options"]["serde_crate"] = "not a path"
    manifest = tmp_path / "decls.json"
    manifest.write_text(json.dumps(data))

    assert cli(["generate", str(manifest)]) == 1

    err = capsys.readouterr().err
    assert f"{manifest}: error: Email: " in err
    assert "serde_crate" in err


def test_missing_file_fails(tmp_path):
    assert cli(["check", str(tmp_path / "missing.rs")]) == 1
