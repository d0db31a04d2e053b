"""
Command-line interface and entry points for valuegen.

Expands ``#[derive(ValueObject)]`` declarations in Rust source files, or
generates the units for declarations described in a JSON/YAML manifest.
Generated text goes to stdout (or ``--output``); diagnostics and logs go to
stderr.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from valuegen.core.exceptions import SourceParseError
from valuegen.core.logger import configure_root_logger, get_logger
from valuegen.harness.diagnostics import Diagnostic
from valuegen.harness.harness import Harness, HarnessReport
from valuegen.models.manifest import DeclarationManifest
from valuegen.render.renderer import render_units

logger = get_logger(__name__)

_MANIFEST_SUFFIXES = (".json", ".yaml", ".yml")


def _read_source(path: str) -> str:
    source_file = Path(path)
    if not source_file.exists():
        raise FileNotFoundError(f"Source file not found: {path}")
    return source_file.read_text(encoding="utf-8")


def _write_output(text: str, output: Optional[str]) -> None:
    if output:
        Path(output).write_text(text, encoding="utf-8")
        logger.info(f"Wrote {output}")
    else:
        sys.stdout.write(text)
        if text and not text.endswith("\n"):
            sys.stdout.write("\n")


def _report_diagnostics(diagnostics: List[Diagnostic], origin: str) -> None:
    for diagnostic in diagnostics:
        print(diagnostic.format(origin), file=sys.stderr)


def render_manifest_report(report: HarnessReport) -> str:
    """Generated units of every successful declaration, one block per declaration."""
    blocks = []
    for outcome in report.outcomes:
        if outcome.ok and outcome.units:
            blocks.append(f"// {outcome.name}\n{render_units(outcome.units)}")
    return "\n\n".join(blocks)


def expand(path: str, output: Optional[str] = None) -> int:
    """
    Expand value-object derives in a Rust source file.

    Args:
        path: Rust source file
        output: Optional file to write; stdout when omitted

    Returns:
        Process exit code: 0 when every declaration generated, 1 otherwise.
        Nothing is written when a declaration fails.
    """
    result = Harness().expand_source(_read_source(path))
    if result.diagnostics:
        _report_diagnostics(result.diagnostics, path)
        return 1
    _write_output(result.text, output)
    return 0


def check(path: str) -> int:
    """Report diagnostics for a Rust source file or a manifest without writing output."""
    harness = Harness()
    if Path(path).suffix in _MANIFEST_SUFFIXES:
        report = harness.process_manifest(DeclarationManifest.load(path))
    else:
        report = harness.process_source(_read_source(path))
    _report_diagnostics(report.diagnostics, path)
    logger.info(f"Checked {len(report.outcomes)} declaration(s) in {path}")
    return 0 if report.ok else 1


def generate(path: str, output: Optional[str] = None) -> int:
    """Print the units for every declaration of a JSON/YAML manifest."""
    report = Harness().process_manifest(DeclarationManifest.load(path))
    if report.diagnostics:
        _report_diagnostics(report.diagnostics, path)
        return 1
    _write_output(render_manifest_report(report), output)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="valuegen",
        description="Generate trait implementations for single-field value-object types",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Command to execute"
    )

    # 'expand' subcommand
    expand_parser = subparsers.add_parser(
        "expand",
        help="Expand #[derive(ValueObject)] declarations in a Rust source file"
    )
    expand_parser.add_argument("source", help="Path to a .rs file")
    expand_parser.add_argument("--output", "-o", help="Write expanded source here instead of stdout")

    # 'check' subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Validate declarations without writing output"
    )
    check_parser.add_argument("source", help="Path to a .rs file or a JSON/YAML manifest")

    # 'generate' subcommand
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate units for declarations listed in a JSON/YAML manifest"
    )
    generate_parser.add_argument("manifest", help="Path to a JSON/YAML manifest")
    generate_parser.add_argument("--output", "-o", help="Write generated code here instead of stdout")

    for sub in (expand_parser, check_parser, generate_parser):
        sub.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Enable verbose logging"
        )

    return parser


def cli(argv: Optional[List[str]] = None) -> int:
    """
    Command-line interface for valuegen.

    Usage:
        valuegen expand src/model.rs -o src/model.expanded.rs
        valuegen check src/model.rs
        valuegen generate value_objects.yaml
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    configure_root_logger("DEBUG" if args.verbose else "WARNING")

    origin = args.manifest if args.command == "generate" else args.source
    try:
        if args.command == "expand":
            return expand(args.source, args.output)
        if args.command == "check":
            return check(args.source)
        return generate(args.manifest, args.output)
    except SourceParseError as e:
        print(f"{origin}:{e.line}:{e.column}: error: {e.reason}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


def main() -> None:
    sys.exit(cli())


if __name__ == "__main__":
    main()
