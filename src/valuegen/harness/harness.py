"""
Front end that feeds declarations to the engine.

Each declaration is decoded and generated on its own: errors become
Diagnostic values attached to that declaration and never stop the others.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from valuegen.core.contracts import GeneratedUnit, TypeDescriptor
from valuegen.core.exceptions import SourceParseError, ValueGenError
from valuegen.core.logger import get_logger, push_declaration, reset_declaration
from valuegen.engine import GenerationEngine
from valuegen.harness.attributes import parse_option_attributes
from valuegen.harness.diagnostics import Diagnostic
from valuegen.harness.rust_source import SourceDeclaration, scan_declarations
from valuegen.models.generation_options import GenerationOptions
from valuegen.models.manifest import DeclarationManifest
from valuegen.render.renderer import render_units, splice

logger = get_logger(__name__)


@dataclass
class DeclarationOutcome:
    name: str
    units: List[GeneratedUnit] = field(default_factory=list)
    diagnostic: Optional[Diagnostic] = None
    source: Optional[SourceDeclaration] = None

    @property
    def ok(self) -> bool:
        return self.diagnostic is None


@dataclass
class HarnessReport:
    outcomes: List[DeclarationOutcome] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(o.ok for o in self.outcomes)

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return [o.diagnostic for o in self.outcomes if o.diagnostic is not None]

    def units_for(self, name: str) -> List[GeneratedUnit]:
        for outcome in self.outcomes:
            if outcome.name == name:
                return outcome.units
        raise KeyError(name)


@dataclass
class ExpansionResult:
    text: str
    report: HarnessReport

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return self.report.diagnostics


class Harness:
    def __init__(self, engine: Optional[GenerationEngine] = None):
        self.engine = engine or GenerationEngine()

    def process(
        self,
        descriptor: TypeDescriptor,
        raw_options: Mapping[str, Any],
        *,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> DeclarationOutcome:
        """Generate one declaration, turning any ValueGenError into a diagnostic."""
        token = push_declaration(descriptor.name)
        try:
            options = GenerationOptions.from_mapping(raw_options, type_name=descriptor.name)
            units = self.engine.generate(descriptor, options)
            logger.info(f"Generated {len(units)} unit(s): {', '.join(u.kind for u in units) or 'none'}")
            return DeclarationOutcome(name=descriptor.name, units=units)
        except ValueGenError as exc:
            logger.info(f"Rejected: {exc}")
            diagnostic = Diagnostic.from_error(descriptor.name, exc, line=line, column=column)
            return DeclarationOutcome(name=descriptor.name, diagnostic=diagnostic)
        finally:
            reset_declaration(token)

    def process_source(self, source: str) -> HarnessReport:
        """
        Process every ``#[derive(ValueObject)]`` declaration in Rust source text.

        Raises:
            SourceParseError: If the text cannot be tokenized at all.
        """
        report = HarnessReport()
        for decl in scan_declarations(source):
            report.outcomes.append(self._process_source_declaration(decl))
        logger.info(f"Processed {len(report.outcomes)} declaration(s), {len(report.diagnostics)} failed")
        return report

    def _process_source_declaration(self, decl: SourceDeclaration) -> DeclarationOutcome:
        if decl.descriptor is None:
            error = decl.error or SourceParseError(f"`{decl.name}` was not parsed", decl.line, decl.column)
            diagnostic = Diagnostic.from_error(decl.name, error, line=error.line, column=error.column)
            return DeclarationOutcome(name=decl.name, diagnostic=diagnostic, source=decl)
        try:
            raw_options = parse_option_attributes(decl.option_attributes, type_name=decl.name)
        except ValueGenError as exc:
            diagnostic = Diagnostic.from_error(decl.name, exc, line=decl.line, column=decl.column)
            return DeclarationOutcome(name=decl.name, diagnostic=diagnostic, source=decl)

        outcome = self.process(decl.descriptor, raw_options, line=decl.line, column=decl.column)
        outcome.source = decl
        return outcome

    def process_manifest(self, manifest: DeclarationManifest) -> HarnessReport:
        report = HarnessReport()
        for declaration in manifest.declarations:
            report.outcomes.append(
                self.process(declaration.to_descriptor(), manifest.options_for(declaration))
            )
        return report

    def expand_source(self, source: str) -> ExpansionResult:
        """Return ``source`` with generated units placed after each declaration."""
        report = self.process_source(source)
        insertions = [
            (o.source.end, o.source.indent, render_units(o.units))
            for o in report.outcomes
            if o.ok and o.source is not None and o.units
        ]
        return ExpansionResult(text=splice(source, insertions), report=report)


def expand_source(source: str) -> ExpansionResult:
    return Harness().expand_source(source)


def process_manifest(manifest: DeclarationManifest) -> HarnessReport:
    return Harness().process_manifest(manifest)
