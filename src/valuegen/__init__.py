"""valuegen.

Value-object derive generator.

Turns single-field wrapper struct declarations into the trait
implementations that make them behave like their inner value
(serialization, Display, TryFrom, FromStr), with construction always
routed through a validating load function.

Public API for clients generating code from Python.
"""

from valuegen.core.contracts import GeneratedUnit, TypeDescriptor, TypeExpression
from valuegen.engine import GenerationEngine, generate
from valuegen.harness.harness import expand_source, process_manifest
from valuegen.models.generation_options import GenerationOptions

__version__ = "0.1.0"

__all__ = [
    "GeneratedUnit",
    "GenerationEngine",
    "GenerationOptions",
    "TypeDescriptor",
    "TypeExpression",
    "expand_source",
    "generate",
    "process_manifest",
]
