from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Union

from valuegen.bootstrap import load_builtin_generators
from valuegen.core.contracts import CAPABILITY_ORDER, GeneratedUnit, GenerationContext, TypeDescriptor
from valuegen.core.logger import get_logger
from valuegen.generators.base import CapabilityGenerator
from valuegen.generators.registry import GeneratorRegistry, GeneratorRegistryError
from valuegen.models.generation_options import GenerationOptions
from valuegen.validation.shape_validator import validate

OptionsInput = Union[GenerationOptions, Mapping[str, Any]]


class GenerationEngine:
    """
    Turns one type declaration into its ordered capability units.

    Validation runs first; the wrapped field is resolved once into a
    GenerationContext shared by all generators, which then run in the fixed
    order serialization, display, conversion, parse. The first error aborts
    the whole declaration, so callers get either every unit or none.

    Example:
        >>> from valuegen import GenerationEngine, TypeDescriptor
        >>> engine = GenerationEngine()
        >>> units = engine.generate(
        ...     TypeDescriptor.tuple_struct("Value", "String"),
        ...     {"error_type": "String", "load_fn": "Value::new"},
        ... )
        >>> [u.kind for u in units]
        ['serialization', 'display', 'conversion', 'parse']

    ``generators`` replaces the registered generator for a kind with a
    configured instance, e.g. ``{"parse": ParseGenerator(policy=...)}``.
    """

    def __init__(self, generators: Optional[Mapping[str, CapabilityGenerator]] = None):
        self.generators: Dict[str, CapabilityGenerator] = dict(generators or {})
        unknown = sorted(set(self.generators) - set(CAPABILITY_ORDER))
        if unknown:
            raise GeneratorRegistryError(f"Unknown generator kind(s): {', '.join(unknown)}")

    def generate(self, descriptor: TypeDescriptor, options: OptionsInput) -> List[GeneratedUnit]:
        """
        Generate the units for ``descriptor``.

        Args:
            descriptor: Structural description of the declaration.
            options: Either validated GenerationOptions or the raw option
                mapping (validated here).

        Returns:
            Units in capability order; disabled capabilities are skipped.

        Raises:
            ConfigurationError: If raw options are missing or malformed.
            ShapeError: If the declaration is not a single-field struct.
        """
        log = get_logger(__name__)

        if not isinstance(options, GenerationOptions):
            options = GenerationOptions.from_mapping(options, type_name=descriptor.name)

        validate(descriptor)
        ctx = GenerationContext.build(descriptor, options)

        load_builtin_generators()
        units: List[GeneratedUnit] = []
        for kind in CAPABILITY_ORDER:
            generator = self.generators.get(kind) or GeneratorRegistry.get(kind)()
            unit = generator.generate(ctx)
            if unit is not None:
                log.debug(f"Generated {kind} unit for {descriptor.name}")
                units.append(unit)

        log.debug(f"{descriptor.name}: {len(units)} unit(s) generated")
        return units


_DEFAULT_ENGINE: Optional[GenerationEngine] = None


def generate(descriptor: TypeDescriptor, options: OptionsInput) -> List[GeneratedUnit]:
    """Generate units with a shared default engine (the engine itself is stateless)."""
    global _DEFAULT_ENGINE
    if _DEFAULT_ENGINE is None:
        _DEFAULT_ENGINE = GenerationEngine()
    return _DEFAULT_ENGINE.generate(descriptor, options)
