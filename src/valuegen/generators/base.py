from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Dict, Optional, Tuple

from valuegen.core.contracts import CapabilityKind, GeneratedUnit, GenerationContext, TypeDescriptor
from valuegen.core.logger import get_logger
from valuegen.core.templates import render_template
from valuegen.models.generation_options import GenerationOptions


class CapabilityGenerator(ABC):
    """Emits the unit for one capability of a value object.

    Subclasses set ``kind``, ``operations`` and ``template`` and decide
    their own enablement. Generators hold no per-declaration state.
    """

    kind: ClassVar[CapabilityKind]
    operations: ClassVar[Tuple[str, ...]]
    template: ClassVar[str]

    def __init__(self) -> None:
        self.log = get_logger(f"valuegen.generators.{self.kind}")

    # --- Required method ---
    @abstractmethod
    def flag(self, options: GenerationOptions) -> Optional[bool]:
        """The explicit on/off option for this capability, None when unset."""
        raise NotImplementedError

    # --- Overridable hooks ---
    def default_enabled(self, ctx: GenerationContext) -> bool:
        return True

    def variables(self, ctx: GenerationContext) -> Dict[str, str]:
        options = ctx.options
        return {
            "ident": ctx.type_name,
            "inner": ctx.inner_type.text,
            "accessor": ctx.accessor,
            "load_fn": options.load_fn,
            "error_type": options.error_type,
        }

    # --- Generation ---
    def is_enabled(self, ctx: GenerationContext) -> bool:
        explicit = self.flag(ctx.options)
        if explicit is None:
            return self.default_enabled(ctx)
        return explicit

    def generate(self, ctx: GenerationContext) -> Optional[GeneratedUnit]:
        if not self.is_enabled(ctx):
            self.log.debug(f"{self.kind} disabled for {ctx.type_name}")
            return None
        code = render_template(self.template, self.variables(ctx))
        return GeneratedUnit(kind=self.kind, type_name=ctx.type_name, operations=self.operations, code=code)

    def generate_for(self, descriptor: TypeDescriptor, options: GenerationOptions) -> Optional[GeneratedUnit]:
        """Generate without a prepared context; shape errors of ``descriptor`` propagate."""
        if self.flag(options) is False:
            return None
        return self.generate(GenerationContext.build(descriptor, options))
