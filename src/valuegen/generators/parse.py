from __future__ import annotations

from typing import Optional

from valuegen.core.contracts import GenerationContext
from valuegen.generators.base import CapabilityGenerator
from valuegen.generators.primitives import DEFAULT_PRIMITIVE_POLICY, PrimitiveNamePolicy
from valuegen.generators.registry import register_generator
from valuegen.models.generation_options import GenerationOptions


@register_generator(kind="parse")
class ParseGenerator(CapabilityGenerator):
    """``FromStr`` parsing the inner type, then validating through ``load_fn``.

    Off by default unless the inner type is one of the primitive names, see
    PrimitiveNamePolicy. ``from_str_derive`` overrides the default either way.
    """

    kind = "parse"
    operations = ("from_str",)
    template = """
        impl ::std::str::FromStr for {{ident}} {
            type Err = {{error_type}};

            fn from_str(s: &str) -> ::std::result::Result<Self, Self::Err> {
                let value = <{{inner}} as ::std::str::FromStr>::from_str(s)?;
                {{load_fn}}(value)
            }
        }
    """

    def __init__(self, policy: PrimitiveNamePolicy = DEFAULT_PRIMITIVE_POLICY) -> None:
        super().__init__()
        self.policy = policy

    def flag(self, options: GenerationOptions) -> Optional[bool]:
        return options.parse_enabled

    def default_enabled(self, ctx: GenerationContext) -> bool:
        return self.policy.default_enabled(ctx.inner_type)
