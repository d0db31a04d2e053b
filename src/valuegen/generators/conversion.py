from __future__ import annotations

from typing import Optional

from valuegen.generators.base import CapabilityGenerator
from valuegen.generators.registry import register_generator
from valuegen.models.generation_options import GenerationOptions


@register_generator(kind="conversion")
class ConversionGenerator(CapabilityGenerator):
    """``TryFrom<Inner>`` returning whatever ``load_fn`` returns."""

    kind = "conversion"
    operations = ("try_from",)
    template = """
        impl ::std::convert::TryFrom<{{inner}}> for {{ident}} {
            type Error = {{error_type}};

            fn try_from(value: {{inner}}) -> ::std::result::Result<Self, Self::Error> {
                {{load_fn}}(value)
            }
        }
    """

    def flag(self, options: GenerationOptions) -> Optional[bool]:
        return options.conversion_enabled
