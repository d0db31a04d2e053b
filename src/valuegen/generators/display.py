from __future__ import annotations

from typing import Optional

from valuegen.generators.base import CapabilityGenerator
from valuegen.generators.registry import register_generator
from valuegen.models.generation_options import GenerationOptions


@register_generator(kind="display")
class DisplayGenerator(CapabilityGenerator):
    kind = "display"
    operations = ("fmt",)
    template = """
        impl ::std::fmt::Display for {{ident}} {
            fn fmt(&self, f: &mut ::std::fmt::Formatter<'_>) -> ::std::fmt::Result {
                ::std::write!(f, "{}", self.{{accessor}})
            }
        }
    """

    def flag(self, options: GenerationOptions) -> Optional[bool]:
        return options.display_enabled
