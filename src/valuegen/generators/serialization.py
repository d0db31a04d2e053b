from __future__ import annotations

from typing import Dict, Optional

from valuegen.core.contracts import GenerationContext
from valuegen.generators.base import CapabilityGenerator
from valuegen.generators.registry import register_generator
from valuegen.models.generation_options import GenerationOptions


@register_generator(kind="serialization")
class SerializationGenerator(CapabilityGenerator):
    """Deserialize through the inner type then ``load_fn``; serialize the inner value as is.

    The namespace (``serde_crate``) is spliced in verbatim as the crate path
    of the ``Deserialize``/``Serialize`` traits.
    """

    kind = "serialization"
    operations = ("deserialize", "serialize")
    template = """
        impl<'de> {{ns}}::de::Deserialize<'de> for {{ident}} {
            fn deserialize<D>(deserializer: D) -> ::std::result::Result<Self, D::Error>
            where
                D: {{ns}}::de::Deserializer<'de>,
            {
                let value = <{{inner}} as {{ns}}::de::Deserialize<'de>>::deserialize(deserializer)?;
                {{load_fn}}(value).map_err(<D::Error as {{ns}}::de::Error>::custom)
            }
        }

        impl {{ns}}::Serialize for {{ident}} {
            fn serialize<S>(&self, serializer: S) -> ::std::result::Result<S::Ok, S::Error>
            where
                S: {{ns}}::Serializer,
            {
                {{ns}}::Serialize::serialize(&self.{{accessor}}, serializer)
            }
        }
    """

    def flag(self, options: GenerationOptions) -> Optional[bool]:
        return options.serialization_enabled

    def variables(self, ctx: GenerationContext) -> Dict[str, str]:
        variables = super().variables(ctx)
        variables["ns"] = ctx.options.namespace
        return variables
