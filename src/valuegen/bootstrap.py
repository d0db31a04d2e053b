from __future__ import annotations

import importlib
import sys
from typing import Iterable


BUILTIN_GENERATOR_MODULES: tuple[str, ...] = (
    "valuegen.generators.serialization",
    "valuegen.generators.display",
    "valuegen.generators.conversion",
    "valuegen.generators.parse",
)


_LOADED = False


def load_builtin_generators(*, reload: bool = False, modules: Iterable[str] = BUILTIN_GENERATOR_MODULES) -> None:
    """Import built-in generator modules so decorators register them.

    In production, call with reload=False (default) so imports are cheap.
    In tests, call with reload=True to clear the registry and re-run decorators.
    """

    global _LOADED

    if _LOADED and not reload:
        return

    if reload:
        from valuegen.generators.registry import GeneratorRegistry

        GeneratorRegistry.clear()

    for module_name in modules:
        if reload:
            sys.modules.pop(module_name, None)
        importlib.import_module(module_name)

    _LOADED = True
