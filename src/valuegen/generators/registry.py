from __future__ import annotations

from typing import Any, Callable, ClassVar, Dict, Optional, Type


class GeneratorRegistryError(RuntimeError):
    pass


class GeneratorRegistry:
    _registry: ClassVar[Dict[str, Type[Any]]] = {}

    @classmethod
    def register(
        cls,
        *,
        kind: str,
        generator_class: Type[Any],
        overwrite: bool = False,
    ) -> None:
        if not overwrite and kind in cls._registry:
            existing = cls._registry[kind]
            raise GeneratorRegistryError(
                f"Generator already registered for kind={kind!r}: {existing}"
            )
        cls._registry[kind] = generator_class

    @classmethod
    def get(cls, kind: str) -> Type[Any]:
        try:
            return cls._registry[kind]
        except KeyError as exc:
            raise GeneratorRegistryError(f"No generator registered for kind={kind!r}") from exc

    @classmethod
    def try_get(cls, kind: str) -> Optional[Type[Any]]:
        return cls._registry.get(kind)

    @classmethod
    def clear(cls) -> None:
        cls._registry.clear()


def register_generator(
    *,
    kind: str,
    overwrite: bool = False,
) -> Callable[[Type[Any]], Type[Any]]:
    def decorator(generator_class: Type[Any]) -> Type[Any]:
        GeneratorRegistry.register(
            kind=kind,
            generator_class=generator_class,
            overwrite=overwrite,
        )
        return generator_class

    return decorator
