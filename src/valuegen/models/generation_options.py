from __future__ import annotations

import re
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from valuegen.core.contracts import TypeExpression, normalize_type_text
from valuegen.core.exceptions import ConfigProblem, ConfigurationError

DEFAULT_SERIALIZATION_NAMESPACE = "serde"

_IDENTIFIER = r"[A-Za-z_][A-Za-z0-9_]*"
_IDENTIFIER_RE = re.compile(rf"^{_IDENTIFIER}$")
_PATH_RE = re.compile(rf"^(::)?{_IDENTIFIER}(::{_IDENTIFIER})*$")

_CLOSERS = {")": "(", "]": "[", ">": "<"}


def _is_balanced(text: str) -> bool:
    stack: list[str] = []
    for ch in text.replace("->", ""):
        if ch in "([<":
            stack.append(ch)
        elif ch in _CLOSERS:
            if not stack or stack.pop() != _CLOSERS[ch]:
                return False
    return not stack


class GenerationOptions(BaseModel):
    """Options attached to one value-object declaration.

    Keys follow the attribute surface (``serde_derive``, ``serde_crate``,
    ``display_derive``, ``try_from_derive``, ``from_str_derive``); the
    descriptive field names are accepted too. Capability flags left unset
    fall back to each generator's default.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    error_type: str
    load_fn: str

    serialization_enabled: Optional[bool] = Field(default=None, alias="serde_derive")
    serialization_namespace: Optional[str] = Field(default=None, alias="serde_crate")
    display_enabled: Optional[bool] = Field(default=None, alias="display_derive")
    conversion_enabled: Optional[bool] = Field(default=None, alias="try_from_derive")
    parse_enabled: Optional[bool] = Field(default=None, alias="from_str_derive")

    @field_validator("error_type", mode="before")
    @classmethod
    def _validate_error_type(cls, value: Any) -> Any:
        if isinstance(value, TypeExpression):
            value = value.text
        if not isinstance(value, str):
            return value
        text = normalize_type_text(value)
        if not text:
            raise ValueError("error_type must name a type")
        if not _is_balanced(text):
            raise ValueError(f"error_type has unbalanced brackets: {value!r}")
        return text

    @field_validator("load_fn", mode="before")
    @classmethod
    def _validate_load_fn(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        text = normalize_type_text(value)
        if not _PATH_RE.match(text):
            raise ValueError(f"load_fn must be a path such as `Type::new`, got {value!r}")
        return text

    @field_validator("serialization_namespace")
    @classmethod
    def _validate_namespace(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        if value == "_" or not _IDENTIFIER_RE.match(value):
            raise ValueError(f"serde_crate must be a plain identifier such as `serde`, got {value!r}")
        return value

    @property
    def namespace(self) -> str:
        return self.serialization_namespace or DEFAULT_SERIALIZATION_NAMESPACE

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], *, type_name: Optional[str] = None) -> "GenerationOptions":
        """Validate raw option values, raising ConfigurationError instead of ValidationError."""
        try:
            return cls.model_validate(dict(raw))
        except ValidationError as exc:
            problems = [
                ConfigProblem(
                    key=".".join(str(part) for part in err["loc"]) or "options",
                    message=err["msg"],
                )
                for err in exc.errors()
            ]
            raise ConfigurationError(type_name, problems) from exc
