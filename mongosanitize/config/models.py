"""Configuration models for mongosanitize."""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)

from mongosanitize.engine.rules import DEFAULT_PATTERNS
from mongosanitize.engine.strategy import ValueStrategy, strategy_for
from mongosanitize.exceptions import ConfigurationError

Mode = Literal["auto", "manual"]

DEFAULT_SECTIONS: tuple[str, ...] = ("body", "params", "query")


class StringOptions(BaseModel):
    """Post-processing applied to every sanitized string."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    trim: StrictBool = Field(default=False, description="Strip surrounding whitespace.")
    lowercase: StrictBool = Field(default=False, description="Lowercase the result.")
    max_length: Annotated[StrictInt, Field(ge=1)] | None = Field(
        default=None,
        alias="maxLength",
        description="Truncate values (never keys) to this many characters.",
    )


class ArrayOptions(BaseModel):
    """Post-processing applied to every sanitized array."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    filter_null: StrictBool = Field(default=False, alias="filterNull", description="Drop None elements.")
    distinct: StrictBool = Field(default=False, description="Drop repeated elements, keeping the first.")


class SanitizeOptions(BaseModel):
    """Effective sanitizer configuration. Built once at setup and never mutated."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    replace_with: StrictStr = Field(default="", alias="replaceWith")
    remove_matches: StrictBool = Field(default=False, alias="removeMatches")
    patterns: tuple[re.Pattern[str], ...] = Field(default=DEFAULT_PATTERNS)
    recursive: StrictBool = Field(default=True)
    remove_empty: StrictBool = Field(default=False, alias="removeEmpty")
    allowed_keys: frozenset[StrictStr] = Field(default_factory=frozenset, alias="allowedKeys")
    denied_keys: frozenset[StrictStr] = Field(default_factory=frozenset, alias="deniedKeys")
    string_options: StringOptions = Field(default_factory=StringOptions, alias="stringOptions")
    array_options: ArrayOptions = Field(default_factory=ArrayOptions, alias="arrayOptions")
    custom_sanitizer: Callable[[Any], Any] | None = Field(default=None, alias="customSanitizer")
    sanitize_objects: tuple[StrictStr, ...] = Field(default=DEFAULT_SECTIONS, alias="sanitizeObjects")
    skip_routes: frozenset[StrictStr] = Field(default_factory=frozenset, alias="skipRoutes")
    mode: Mode = Field(default="auto")
    router_base_path: StrictStr = Field(default="", alias="routerBasePath")

    _value_strategy: ValueStrategy = PrivateAttr()

    def model_post_init(self, __context: Any) -> None:
        self._value_strategy = strategy_for(self.custom_sanitizer)

    @property
    def value_strategy(self) -> ValueStrategy:
        """Strategy that sanitizes one mapping entry value."""
        return self._value_strategy

    @field_validator("patterns", mode="before")
    @classmethod
    def _compile_patterns(cls, value: Any) -> Any:
        if isinstance(value, (str, bytes, re.Pattern)) or not isinstance(value, (list, tuple)):
            raise ValueError("patterns must be a list of regular expressions")
        compiled: list[re.Pattern[str]] = []
        for item in value:
            if isinstance(item, re.Pattern):
                compiled.append(item)
                continue
            if not isinstance(item, str):
                raise ValueError(f"pattern must be a string or compiled regex, got {type(item).__name__}")
            try:
                compiled.append(re.compile(item))
            except re.error as exc:
                raise ValueError(f"invalid regular expression {item!r}: {exc}") from exc
        return tuple(compiled)

    @field_validator("allowed_keys", "denied_keys", "skip_routes", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        if value is None:
            return frozenset()
        if isinstance(value, str):
            raise ValueError("expected a list of strings")
        return value

    @field_validator("sanitize_objects", mode="before")
    @classmethod
    def _sections_as_sequence(cls, value: Any) -> Any:
        if isinstance(value, str):
            raise ValueError("expected a list of section names")
        return value

    def merge(self, overrides: Mapping[str, Any] | None = None, **kwargs: Any) -> SanitizeOptions:
        """Return a new validated instance with overrides applied on top of this one."""
        if overrides is not None and not isinstance(overrides, Mapping):
            raise ConfigurationError.for_field("options", overrides, "options must be a mapping")
        updates = normalize_keys({**(overrides or {}), **kwargs}, type(self))
        merged = deep_merge(self._as_dict(), updates)
        try:
            return type(self).model_validate(merged)
        except ValidationError as exc:
            raise _configuration_error(exc) from exc

    def _as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for name in type(self).model_fields:
            value = getattr(self, name)
            data[name] = value.model_dump() if isinstance(value, BaseModel) else value
        return data


DEFAULT_OPTIONS = SanitizeOptions()


def normalize_keys(data: Mapping[str, Any], model: type[BaseModel]) -> dict[str, Any]:
    """Map camelCase aliases to field names, recursing into nested option models."""
    by_alias = {field.alias: name for name, field in model.model_fields.items() if field.alias}
    normalized: dict[str, Any] = {}
    for key, value in data.items():
        name = by_alias.get(key, key)
        field = model.model_fields.get(name)
        nested = field.annotation if field is not None else None
        if isinstance(value, BaseModel):
            value = value.model_dump()
        if isinstance(nested, type) and issubclass(nested, BaseModel) and isinstance(value, Mapping):
            value = normalize_keys(value, nested)
        normalized[name] = value
    return normalized


def deep_merge(base: dict[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    merged: dict[str, Any] = dict(base)
    for key, value in updates.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, Mapping):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _configuration_error(exc: ValidationError) -> ConfigurationError:
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or "options"
    return ConfigurationError.for_field(field, first.get("input"), first.get("msg"))
