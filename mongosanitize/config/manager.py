"""Build effective sanitizer options from defaults, files, env and call-site overrides."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from mongosanitize.config.loader import YAMLConfigLoader
from mongosanitize.config.models import DEFAULT_OPTIONS, SanitizeOptions, deep_merge, normalize_keys
from mongosanitize.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "MONGOSANITIZE_"


def build_options(options: Mapping[str, Any] | SanitizeOptions | None = None, **kwargs: Any) -> SanitizeOptions:
    """Merge user options over the defaults and validate them.

    Accepts snake_case field names or the camelCase aliases. Raises
    ConfigurationError on the first invalid field.
    """
    if isinstance(options, SanitizeOptions):
        return options.merge(kwargs) if kwargs else options
    if options is not None and not isinstance(options, Mapping):
        raise ConfigurationError.for_field("options", options, "options must be a mapping")
    return DEFAULT_OPTIONS.merge(options, **kwargs)


def load_options(
    config_path: str | Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> SanitizeOptions:
    """Load options from YAML, then environment overrides, then runtime overrides."""
    target = Path(config_path) if config_path is not None else YAMLConfigLoader.resolve_path()
    file_data = normalize_keys(YAMLConfigLoader.load_dict(target), SanitizeOptions)
    env_overrides = _collect_env_overrides()
    merged = deep_merge(file_data, env_overrides)
    merged = deep_merge(merged, normalize_keys(overrides or {}, SanitizeOptions))
    logger.debug(
        "loading sanitizer options path=%s file_keys=%s env_keys=%s",
        target,
        sorted(file_data),
        sorted(env_overrides),
    )
    return build_options(merged)


def _option_default(path: list[str]) -> Any:
    """Default of the option addressed by path, or None when no such option exists."""
    model: type[BaseModel] = SanitizeOptions
    for part in path[:-1]:
        field = model.model_fields.get(part)
        nested = field.annotation if field is not None else None
        if not (isinstance(nested, type) and issubclass(nested, BaseModel)):
            return None
        model = nested
    field = model.model_fields.get(path[-1])
    if field is None:
        return None
    return field.get_default(call_default_factory=True)


def _coerce_env_value(raw: str, default: Any = None) -> Any:
    """Coerce an environment string toward the shape of the option's default.

    Text options keep the raw string. List options take a JSON array or
    fall back to a comma-separated list. Anything else is read as a flag,
    null or integer; values that fit none of these are returned stripped so
    validation reports them.
    """
    if isinstance(default, str):
        return raw
    value = raw.strip()
    if isinstance(default, (tuple, frozenset)):
        if value.startswith("["):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass
        return [item.strip() for item in value.split(",") if item.strip()]
    lowered = value.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    if lowered in {"", "null", "none"}:
        return None
    if value.lstrip("-").isdigit():
        return int(value)
    return value


def _collect_env_overrides(prefix: str = ENV_PREFIX) -> dict[str, Any]:
    """Read MONGOSANITIZE_<OPTION>[__<SUBOPTION>] variables into a nested mapping."""
    overrides: dict[str, Any] = {}
    for key, raw_value in sorted(os.environ.items()):
        if not key.startswith(prefix) or key == YAMLConfigLoader.ENV_VAR:
            continue
        path = [part.lower() for part in key[len(prefix) :].split("__") if part]
        if not path:
            continue
        section = overrides
        for part in path[:-1]:
            section = section.setdefault(part, {})
            if not isinstance(section, dict):
                raise ConfigurationError.for_field(part, section, "option is not a group of sub-options")
        section[path[-1]] = _coerce_env_value(raw_value, _option_default(path))
    return overrides
