"""YAML configuration loader utilities."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from mongosanitize.exceptions import ConfigLoadError


class YAMLConfigLoader:
    """Load sanitizer options from mongosanitize.yaml or a shared application YAML.

    A file may hold the options at its root, or under a ``mongosanitize:``
    section when the file is shared with other application settings.
    """

    DEFAULT_FILENAME = "mongosanitize.yaml"
    ENV_VAR = "MONGOSANITIZE_CONFIG"
    SECTION = "mongosanitize"

    @classmethod
    def resolve_path(cls, cli_path: str | None = None) -> Path:
        """Resolve config path by priority: env -> explicit path -> cwd default."""
        for candidate in (os.environ.get(cls.ENV_VAR, ""), cli_path or ""):
            if candidate.strip():
                return Path(candidate.strip())
        return Path.cwd() / cls.DEFAULT_FILENAME

    @classmethod
    def load_dict(cls, path: str | Path | None = None) -> dict[str, Any]:
        """Load the options mapping. Missing or empty file yields empty dict."""
        target = Path(path) if path is not None else cls.resolve_path()
        if not target.is_file():
            return {}
        return cls._options_section(cls._read_document(target), target)

    @classmethod
    def _options_section(cls, document: Any, target: Path) -> dict[str, Any]:
        if document is None:
            return {}
        if not isinstance(document, dict):
            raise ConfigLoadError(f"Config root must be mapping: {target}")
        if cls.SECTION not in document:
            return document
        section = document[cls.SECTION]
        if section is None:
            return {}
        if not isinstance(section, dict):
            raise ConfigLoadError(f"'{cls.SECTION}' section must be mapping: {target}")
        return section

    @staticmethod
    def _read_document(target: Path) -> Any:
        try:
            return yaml.safe_load(target.read_text(encoding="utf-8"))
        except yaml.MarkedYAMLError as exc:
            mark = exc.problem_mark or exc.context_mark
            where = f"{target}:{mark.line + 1}:{mark.column + 1}" if mark is not None else str(target)
            raise ConfigLoadError(f"Invalid YAML at {where}: {exc.problem or exc}") from exc
        except yaml.YAMLError as exc:
            raise ConfigLoadError(f"Invalid YAML at {target}: {exc}") from exc
