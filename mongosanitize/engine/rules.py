"""Built-in patterns and the email grammar used by the sanitizer."""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class BuiltinPatternRule:
    """Pattern rule with a human-readable description."""

    pattern: str
    description: str = ""
    flags: int = 0

    def compile(self) -> re.Pattern[str]:
        return re.compile(self.pattern, self.flags)


def default_pattern_rules() -> list[BuiltinPatternRule]:
    """Return default NoSQL-injection patterns, in application order."""
    return [
        BuiltinPatternRule(r"[$]", "Operator sigil"),
        BuiltinPatternRule(r"\.", "Dotted field path"),
        BuiltinPatternRule(r"[\\/{}.(*+?|\[\]^)]", "Regex metacharacter"),
        BuiltinPatternRule(r"[\x00-\x1F\x7F-\x9F]", "Control character"),
        BuiltinPatternRule(r"\{\s*\$|\$?\{(?:.|\r?\n)*\}", "Template expression"),
    ]


DEFAULT_PATTERNS: tuple[re.Pattern[str], ...] = tuple(rule.compile() for rule in default_pattern_rules())

# RFC 5322 addr-spec, matched case-insensitively against the whole string.
EMAIL_PATTERN = re.compile(
    r"(?:[a-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[a-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    r'|"(?:[\x01-\x08\x0b\x0c\x0e-\x1f\x21\x23-\x5b\x5d-\x7f]|\\[\x01-\x09\x0b\x0c\x0e-\x7f])*")'
    r"@"
    r"(?:(?:[a-z0-9](?:[a-z0-9-]*[a-z0-9])?\.)+[a-z0-9](?:[a-z0-9-]*[a-z0-9])?"
    r"|\[(?:(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}"
    r"(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?"
    r"|[a-z0-9-]*[a-z0-9]:(?:[\x01-\x08\x0b\x0c\x0e-\x1f\x21-\x5a\x53-\x7f]|\\[\x01-\x09\x0b\x0c\x0e-\x7f])+)\])",
    re.IGNORECASE,
)


def is_email(value: object) -> bool:
    """Return True when value is a string holding exactly one email address."""
    return isinstance(value, str) and EMAIL_PATTERN.fullmatch(value) is not None
