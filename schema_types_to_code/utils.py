"""
Utility functions for the type generator.
"""

import re

# Splits PascalCase, camelCase and acronyms: "JSONFilter" -> JSON, Filter
_WORD_PATTERN = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|[0-9]+")


def _normalize_separators(text: str) -> str:
    """Normalize separators (underscores, hyphens) to spaces."""
    return text.replace("_", " ").replace("-", " ")


def split_words(text: str) -> list[str]:
    """Split text into words, handling camelCase boundaries and acronyms."""
    return _WORD_PATTERN.findall(_normalize_separators(text))


def to_kebab_case(text: str) -> str:
    """Convert PascalCase, camelCase or snake_case text to kebab-case.

    Examples:
        "UserWhere" -> "user-where"
        "AggregateUser" -> "aggregate-user"
        "JSONFilter" -> "json-filter"
        "user_profile" -> "user-profile"
        "Int2Filter" -> "int-2-filter"

    Args:
        text: The text to convert

    Returns:
        kebab-case string
    """
    if not text:
        return ""
    return "-".join(word.lower() for word in split_words(text))


def strip_suffix(text: str, suffix: str) -> str:
    """Remove ``suffix`` unless it is the whole text."""
    if suffix and text.endswith(suffix) and len(text) > len(suffix):
        return text[: -len(suffix)]
    return text
