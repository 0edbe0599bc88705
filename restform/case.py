"""Key casing conventions for API responses."""

import re
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic.alias_generators import to_camel

_CAMEL_KEY = re.compile(r"[a-z][A-Za-z0-9]*")
_SNAKE_KEY = re.compile(r"[a-z0-9_]+")
_FIRST_CAP = re.compile(r"(.)([A-Z][a-z]+)")
_ALL_CAP = re.compile(r"([a-z0-9])([A-Z])")


class CaseType(str, Enum):
    """Casing applied to the keys of transformed records."""

    CAMEL = "camel-case"
    SNAKE = "snake-case"


def to_snake(key: str) -> str:
    """Convert a camelCase or PascalCase key to snake_case.

    Words are split before upper case letters only, so digits stay attached
    to the word they follow (``ipv4Address`` -> ``ipv4_address``).
    """
    key = _FIRST_CAP.sub(r"\1_\2", key.replace("-", "_"))
    return _ALL_CAP.sub(r"\1_\2", key).lower()


def format_key(key: str, case_type: CaseType) -> str:
    """Convert a single key to the given case convention.

    Keys already in the target convention are returned unchanged.
    """
    # Raises ValueError for unknown conventions
    if CaseType(case_type) is CaseType.CAMEL:
        if _CAMEL_KEY.fullmatch(key):
            return key
        return to_camel(key)
    if _SNAKE_KEY.fullmatch(key):
        return key
    return to_snake(key)


def format_case(value: Any, case_type: CaseType) -> Any:
    """
    Format the case of a key, or of every key in a nested structure.

    Strings are treated as a single key. Mappings are copied with every key
    converted, descending into nested mappings and lists. Any other value is
    returned untouched.

    Args:
        value: Key string, mapping, list or scalar
        case_type: Target case convention

    Returns:
        The converted key or a new structure with converted keys
    """
    if isinstance(value, str):
        return format_key(value, case_type)
    return _format_keys(value, case_type)


def _format_keys(value: Any, case_type: CaseType) -> Any:
    if isinstance(value, Mapping):
        return {
            format_key(key, case_type) if isinstance(key, str) else key: _format_keys(item, case_type)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_format_keys(item, case_type) for item in value]
    # Strings nested as values are data, not keys
    return value
