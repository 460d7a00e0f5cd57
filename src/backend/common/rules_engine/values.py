"""Safe accessors over decoded YAML/JSON values.

Manifests arrive as loosely-typed nested mappings. Every helper here returns
`None` (or an empty value) on a missing key or a type mismatch instead of
raising, so a malformed field reads as "absent".
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence


def as_mapping(value: Any) -> Optional[Mapping[str, Any]]:
    return value if isinstance(value, Mapping) else None


def as_sequence(value: Any) -> Optional[Sequence[Any]]:
    # Strings are sequences too, but never a list of containers.
    if isinstance(value, (list, tuple)):
        return value
    return None


def get_path(value: Any, *keys: str) -> Any:
    current = value
    for key in keys:
        mapping = as_mapping(current)
        if mapping is None or key not in mapping:
            return None
        current = mapping[key]
    return current


def has_key(value: Any, key: str) -> bool:
    mapping = as_mapping(value)
    return mapping is not None and key in mapping


def as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def as_optional_str(value: Any) -> Optional[str]:
    # `cpu: 1` (an unquoted number) is a type mismatch, read as absent.
    return value if isinstance(value, str) else None


def as_optional_bool(value: Any) -> Optional[bool]:
    return value if isinstance(value, bool) else None


def as_optional_int(value: Any) -> Optional[int]:
    # bool is an int subclass; `runAsUser: false` is not user 0.
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value
