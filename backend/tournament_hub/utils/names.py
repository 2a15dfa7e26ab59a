"""
Name matching helpers shared by importers, team saves and team merges.

Tournament, team and coach names are matched case-insensitively after
trimming. Coach grouping deliberately does NOT use this: grouping is by the
exact stored coach_name.
"""
from typing import Any, Optional

PLACEHOLDER_VALUES = ("", "—", "-", "–", "N/A", "n/a", "none", "None")


def normalize_name(name: Optional[str]) -> str:
    """Lowercase + strip. None -> ""."""
    if name is None:
        return ""
    return str(name).strip().lower()


def names_match(a: Optional[str], b: Optional[str]) -> bool:
    return normalize_name(a) == normalize_name(b)


def clean_value(value: Any) -> Optional[str]:
    """Strip a cell; empty or placeholder values become None."""
    if value is None:
        return None
    value = str(value).strip()
    if value in PLACEHOLDER_VALUES:
        return None
    return value


def name_sort_key(name: Optional[str]):
    """Approximates locale-aware ordering: case-insensitive first, then exact."""
    name = name or ""
    return (name.casefold(), name)
