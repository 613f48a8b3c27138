import html
from typing import Optional


def sanitize_string(value: Optional[str]) -> Optional[str]:
    """
    Sanitize a string by escaping HTML special characters to prevent XSS.
    Returns None if input is None.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        return value
    return html.escape(value.strip(), quote=True)


def sanitize_list(values: Optional[list]) -> list:
    """Sanitize every string in a list, dropping blanks and duplicates (order kept)"""
    if not values:
        return []

    seen = set()
    sanitized = []
    for value in values:
        if not isinstance(value, str):
            continue
        cleaned = sanitize_string(value)
        if cleaned and cleaned not in seen:
            seen.add(cleaned)
            sanitized.append(cleaned)
    return sanitized
