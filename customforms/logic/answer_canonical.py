"""Canonicalization helpers for prompt response values.

Provides a single function to render a prompt value as the stable string
used for submission payloads and text-length checks.
"""

from __future__ import annotations

from typing import Any


def canonicalize_prompt_value(value: Any) -> str:
    """Return a stable string representation for a prompt value.

    - None     -> ""
    - Booleans -> "true" / "false"
    - Numbers  -> integer form when integral, else decimal string
    - Text     -> as-is string
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return str(value)
    return str(value)


__all__ = ["canonicalize_prompt_value"]
