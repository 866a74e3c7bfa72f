"""ROT-13 transformation logic."""

from __future__ import annotations

import string

_ROT13 = str.maketrans(
    string.ascii_lowercase + string.ascii_uppercase,
    string.ascii_lowercase[13:] + string.ascii_lowercase[:13] + string.ascii_uppercase[13:] + string.ascii_uppercase[:13],
)


def transform(text: str) -> str:
    """Apply ROT-13 to ASCII letters, leaving every other character unchanged.

    Args:
        text: Text to transform.

    Returns:
        Transformed text.

    Examples:
        >>> transform("Hello, World!")
        'Uryyb, Jbeyq!'
        >>> transform(transform("é abc"))
        'é abc'
    """
    return text.translate(_ROT13)


__all__ = [
    "transform",
]
