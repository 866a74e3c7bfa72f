"""Nullable infrastructure: deterministic tests without mocks.

The package contains a small two-service system (an HTML site and a ROT-13
JSON service) built on infrastructure wrappers that each come in a live form
and a null form. See ``nullables.infrastructure`` for the wrappers.
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
]
