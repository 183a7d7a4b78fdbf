"""Route modules."""

from . import badges, metrics, namespaces

__all__ = [
    "badges",
    "metrics",
    "namespaces",
]
