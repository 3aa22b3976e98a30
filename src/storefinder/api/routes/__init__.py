"""Route group exports."""

from . import health, preferences, search, stores

__all__ = ["health", "stores", "search", "preferences"]
