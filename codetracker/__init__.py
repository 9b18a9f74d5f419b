"""Gift-code tracker for Legend of Mushroom."""

__version__ = "1.0.0"
