"""Localization utilities: language identifiers, ASGI language detection and redirects, and Fluent messages."""

__version__ = "0.5.0"

__all__ = ["__version__"]