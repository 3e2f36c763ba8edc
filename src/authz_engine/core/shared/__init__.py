"""Shared building blocks used by several features."""

from .catalog_index import CatalogIndex

__all__ = ["CatalogIndex"]
