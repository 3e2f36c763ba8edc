"""Catalog change notification across engine instances."""

from .notifier import (
    KIND_PERMISSION,
    KIND_RESOURCE,
    CatalogChange,
    CatalogChangeNotifier,
    ChangeHandler,
    NullCatalogNotifier,
    RedisCatalogNotifier,
)

__all__ = [
    "KIND_PERMISSION",
    "KIND_RESOURCE",
    "CatalogChange",
    "CatalogChangeNotifier",
    "ChangeHandler",
    "NullCatalogNotifier",
    "RedisCatalogNotifier",
]
