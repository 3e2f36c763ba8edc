from .resource_registry import ResourceRegistry

__all__ = ["ResourceRegistry"]
