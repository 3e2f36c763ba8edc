from .resource_repository import AsyncPGResourceRepository

__all__ = ["AsyncPGResourceRepository"]
