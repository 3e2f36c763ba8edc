"""Identity provider boundary entities and protocols."""

from .attribute_bags import RoleAttributeBag, UserAttributeBag
from .protocols import IdentityProvider
from .records import Attributes, RoleRecord, UserRecord

__all__ = [
    "Attributes",
    "IdentityProvider",
    "RoleAttributeBag",
    "RoleRecord",
    "UserAttributeBag",
    "UserRecord",
]
