"""Identity provider boundary: records, protocol, attribute codecs and updater."""

from .entities import (
    Attributes,
    IdentityProvider,
    RoleAttributeBag,
    RoleRecord,
    UserAttributeBag,
    UserRecord,
)
from .services import AttributeUpdater

__all__ = [
    "Attributes",
    "AttributeUpdater",
    "IdentityProvider",
    "RoleAttributeBag",
    "RoleRecord",
    "UserAttributeBag",
    "UserRecord",
]
