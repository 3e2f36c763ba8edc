from .principal import Principal, UserAuthorizationState

__all__ = ["Principal", "UserAuthorizationState"]
