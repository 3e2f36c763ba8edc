from .identity_provider import KeycloakIdentityProvider

__all__ = ["KeycloakIdentityProvider"]
