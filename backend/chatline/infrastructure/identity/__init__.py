from chatline.infrastructure.identity.jwt_identity_provider import JwtIdentityProvider

__all__ = ["JwtIdentityProvider"]
