"""
Identity Service Factory

Provides a single entry point for building the identity service from
settings. The application factory builds one instance and keeps it on
``app.state``; request handlers never construct their own.

Usage:
    from foodorder.services.identity import build_identity_service

    identity = build_identity_service(settings)
    principal = identity.authenticate(token)
"""

import logging

from foodorder.core.config import Settings
from foodorder.services.identity.base import BaseIdentityService, Principal
from foodorder.services.identity.jwt_service import JWTIdentityService

logger = logging.getLogger(__name__)


def build_identity_service(settings: Settings) -> BaseIdentityService:
    """
    Create an identity service from explicit settings.

    Returns:
        BaseIdentityService: Configured identity service instance
    """
    logger.debug(f"Identity Service: Using JWTIdentityService ({settings.jwt_algorithm})")
    return JWTIdentityService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        issuer=settings.jwt_issuer,
        ttl_hours=settings.token_ttl_hours,
    )


__all__ = [
    "build_identity_service",
    "BaseIdentityService",
    "JWTIdentityService",
    "Principal",
]
