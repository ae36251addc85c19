"""
JWT Identity Service Implementation

Issues and verifies HS256 tokens using PyJWT. Tokens carry the account
id and role plus the registered claims iat, nbf, exp and iss.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from foodorder.core.errors import Unauthenticated
from foodorder.models import Role
from foodorder.services.identity.base import BaseIdentityService, Principal

logger = logging.getLogger(__name__)


class JWTIdentityService(BaseIdentityService):
    """
    Identity service backed by signed JSON Web Tokens.

    Attributes:
        secret: HMAC signing secret
        algorithm: Signing algorithm (HS256 by default)
        issuer: Expected "iss" claim
        ttl: Lifetime of issued tokens
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        issuer: str = "foodorder",
        ttl_hours: int = 24,
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.issuer = issuer
        self.ttl = timedelta(hours=ttl_hours)

    @property
    def provider_name(self) -> str:
        return "jwt"

    def issue_token(self, user_id: int, role: Role) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "user_id": user_id,
            "user_type": Role(role).value,
            "iat": now,
            "nbf": now,
            "exp": now + self.ttl,
            "iss": self.issuer,
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def authenticate(self, credential: Optional[str]) -> Principal:
        if not credential:
            raise Unauthenticated("Token is missing")

        try:
            claims = jwt.decode(
                credential,
                self.secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={"require": ["exp", "iat", "iss"]},
            )
        except jwt.ExpiredSignatureError:
            raise Unauthenticated("Token has expired")
        except jwt.PyJWTError as e:
            logger.debug(f"Rejected token: {e}")
            raise Unauthenticated(f"Invalid token: {e}")

        user_id = claims.get("user_id")
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise Unauthenticated("Invalid token: missing user id")

        try:
            role = Role(claims.get("user_type"))
        except ValueError:
            raise Unauthenticated("Invalid token: unknown user type")

        return Principal(user_id=user_id, role=role)
