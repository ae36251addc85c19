"""
Account Service

Registration and login for diners and merchants. Passwords are stored as
bcrypt hashes; a successful login returns a bearer token from the
identity service.
"""

import asyncio
import logging

import bcrypt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from foodorder.core.errors import Conflict, InvalidRequest, Unauthenticated
from foodorder.models import Role, User
from foodorder.schemas import PASSWORD_MAX_BYTES
from foodorder.services.identity.base import BaseIdentityService

logger = logging.getLogger(__name__)


def hash_password(password: str, rounds: int = 12) -> str:
    encoded = password.encode("utf-8")
    if len(encoded) > PASSWORD_MAX_BYTES:
        raise InvalidRequest(f"Password must be at most {PASSWORD_MAX_BYTES} bytes in UTF-8")
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds)).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    encoded = password.encode("utf-8")
    # No stored hash can match input bcrypt refuses to hash
    if len(encoded) > PASSWORD_MAX_BYTES:
        return False
    return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))


class AccountService:
    """
    Creates accounts and exchanges credentials for tokens.

    Attributes:
        identity: Identity service issuing tokens
        bcrypt_rounds: Work factor for new password hashes
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        identity: BaseIdentityService,
        bcrypt_rounds: int = 12,
    ):
        self._session_factory = session_factory
        self.identity = identity
        self.bcrypt_rounds = bcrypt_rounds

    async def register(self, email: str, password: str, role: Role) -> User:
        """
        Create a new account.

        Raises:
            InvalidRequest: If the password is too long for bcrypt
            Conflict: If the email is already registered
        """
        # bcrypt is CPU-bound; keep it off the event loop
        password_hash = await asyncio.to_thread(hash_password, password, self.bcrypt_rounds)

        async with self._session_factory() as session:
            existing = await session.execute(select(User.id).where(User.email == email))
            if existing.scalar_one_or_none() is not None:
                raise Conflict("Email already registered")

            user = User(
                email=email,
                password_hash=password_hash,
                user_type=role,
            )
            session.add(user)
            try:
                await session.commit()
            except IntegrityError:
                # Lost a race with a concurrent registration of the same email
                await session.rollback()
                raise Conflict("Email already registered")
            await session.refresh(user)

        logger.info(f"Registered {user.user_type.value} account #{user.id}")
        return user

    async def login(self, email: str, password: str) -> str:
        """
        Verify credentials and issue a token.

        Raises:
            Unauthenticated: Unknown email or wrong password
        """
        async with self._session_factory() as session:
            result = await session.execute(select(User).where(User.email == email))
            user = result.scalar_one_or_none()

        if user is None or not await asyncio.to_thread(
            check_password, password, user.password_hash
        ):
            raise Unauthenticated("Invalid credentials")

        return self.identity.issue_token(user.id, user.user_type)
