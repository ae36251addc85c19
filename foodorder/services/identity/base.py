"""
Identity Service Abstract Base Class

Defines the contract for turning a bearer credential into a typed
``Principal`` and for issuing credentials after a successful login.

Failures are uniform: every problem with a credential surfaces as
``Unauthenticated``. Role checks are not this layer's concern; see
``foodorder.services.access``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from foodorder.models import Role


@dataclass(frozen=True)
class Principal:
    """
    Authenticated caller for one request.

    Attributes:
        user_id: Identifier of the account the token was issued to
        role: Diner or Merchant
    """
    user_id: int
    role: Role

    @property
    def is_diner(self) -> bool:
        return self.role == Role.DINER

    @property
    def is_merchant(self) -> bool:
        return self.role == Role.MERCHANT


class BaseIdentityService(ABC):
    """
    Abstract base class for identity services.

    Example:
        >>> service = build_identity_service(settings)
        >>> token = service.issue_token(user_id=7, role=Role.DINER)
        >>> service.authenticate(token)
        Principal(user_id=7, role=<Role.DINER: 'diner'>)
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of the token provider (e.g. "jwt")."""

    @abstractmethod
    def issue_token(self, user_id: int, role: Role) -> str:
        """
        Issue a signed credential for an account.

        Args:
            user_id: Account identifier
            role: Account role

        Returns:
            str: Opaque bearer credential
        """

    @abstractmethod
    def authenticate(self, credential: Optional[str]) -> Principal:
        """
        Verify a bearer credential.

        Args:
            credential: Raw token (without the "Bearer " prefix)

        Returns:
            Principal: The caller

        Raises:
            Unauthenticated: If the credential is absent or invalid
        """
