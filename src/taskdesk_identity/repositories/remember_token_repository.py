"""Abstract repository interface for remember-me tokens."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class RememberTokenData:
    """Immutable remember-me token data."""

    token: str
    user_id: str
    expires: datetime

    def is_expired(self, now: datetime) -> bool:
        """Check if the token has expired."""
        return now > self.expires


class RememberTokenRepository(ABC):
    """Abstract repository for remember-me tokens."""

    @abstractmethod
    async def create(
        self,
        token: str,
        user_id: str,
        expires: datetime,
    ) -> RememberTokenData:
        """Persist a new token.

        Parameters
        ----------
        token
            The opaque token string (primary key)
        user_id
            ID of the owning account
        expires
            When the token expires

        Returns
        -------
        The stored token data
        """

    @abstractmethod
    async def find_by_token(self, token: str) -> RememberTokenData | None:
        """Find a token regardless of expiry.

        Parameters
        ----------
        token
            The opaque token string

        Returns
        -------
        Token data if found, None otherwise
        """

    @abstractmethod
    async def find_all_for_user(self, user_id: str) -> list[RememberTokenData]:
        """List every token issued to an account.

        Parameters
        ----------
        user_id
            ID of the owning account
        """

    @abstractmethod
    async def delete(self, token: str) -> bool:
        """Delete a token.

        Returns
        -------
        True if deleted, False if not found
        """

    @abstractmethod
    async def delete_all_for_user(self, user_id: str) -> int:
        """Delete every token issued to an account.

        Returns
        -------
        Number of tokens deleted
        """

    @abstractmethod
    async def cleanup_expired(self) -> int:
        """Remove expired tokens.

        Returns
        -------
        Number of tokens deleted
        """
