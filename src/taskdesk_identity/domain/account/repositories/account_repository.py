"""Account repository interface."""

from abc import ABC, abstractmethod
from typing import Optional, Union

from taskdesk_identity.domain.account.aggregates.account import Account
from taskdesk_identity.domain.account.value_objects.email import Email


class AccountRepository(ABC):
    """Repository interface for Account aggregates."""

    @abstractmethod
    async def find_by_email(self, email: Union[str, Email]) -> Optional[Account]:
        """Find an account by its (normalized) email address."""

    @abstractmethod
    async def find_by_id(self, account_id: str) -> Optional[Account]:
        """Find an account by its ID."""

    @abstractmethod
    async def exists_by_email(self, email: Union[str, Email]) -> bool:
        """Check if an account exists with the given email."""

    @abstractmethod
    async def add(self, account: Account) -> None:
        """Persist a new account.

        Raises DuplicateAccountError if the email is already taken.
        """

    @abstractmethod
    async def save(self, account: Account) -> None:
        """Create or overwrite an account."""

    @abstractmethod
    async def delete(self, email: Union[str, Email]) -> bool:
        """Delete an account. Returns True if one was removed."""

    @abstractmethod
    async def list_all(self) -> list[Account]:
        """List all accounts."""
