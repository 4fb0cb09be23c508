"""Account repository interfaces."""

from taskdesk_identity.domain.account.repositories.account_repository import (
    AccountRepository,
)

__all__ = ["AccountRepository"]
