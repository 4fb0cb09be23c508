"""Account domain.

This domain handles:
- Account aggregate (identity, credentials hash, lockout state)
- Email normalization and validation
- Password strength policy
"""

from taskdesk_identity.domain.account.aggregates import Account
from taskdesk_identity.domain.account.exceptions import (
    AccountNotFoundError,
    DuplicateAccountError,
    InvalidEmailError,
)
from taskdesk_identity.domain.account.repositories import AccountRepository
from taskdesk_identity.domain.account.value_objects import (
    Email,
    PasswordFeedback,
    PasswordStrength,
    normalize_email,
)

__all__ = [
    "Account",
    "AccountNotFoundError",
    "AccountRepository",
    "DuplicateAccountError",
    "Email",
    "InvalidEmailError",
    "PasswordFeedback",
    "PasswordStrength",
    "normalize_email",
]
