"""Value objects for the account domain."""

from taskdesk_identity.domain.account.value_objects.email import (
    Email,
    normalize_email,
)
from taskdesk_identity.domain.account.value_objects.password_strength import (
    PasswordFeedback,
    PasswordStrength,
)

__all__ = [
    "Email",
    "PasswordFeedback",
    "PasswordStrength",
    "normalize_email",
]
