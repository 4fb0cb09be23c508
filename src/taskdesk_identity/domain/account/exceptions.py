"""Account domain exceptions.

Custom exceptions for the account domain, used for validation
and business rule violations.
"""


class InvalidEmailError(ValueError):
    """Raised when email format is invalid."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class DuplicateAccountError(Exception):
    """Email already registered."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"An account with this email already exists: {email}")


class AccountNotFoundError(Exception):
    """Account not found."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"Account not found: {email}")
