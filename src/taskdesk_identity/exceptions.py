"""Identity and authentication exceptions.

These exceptions are raised by the taskdesk_identity package and should be
caught and handled by the presentation layer. ``SessionManager.login`` and
``SessionManager.login_with_token`` already convert ``AuthError`` subclasses
into failed ``LoginResult`` values; ``StoreUnavailableError`` is never
converted.
"""


class StoreUnavailableError(Exception):
    """Raised when persistent storage cannot be opened or created."""

    def __init__(self, message: str = "Persistent storage is unavailable"):
        self.message = message
        super().__init__(self.message)


class AuthError(Exception):
    """Base exception for all authentication errors."""

    def __init__(self, message: str = "Authentication error"):
        self.message = message
        super().__init__(self.message)


class WeakPasswordError(AuthError):
    """Raised when a password doesn't meet strength requirements."""

    def __init__(self, message: str = "Password does not meet requirements"):
        super().__init__(message)


class InvalidCredentialsError(AuthError):
    """Raised when email or password is incorrect during login."""

    def __init__(self, message: str = "Invalid email or password."):
        super().__init__(message)


class AccountLockedError(AuthError):
    """Raised when an account is locked due to too many failed login attempts."""

    def __init__(
        self,
        message: str = "Account is temporarily locked",
        remaining_seconds: int | None = None,
        locked_until: str | None = None,
    ):
        self.remaining_seconds = remaining_seconds
        self.locked_until = locked_until
        if locked_until:
            message = f"{message}. Try again after {locked_until}"
        super().__init__(message)


class TokenInvalidError(AuthError):
    """Raised when a remember-me token is unknown or no longer usable."""

    def __init__(self, message: str = "Please log in again."):
        super().__init__(message)


class TokenExpiredError(AuthError):
    """Raised when a remember-me token has expired."""

    def __init__(self, message: str = "Session expired. Please log in again."):
        super().__init__(message)
