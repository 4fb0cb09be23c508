"""Password hashing service using bcrypt.

Provides salted password hashing and verification together with the
account password policy.
"""

import bcrypt

from taskdesk_identity.domain.account.value_objects import PasswordStrength
from taskdesk_identity.exceptions import WeakPasswordError


class PasswordHashingService:
    """Service for secure password hashing and verification.

    Uses bcrypt for password hashing with configurable work factor.
    Also evaluates and enforces the password strength policy.

    Examples
    --------
    >>> service = PasswordHashingService(rounds=4)
    >>> hashed = service.hash("Secret1!")
    >>> service.verify("Secret1!", hashed)
    True
    >>> service.verify("wrong_password", hashed)
    False
    """

    # bcrypt only looks at the first 72 bytes; longer input is rejected
    MAX_BYTES = 72

    def __init__(self, rounds: int = 12):
        """Initialize the password hashing service.

        Parameters
        ----------
        rounds
            The bcrypt work factor (log2 of iterations). Default is 12,
            which is a good balance of security and performance.
        """
        self._rounds = rounds

    def hash(self, password: str, *, enforce_policy: bool = True) -> str:
        """Hash a plaintext password.

        Parameters
        ----------
        password
            The plaintext password to hash
        enforce_policy
            Reject passwords that fail the strength policy. Only legacy
            imports of existing credentials turn this off.

        Returns
        -------
        The bcrypt hash as a string

        Raises
        ------
        WeakPasswordError
            If password doesn't meet requirements
        """
        if enforce_policy:
            self.ensure_strong(password)
        else:
            self._check_length(password)
        salt = bcrypt.gensalt(rounds=self._rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against a hash.

        Parameters
        ----------
        password
            The plaintext password to check
        password_hash
            The bcrypt hash to verify against

        Returns
        -------
        True if password matches, False otherwise
        """
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except (ValueError, TypeError):
            # Invalid hash format or over-long password
            return False

    def evaluate(self, password: str) -> PasswordStrength:
        """Score a password against the policy without raising."""
        return PasswordStrength.evaluate(password)

    def ensure_strong(self, password: str) -> PasswordStrength:
        """Validate that a password meets the policy.

        Raises
        ------
        WeakPasswordError
            Carrying the message of the first unmet rule
        """
        if not password:
            msg = "Password cannot be empty"
            raise WeakPasswordError(msg)

        self._check_length(password)

        strength = PasswordStrength.evaluate(password)
        if not strength.is_valid:
            raise WeakPasswordError(strength.first_failure() or "Password is too weak")
        return strength

    def needs_rehash(self, password_hash: str) -> bool:
        """Check if a password hash was created with a different work factor.

        Parameters
        ----------
        password_hash
            The existing hash to check

        Returns
        -------
        True if the hash should be regenerated
        """
        try:
            # bcrypt format: $2b$XX$...
            parts = password_hash.split("$")
            if len(parts) >= 3:
                return int(parts[2]) != self._rounds
        except (ValueError, IndexError):
            pass
        return True

    def _check_length(self, password: str) -> None:
        if len(password.encode("utf-8")) > self.MAX_BYTES:
            msg = f"Password cannot exceed {self.MAX_BYTES} bytes"
            raise WeakPasswordError(msg)
