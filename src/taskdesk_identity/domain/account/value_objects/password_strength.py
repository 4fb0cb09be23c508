"""Password strength evaluation.

The policy has six rules. A password is valid only when every rule holds;
the score (0-4) is computed independently so a strength meter can show
progress on passwords that are not yet acceptable.
"""

import re
from dataclasses import dataclass

MIN_LENGTH = 8

_UPPERCASE = re.compile(r"[A-Z]")
_LOWERCASE = re.compile(r"[a-z]")
_DIGIT = re.compile(r"[0-9]")
_SPECIAL = re.compile(r"[^A-Za-z0-9]")
_STARTS_UPPERCASE = re.compile(r"^[A-Z]")


@dataclass(frozen=True)
class PasswordFeedback:
    """Per-rule results of a strength check."""

    has_min_length: bool
    has_uppercase: bool
    has_lowercase: bool
    has_number: bool
    has_special_char: bool
    starts_with_uppercase: bool


# Order in which unmet rules are reported to the user
_FAILURE_MESSAGES: tuple[tuple[str, str], ...] = (
    ("has_min_length", f"Password must be at least {MIN_LENGTH} characters long"),
    ("starts_with_uppercase", "Password must start with an uppercase letter"),
    ("has_uppercase", "Password must include at least one uppercase letter"),
    ("has_lowercase", "Password must include at least one lowercase letter"),
    ("has_number", "Password must include at least one number"),
    ("has_special_char", "Password must include at least one special character"),
)


@dataclass(frozen=True)
class PasswordStrength:
    """Outcome of evaluating a password against the policy.

    Attributes
    ----------
    is_valid
        True only when every rule in ``feedback`` holds
    score
        0 (very weak) to 4 (very strong): one point each for length,
        mixed case, a digit and a special character
    feedback
        Per-rule results
    """

    is_valid: bool
    score: int
    feedback: PasswordFeedback

    @classmethod
    def evaluate(cls, password: str) -> "PasswordStrength":
        feedback = PasswordFeedback(
            has_min_length=len(password) >= MIN_LENGTH,
            has_uppercase=bool(_UPPERCASE.search(password)),
            has_lowercase=bool(_LOWERCASE.search(password)),
            has_number=bool(_DIGIT.search(password)),
            has_special_char=bool(_SPECIAL.search(password)),
            starts_with_uppercase=bool(_STARTS_UPPERCASE.match(password)),
        )

        score = 0
        if feedback.has_min_length:
            score += 1
        if feedback.has_uppercase and feedback.has_lowercase:
            score += 1
        if feedback.has_number:
            score += 1
        if feedback.has_special_char:
            score += 1

        is_valid = all(
            (
                feedback.has_min_length,
                feedback.has_uppercase,
                feedback.has_lowercase,
                feedback.has_number,
                feedback.has_special_char,
                feedback.starts_with_uppercase,
            ),
        )
        return cls(is_valid=is_valid, score=score, feedback=feedback)

    def first_failure(self) -> str | None:
        """Message for the first unmet rule, or None when the password is valid."""
        for field, message in _FAILURE_MESSAGES:
            if not getattr(self.feedback, field):
                return message
        return None
