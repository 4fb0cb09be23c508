"""Unit tests for PasswordHashingService."""

import pytest

from taskdesk_identity.exceptions import WeakPasswordError
from taskdesk_identity.services import PasswordHashingService, generate_token

STRONG_PASSWORD = "Analytical1!"


class TestPasswordHashingService:
    """Tests for password hashing and verification."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = PasswordHashingService(rounds=4)  # Low rounds for fast tests

    def test_hash_returns_bcrypt_format(self):
        """Test that hash returns a valid bcrypt hash."""
        hashed = self.service.hash(STRONG_PASSWORD)

        # bcrypt hashes start with $2b$ or $2a$
        assert hashed.startswith("$2")
        assert len(hashed) >= 50
        assert STRONG_PASSWORD not in hashed

    def test_verify_correct_password(self):
        """Test that verify returns True for correct password."""
        hashed = self.service.hash(STRONG_PASSWORD)

        assert self.service.verify(STRONG_PASSWORD, hashed) is True

    def test_verify_incorrect_password(self):
        """Test that verify returns False for incorrect password."""
        hashed = self.service.hash(STRONG_PASSWORD)

        assert self.service.verify("Wrong_password1", hashed) is False

    def test_verify_invalid_hash_returns_false(self):
        """Test that verify returns False for invalid hash format."""
        assert self.service.verify(STRONG_PASSWORD, "not_a_valid_hash") is False
        assert self.service.verify(STRONG_PASSWORD, "") is False

    def test_hash_produces_different_hashes(self):
        """Test that hashing same password twice produces different hashes."""
        hash1 = self.service.hash(STRONG_PASSWORD)
        hash2 = self.service.hash(STRONG_PASSWORD)

        # Due to random salt, hashes should differ
        assert hash1 != hash2
        assert self.service.verify(STRONG_PASSWORD, hash1)
        assert self.service.verify(STRONG_PASSWORD, hash2)

    def test_needs_rehash(self):
        """Test that hashes from another work factor need rehashing."""
        hashed = self.service.hash(STRONG_PASSWORD)

        assert self.service.needs_rehash(hashed) is False
        assert PasswordHashingService(rounds=5).needs_rehash(hashed) is True
        assert self.service.needs_rehash("garbage") is True


class TestPasswordPolicy:
    """Tests for password strength enforcement."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = PasswordHashingService(rounds=4)

    def test_empty_password_raises(self):
        """Test that empty password raises WeakPasswordError."""
        with pytest.raises(WeakPasswordError, match="cannot be empty"):
            self.service.hash("")

    def test_weak_password_raises_first_failure(self):
        """Test that the first unmet rule becomes the error message."""
        with pytest.raises(WeakPasswordError, match="at least 8 characters"):
            self.service.hash("Ab1!")

    def test_too_long_password_raises(self):
        """Test that passwords over bcrypt's 72-byte limit are rejected."""
        with pytest.raises(WeakPasswordError, match="72 bytes"):
            self.service.hash("A" + "a1!" * 30)

    def test_legacy_hash_skips_policy(self):
        """Test that enforce_policy=False hashes weak passwords."""
        hashed = self.service.hash("weak", enforce_policy=False)

        assert self.service.verify("weak", hashed) is True

    def test_evaluate_does_not_raise(self):
        """Test that evaluate reports weakness without raising."""
        strength = self.service.evaluate("weak")

        assert strength.is_valid is False


class TestGenerateToken:
    """Tests for remember-me token generation."""

    def test_tokens_are_unique_and_long(self):
        """Test that tokens carry at least 256 bits and do not repeat."""
        tokens = {generate_token() for _ in range(100)}

        assert len(tokens) == 100
        # 32 random bytes encode to 43 urlsafe base64 characters
        assert all(len(token) >= 43 for token in tokens)
