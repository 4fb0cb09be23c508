"""Unit tests for the Email value object."""

import pytest

from taskdesk_identity.domain.account import Email, InvalidEmailError, normalize_email


class TestEmail:
    """Tests for email validation and normalization."""

    def test_normalizes_case_and_whitespace(self):
        """Email is stored trimmed and lower-cased."""
        assert Email("  Grace.Hopper@Navy.MIL ").value == "grace.hopper@navy.mil"

    def test_equal_after_normalization(self):
        """Two spellings of one address compare equal."""
        assert Email("ADA@example.com") == Email("ada@example.com")

    @pytest.mark.parametrize(
        "value",
        ["", "   ", "plainaddress", "missing@tld", "@example.com", "a b@example.com"],
    )
    def test_rejects_malformed(self, value):
        """Malformed addresses raise InvalidEmailError."""
        with pytest.raises(InvalidEmailError):
            Email(value)

    def test_str(self):
        """str() returns the normalized value."""
        assert str(Email("Ada@Example.com")) == "ada@example.com"

    def test_normalize_email_does_not_validate(self):
        """normalize_email only trims and lower-cases."""
        assert normalize_email("  NOT-AN-EMAIL ") == "not-an-email"
