"""Tests for user input validation helpers."""

import pytest

from finpilot.core.modules.user.validators import default_display_name, normalize_email, validate_password
from finpilot.errors import ValidationError


class TestValidatePassword:
    def test_short_password_rejected(self):
        with pytest.raises(ValidationError, match="at least 6 characters"):
            validate_password("12345")

    def test_minimum_length_accepted(self):
        validate_password("123456")


class TestDisplayName:
    def test_uses_given_name(self):
        assert default_display_name("minji@example.com", "  Minji Kim ") == "Minji Kim"

    def test_blank_name_falls_back_to_local_part(self):
        assert default_display_name("minji@example.com", None) == "minji"
        assert default_display_name("minji@example.com", "   ") == "minji"


def test_normalize_email():
    assert normalize_email("  Minji@Example.COM ") == "minji@example.com"
